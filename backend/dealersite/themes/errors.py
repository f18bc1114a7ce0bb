"""
Exceptions raised while resolving theme inheritance chains.

These indicate a registration bug, not a transient failure, so callers
let them propagate instead of defaulting.
"""


class ThemeConfigurationError(Exception):
    """Base class for broken theme registrations."""


class ThemeRegistryEmpty(ThemeConfigurationError):
    """Raised when resolution is attempted with no themes registered."""


class CyclicThemeError(ThemeConfigurationError):
    """Raised when following `extends` revisits a theme."""

    def __init__(self, chain: list[str]) -> None:
        self.chain = list(chain)
        path = " -> ".join(self.chain)
        super().__init__(f"Cyclic theme extends: {self.chain[-1]} (chain: {path})")


class SelfExtendingThemeError(ThemeConfigurationError):
    """Raised when a theme names itself as its parent."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f'Theme "{key}" cannot extend itself')


class UnknownThemeError(ThemeConfigurationError):
    """Raised when a theme extends a key that is not registered."""

    def __init__(self, child: str, parent: str) -> None:
        self.child = child
        self.parent = parent
        super().__init__(f'Theme "{child}" extends unknown theme "{parent}"')
