from __future__ import annotations

from typing import TYPE_CHECKING

from dealersite.components.models import ComponentFactory

if TYPE_CHECKING:
    from dealersite.themes.dealers import DealerOverrideRegistry
    from dealersite.themes.registry import ThemeRegistry


def dealer_scope(dealer_id: str) -> str:
    return f"dealer:{dealer_id}"


def theme_scope(theme_key: str) -> str:
    return f"theme:{theme_key}"


class ComponentRegistry:
    """
    Static `(scope, name) -> factory` table built at startup.

    Scopes are ``dealer:<id>`` and ``theme:<key>``. Each theme contributes
    only the components it declares itself; inheritance is handled by the
    resolver walking the theme chain.
    """

    def __init__(self) -> None:
        self._factories: dict[tuple[str, str], ComponentFactory] = {}

    def register(self, scope: str, name: str, factory: ComponentFactory) -> None:
        self._factories[(scope, name)] = factory

    def lookup(self, scope: str, name: str) -> ComponentFactory | None:
        return self._factories.get((scope, name))

    def names(self, scope: str) -> list[str]:
        return sorted(name for entry_scope, name in self._factories if entry_scope == scope)

    def __len__(self) -> int:
        return len(self._factories)

    @classmethod
    def from_registries(
        cls,
        themes: ThemeRegistry,
        dealers: DealerOverrideRegistry | None = None,
    ) -> "ComponentRegistry":
        registry = cls()
        for theme in themes:
            for name, factory in theme.components.items():
                registry.register(theme_scope(theme.key), name, factory)
        for dealer_id, overrides in dealers or ():
            for name, factory in overrides.components.items():
                registry.register(dealer_scope(dealer_id), name, factory)
        return registry
