from __future__ import annotations

from typing import Iterator

from dealersite.components.builtin import dealer_components
from dealersite.themes.models import DealerOverrides


class DealerOverrideRegistry:
    """Per-dealer token/page/component overrides registered at startup."""

    def __init__(self, overrides: dict[str, DealerOverrides] | None = None) -> None:
        self._overrides: dict[str, DealerOverrides] = {}
        for dealer_id, entry in (overrides or {}).items():
            self.register(dealer_id, entry)

    def register(self, dealer_id: str, overrides: DealerOverrides) -> DealerOverrides:
        self._overrides[str(dealer_id)] = overrides
        return overrides

    def get(self, dealer_id: str | None) -> DealerOverrides | None:
        if dealer_id is None:
            return None
        return self._overrides.get(str(dealer_id))

    def __iter__(self) -> Iterator[tuple[str, DealerOverrides]]:
        return iter(self._overrides.items())

    def __len__(self) -> int:
        return len(self._overrides)


def build_default_dealer_registry() -> DealerOverrideRegistry:
    return DealerOverrideRegistry(
        {
            "102324": DealerOverrides(components=dealer_components("102324")),
            "100133": DealerOverrides(components=dealer_components("100133")),
        }
    )
