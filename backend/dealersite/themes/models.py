from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from dealersite.components.models import ComponentFactory
from dealersite.core.merge import merge_components, merge_pages, merge_tokens


Tokens = dict[str, str]
# route -> {"seo": {...}, "blocks": [{"type": ..., "props": {...}}, ...]}
Pages = dict[str, dict[str, Any]]
Components = dict[str, ComponentFactory]


@dataclass(frozen=True)
class ThemeDescriptor:
    key: str
    name: str
    version: str
    extends: Optional[str] = None
    tokens: Tokens = field(default_factory=dict)
    pages: Pages = field(default_factory=dict)
    components: Components = field(default_factory=dict)


@dataclass(frozen=True)
class DealerOverrides:
    tokens: Tokens = field(default_factory=dict)
    pages: Pages = field(default_factory=dict)
    components: Components = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "DealerOverrides":
        """Build overrides from persisted data; component code cannot come from data."""
        data = data or {}
        return cls(
            tokens={str(k): str(v) for k, v in (data.get("tokens") or {}).items()},
            pages=dict(data.get("pages") or {}),
        )

    @property
    def is_empty(self) -> bool:
        return not (self.tokens or self.pages or self.components)

    def merged_with(self, other: "DealerOverrides | None") -> "DealerOverrides":
        """Layer ``other`` on top; its tokens, pages and components win."""
        if other is None or other.is_empty:
            return self
        return DealerOverrides(
            tokens=merge_tokens(self.tokens, other.tokens),
            pages=merge_pages(self.pages, other.pages),
            components=merge_components(self.components, other.components),
        )


@dataclass(frozen=True)
class ResolvedTheme:
    key: str
    name: str
    version: str
    tokens: Tokens
    pages: Pages
    components: Components
    # base-first keys of the chain that produced this theme
    lineage: tuple[str, ...] = ()

    def page(self, route: str) -> dict[str, Any] | None:
        return self.pages.get(route)
