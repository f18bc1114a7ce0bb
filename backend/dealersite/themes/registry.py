from __future__ import annotations

from typing import Iterable, Iterator

from dealersite.components.builtin import base_theme_components, t1_theme_components
from dealersite.core.config import settings
from dealersite.themes.models import ThemeDescriptor


class ThemeRegistry:
    """
    Process-scoped table of theme descriptors, filled at startup.

    Instances are passed to the resolvers explicitly, so tests can build
    an isolated registry, including broken ones.
    """

    def __init__(
        self,
        descriptors: Iterable[ThemeDescriptor] = (),
        *,
        default_key: str | None = None,
        aliases: dict[str, str] | None = None,
    ) -> None:
        self._themes: dict[str, ThemeDescriptor] = {}
        self._aliases: dict[str, str] = dict(aliases or {})
        self.default_key = default_key or settings.DEFAULT_THEME_KEY
        for descriptor in descriptors:
            self.register(descriptor)

    def register(self, descriptor: ThemeDescriptor) -> ThemeDescriptor:
        if descriptor.key in self._themes:
            raise ValueError(f'Theme "{descriptor.key}" is already registered')
        self._themes[descriptor.key] = descriptor
        return descriptor

    def alias(self, legacy_key: str, key: str) -> None:
        self._aliases[legacy_key] = key

    def normalize(self, key: str | None) -> str | None:
        if key is None:
            return None
        return self._aliases.get(key, key)

    def get(self, key: str | None) -> ThemeDescriptor | None:
        normalized = self.normalize(key)
        if normalized is None:
            return None
        return self._themes.get(normalized)

    def keys(self) -> list[str]:
        return list(self._themes)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None

    def __iter__(self) -> Iterator[ThemeDescriptor]:
        return iter(self._themes.values())

    def __len__(self) -> int:
        return len(self._themes)


BASE_THEME = ThemeDescriptor(
    key="base",
    name="Base Theme",
    version="1.0.0",
    tokens={
        "color-brand-500": "#0ea5e9",
        "color-brand-600": "#0284c7",
        "radius": "16px",
        "font-sans": "Inter, system-ui",
        "bg": "#ffffff",
        "fg": "#0f172a",
    },
    pages={
        "/": {
            "blocks": [
                {"type": "Hero", "props": {"title": "Drive better", "subtitle": "Finance available"}},
                {"type": "Footer"},
            ],
        },
        "/inventory": {
            "blocks": [
                {"type": "Hero", "props": {"title": "Inventory", "subtitle": "Browse all vehicles"}},
                {"type": "Footer"},
            ],
        },
    },
    components=base_theme_components(),
)

T1_THEME = ThemeDescriptor(
    key="t1",
    name="Theme T1 (child of base)",
    version="1.0.0",
    extends="base",
    tokens={
        "color-brand-500": "#6366f1",
        "color-brand-600": "#4f46e5",
        "radius": "18px",
    },
    pages={
        # Only the first block is replaced; the Footer comes from base.
        "/": {
            "blocks": [
                {"type": "Hero", "props": {"title": "T1 - Faster & Sleeker", "subtitle": "Child theme of base"}},
            ],
        },
        "/inventory": {
            "blocks": [
                {"type": "Hero", "props": {"title": "Inventory - T1", "subtitle": "Curated vehicles"}},
            ],
        },
    },
    components=t1_theme_components(),
)

T2_THEME = ThemeDescriptor(
    key="t2",
    name="Theme T2 (luxury, child of t1)",
    version="1.0.0",
    extends="t1",
    tokens={
        "color-brand-500": "#111827",
        "color-brand-600": "#b45309",
        "font-sans": "Playfair Display, serif",
    },
    pages={
        "/": {
            "seo": {"title": "Luxury vehicles"},
        },
    },
)


def build_default_theme_registry() -> ThemeRegistry:
    registry = ThemeRegistry([BASE_THEME, T1_THEME, T2_THEME])
    registry.alias("classic", "base")
    registry.alias("luxury", "t2")
    return registry
