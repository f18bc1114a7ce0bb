from __future__ import annotations

import logging
from copy import deepcopy

from dealersite.core.merge import merge_components, merge_pages, merge_tokens
from dealersite.themes.errors import (
    CyclicThemeError,
    SelfExtendingThemeError,
    ThemeRegistryEmpty,
    UnknownThemeError,
)
from dealersite.themes.models import DealerOverrides, ResolvedTheme, ThemeDescriptor
from dealersite.themes.registry import ThemeRegistry


logger = logging.getLogger(__name__)


def theme_chain(registry: ThemeRegistry, theme_key: str | None) -> list[ThemeDescriptor]:
    """
    Return the inheritance chain for ``theme_key``, base first.

    Unknown keys fall back to the registry default. Raises
    SelfExtendingThemeError, CyclicThemeError or UnknownThemeError for
    broken registrations; nothing partial is returned.
    """
    current = registry.get(theme_key)
    if current is None:
        if theme_key is not None:
            logger.debug(
                "theme.unknown_key_defaulted",
                extra={"theme_key": theme_key, "default_key": registry.default_key},
            )
        current = registry.get(registry.default_key)
    if current is None:
        raise ThemeRegistryEmpty("No themes registered")

    seen: set[str] = set()
    walked: list[ThemeDescriptor] = []
    while current is not None:
        if current.key in seen:
            path = [theme.key for theme in walked] + [current.key]
            raise CyclicThemeError(path)
        seen.add(current.key)
        walked.append(current)

        parent_key = registry.normalize(current.extends)
        if not parent_key:
            break
        if parent_key == current.key:
            raise SelfExtendingThemeError(current.key)
        parent = registry.get(parent_key)
        if parent is None:
            raise UnknownThemeError(current.key, parent_key)
        current = parent

    walked.reverse()
    return walked


def resolve_theme(
    registry: ThemeRegistry,
    theme_key: str | None,
    dealer_overrides: DealerOverrides | None = None,
) -> ResolvedTheme:
    chain = theme_chain(registry, theme_key)

    tokens: dict[str, str] = {}
    pages: dict = {}
    components: dict = {}
    for theme in chain:
        tokens = merge_tokens(tokens, theme.tokens)
        pages = merge_pages(pages, theme.pages)
        components = merge_components(components, theme.components)

    if dealer_overrides is not None:
        tokens = merge_tokens(tokens, dealer_overrides.tokens)
        pages = merge_pages(pages, dealer_overrides.pages)
        components = merge_components(components, dealer_overrides.components)

    leaf = chain[-1]
    return ResolvedTheme(
        key=leaf.key,
        name=leaf.name,
        version=leaf.version,
        tokens=tokens,
        pages=deepcopy(pages),
        components=components,
        lineage=tuple(theme.key for theme in chain),
    )
