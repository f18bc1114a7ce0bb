import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

from prometheus_client import REGISTRY

from dealersite.components.builtin import base_theme_components
from dealersite.components.models import ComponentImplementation, ComponentLoadError, component_factory
from dealersite.components.registry import ComponentRegistry, dealer_scope, theme_scope
from dealersite.components.resolver import ComponentResolver
from dealersite.tenancy.context import TenantInfo
from dealersite.themes import (
    ThemeDescriptor,
    ThemeRegistry,
    build_default_dealer_registry,
    build_default_theme_registry,
)


def _resolver():
    themes = build_default_theme_registry()
    registry = ComponentRegistry.from_registries(themes, build_default_dealer_registry())
    return ComponentResolver(registry, themes)


def _level_count(level: str) -> float:
    return REGISTRY.get_sample_value("component_resolutions_total", {"level": level}) or 0.0


def test_dealer_override_wins():
    resolver = _resolver()
    hero = resolver.resolve("Hero", TenantInfo(tenant_id="102324", theme_key="t1"))
    assert hero.source == "dealer:102324"
    assert "hero--102324" in hero(title="Welcome")


def test_theme_override_beats_base_and_base_fills_gaps():
    resolver = _resolver()
    tenant = TenantInfo(tenant_id="555", theme_key="t1")
    assert resolver.resolve("Hero", tenant).source == "theme:t1"
    assert resolver.resolve("Footer", tenant).source == "theme:base"


def test_ancestor_theme_supplies_components_for_grandchild():
    resolver = _resolver()
    hero = resolver.resolve("Hero", TenantInfo(tenant_id="555", theme_key="t2"))
    assert hero.source == "theme:t1"


def test_unknown_component_renders_missing_marker():
    resolver = _resolver()
    before = _level_count("fallback")
    widget = resolver.resolve("Carousel", TenantInfo(tenant_id="100133", theme_key="base"))
    assert widget.is_fallback
    assert widget() == '<div data-missing-component="Carousel">Missing component: Carousel</div>'
    assert _level_count("fallback") == before + 1


def test_failing_factory_counts_as_missing_at_that_level():
    themes = build_default_theme_registry()
    registry = ComponentRegistry.from_registries(themes)

    def broken():
        raise ComponentLoadError("bundle missing")

    registry.register(dealer_scope("777"), "Hero", broken)
    registry.register(theme_scope("t1"), "Hero", broken)
    resolver = ComponentResolver(registry, themes)

    hero = resolver.resolve("Hero", TenantInfo(tenant_id="777", theme_key="t1"))
    assert hero.source == "theme:base"


def test_base_theme_is_consulted_for_themes_outside_its_chain():
    themes = ThemeRegistry(
        [
            ThemeDescriptor(key="base", name="Base", version="1", components=base_theme_components()),
            ThemeDescriptor(key="standalone", name="Standalone", version="1"),
        ]
    )
    resolver = ComponentResolver(ComponentRegistry.from_registries(themes), themes)
    nav = resolver.resolve("Nav", TenantInfo(tenant_id="1", theme_key="standalone"))
    assert nav.source == "theme:base"


def test_results_are_memoized_per_tenant_theme_and_name():
    themes = build_default_theme_registry()
    registry = ComponentRegistry.from_registries(themes)
    calls = []
    inner = component_factory("Badge", "theme:base", lambda props: "<span>badge</span>")

    def counting_factory() -> ComponentImplementation:
        calls.append(1)
        return inner()

    registry.register(theme_scope("base"), "Badge", counting_factory)
    resolver = ComponentResolver(registry, themes)
    tenant = TenantInfo(tenant_id="9", theme_key="base")

    first = resolver.resolve("Badge", tenant)
    second = resolver.resolve("Badge", tenant)
    assert first is second
    assert len(calls) == 1
    assert len(resolver) == 1

    resolver.resolve("Badge", TenantInfo(tenant_id="9", theme_key="t1"))
    assert len(calls) == 2

    resolver.clear()
    assert len(resolver) == 0
    resolver.resolve("Badge", tenant)
    assert len(calls) == 3


def test_resolve_many_returns_mapping_by_name():
    resolver = _resolver()
    resolved = resolver.resolve_many(["Hero", "Nav", "Footer"], TenantInfo(tenant_id="100133", theme_key="base"))
    assert {name: impl.source for name, impl in resolved.items()} == {
        "Hero": "theme:base",
        "Nav": "dealer:100133",
        "Footer": "theme:base",
    }


def test_registry_lists_names_per_scope():
    themes = build_default_theme_registry()
    registry = ComponentRegistry.from_registries(themes, build_default_dealer_registry())
    assert registry.names(dealer_scope("102324")) == ["Hero", "Nav"]
    assert registry.names(theme_scope("t1")) == ["Hero"]
