# Built-in component implementations for the shipped themes and the dealers
# that carry code-level overrides. Markup is minimal; the page renderer owns
# presentation.

from __future__ import annotations

from html import escape
from typing import Any, Mapping

from dealersite.components.models import ComponentFactory, component_factory


def _text(props: Mapping[str, Any], key: str, default: str = "") -> str:
    value = props.get(key)
    return escape(str(value)) if value not in (None, "") else default


def _wrap(name: str, source: str, inner: str, tag: str = "section") -> str:
    return f'<{tag} data-component="{name}" data-source="{source}">{inner}</{tag}>'


def _hero(source: str, css_class: str = "hero"):
    def render(props: Mapping[str, Any]) -> str:
        title = _text(props, "title")
        subtitle = _text(props, "subtitle")
        inner = f'<div class="{css_class}"><h1>{title}</h1>'
        if subtitle:
            inner += f"<p>{subtitle}</p>"
        cta_text = _text(props, "ctaText")
        if cta_text:
            inner += f'<a href="{_text(props, "ctaLink", "#")}">{cta_text}</a>'
        inner += "</div>"
        return _wrap("Hero", source, inner)

    return render


def _features(source: str):
    def render(props: Mapping[str, Any]) -> str:
        items = props.get("items") or []
        rows = "".join(
            f"<li><h3>{_text(item, 'title')}</h3><p>{_text(item, 'description')}</p></li>"
            for item in items
            if isinstance(item, Mapping)
        )
        heading = _text(props, "title")
        inner = (f"<h2>{heading}</h2>" if heading else "") + f"<ul>{rows}</ul>"
        return _wrap("Features", source, inner)

    return render


def _footer(source: str):
    def render(props: Mapping[str, Any]) -> str:
        brand = props.get("brand") or {}
        name = _text(brand, "name") if isinstance(brand, Mapping) else ""
        return _wrap("Footer", source, f"<p>{name}</p>", tag="footer")

    return render


def _nav(name: str, source: str):
    def render(props: Mapping[str, Any]) -> str:
        items = props.get("items") or []
        links = "".join(
            f'<a href="{_text(item, "href", "#")}">{_text(item, "label")}</a>'
            for item in items
            if isinstance(item, Mapping)
        )
        return _wrap(name, source, links, tag="nav")

    return render


def _section_wrapper(source: str):
    def render(props: Mapping[str, Any]) -> str:
        children = props.get("children") or ""
        padding = _text(props, "padding", "var(--section-padding)")
        return (
            f'<section data-component="SectionWrapper" data-source="{source}" '
            f'style="padding:{padding}">{children}</section>'
        )

    return render


def base_theme_components() -> dict[str, ComponentFactory]:
    source = "theme:base"
    return {
        "Hero": component_factory("Hero", source, _hero(source)),
        "Features": component_factory("Features", source, _features(source)),
        "Footer": component_factory("Footer", source, _footer(source)),
        "MainNav": component_factory("MainNav", source, _nav("MainNav", source)),
        "Nav": component_factory("Nav", source, _nav("Nav", source)),
        "SectionWrapper": component_factory("SectionWrapper", source, _section_wrapper(source)),
    }


def t1_theme_components() -> dict[str, ComponentFactory]:
    source = "theme:t1"
    return {
        "Hero": component_factory("Hero", source, _hero(source, css_class="hero hero--t1")),
    }


def dealer_components(dealer_id: str) -> dict[str, ComponentFactory]:
    source = f"dealer:{dealer_id}"
    if dealer_id == "102324":
        return {
            "Hero": component_factory("Hero", source, _hero(source, css_class="hero hero--102324")),
            "Nav": component_factory("Nav", source, _nav("Nav", source)),
        }
    if dealer_id == "100133":
        return {
            "Nav": component_factory("Nav", source, _nav("Nav", source)),
        }
    return {}
