from __future__ import annotations

from dataclasses import dataclass
from html import escape
from typing import Any, Callable, Mapping


RenderFn = Callable[[Mapping[str, Any]], str]


class ComponentLoadError(Exception):
    """Raised by a factory whose implementation cannot be produced."""


@dataclass(frozen=True)
class ComponentImplementation:
    """
    A resolved component binding.

    `source` records which scope supplied it (``dealer:<id>``,
    ``theme:<key>`` or ``fallback``) so renderers and logs can tell an
    override from an inherited implementation.
    """

    name: str
    source: str
    render: RenderFn

    @property
    def is_fallback(self) -> bool:
        return self.source == "fallback"

    def __call__(self, **props: Any) -> str:
        return self.render(props)


ComponentFactory = Callable[[], ComponentImplementation]


def component_factory(name: str, source: str, render: RenderFn) -> ComponentFactory:
    def factory() -> ComponentImplementation:
        return ComponentImplementation(name=name, source=source, render=render)

    factory.__name__ = f"{source}:{name}"
    return factory


def missing_component(name: str) -> ComponentImplementation:
    """Placeholder that renders a visible marker instead of failing the page."""
    safe_name = escape(name)

    def render(props: Mapping[str, Any]) -> str:
        children = props.get("children")
        body = escape(str(children)) if children else f"Missing component: {safe_name}"
        return f'<div data-missing-component="{safe_name}">{body}</div>'

    return ComponentImplementation(name=name, source="fallback", render=render)
