"""
Starter templates a dealer can pick from the admin.

A template is a ready-made starting point: a site config (colors, fonts,
which sections show) plus theme tokens and page blocks. Selecting one
replaces the dealer's DRAFT; nothing goes live until it is published.
"""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator

from dealersite.themes.models import Pages, Tokens


@dataclass(frozen=True)
class TemplateDescriptor:
    key: str
    name: str
    version: str
    # Deep-partial site config in wire (camelCase) form.
    config: dict[str, Any] = field(default_factory=dict)
    tokens: Tokens = field(default_factory=dict)
    pages: Pages = field(default_factory=dict)

    def draft_data(self) -> dict[str, Any]:
        """
        DRAFT payload for this template. The "template" entry keeps the
        tokens and pages so theme resolution can read them back.
        """
        data = deepcopy(self.config)
        data["template"] = {
            "key": self.key,
            "version": self.version,
            "tokens": dict(self.tokens),
            "pages": deepcopy(self.pages),
        }
        return data


class TemplateRegistry:
    def __init__(self, descriptors: Iterable[TemplateDescriptor] = ()) -> None:
        self._templates: dict[str, TemplateDescriptor] = {}
        for descriptor in descriptors:
            self.register(descriptor)

    def register(self, descriptor: TemplateDescriptor) -> TemplateDescriptor:
        if descriptor.key in self._templates:
            raise ValueError(f'Template "{descriptor.key}" is already registered')
        self._templates[descriptor.key] = descriptor
        return descriptor

    def get(self, key: str | None) -> TemplateDescriptor | None:
        if key is None:
            return None
        return self._templates.get(key)

    def keys(self) -> list[str]:
        return list(self._templates)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key in self._templates

    def __iter__(self) -> Iterator[TemplateDescriptor]:
        return iter(self._templates.values())

    def __len__(self) -> int:
        return len(self._templates)


SAAS_TEMPLATE = TemplateDescriptor(
    key="saas",
    name="SaaS Starter",
    version="1.0.0",
    config={
        "theme": {
            "colors": {"primary": "#6366f1", "secondary": "#4f46e5"},
            "typography": {"headingFont": "Inter", "bodyFont": "Inter"},
        },
        "sections": {"showHero": True, "showFeatures": True, "showTestimonials": True},
        "tokens": {"borderRadius": "16px"},
    },
    tokens={
        "color-brand-500": "#6366f1",
        "color-brand-600": "#4f46e5",
        "radius": "16px",
        "font-sans": "Inter, system-ui",
        "bg": "#ffffff",
        "fg": "#0f172a",
    },
    pages={
        "/": {
            "seo": {"title": "Grow faster", "description": "Launch your SaaS quickly."},
            "blocks": [
                {"type": "Hero", "props": {"title": "Grow faster", "subtitle": "Launch in days, not months."}},
                {
                    "type": "Features",
                    "props": {
                        "items": [
                            {"title": "Templates", "text": "Start from a polished base."},
                            {"title": "Theming", "text": "Brand colors and radius."},
                            {"title": "SEO-ready", "text": "Meta tags per page."},
                        ]
                    },
                },
                {
                    "type": "Pricing",
                    "props": {
                        "plans": [
                            {"name": "Starter", "price": "$9"},
                            {"name": "Pro", "price": "$29"},
                            {"name": "Business", "price": "$99"},
                        ]
                    },
                },
                {"type": "Footer", "props": {"brand": "Acme"}},
            ],
        },
    },
)

CLINIC_TEMPLATE = TemplateDescriptor(
    key="clinic",
    name="Clinic",
    version="1.0.0",
    config={
        "theme": {"colors": {"primary": "#06b6d4", "secondary": "#0891b2"}},
        "sections": {"showHero": True, "showFeatures": True, "showContactForm": True},
        "tokens": {"borderRadius": "14px"},
    },
    tokens={
        "color-brand-500": "#06b6d4",
        "color-brand-600": "#0891b2",
        "radius": "14px",
    },
    pages={
        "/": {
            "seo": {"title": "Caring clinic", "description": "Modern health services"},
            "blocks": [
                {"type": "Hero", "props": {"title": "Your health, our mission", "subtitle": "Book appointments online"}},
                {
                    "type": "Features",
                    "props": {
                        "items": [
                            {"title": "Experienced doctors"},
                            {"title": "24/7 Support"},
                            {"title": "Online booking"},
                        ]
                    },
                },
                {"type": "Footer", "props": {"brand": "CarePlus"}},
            ],
        },
    },
)

PORTFOLIO_TEMPLATE = TemplateDescriptor(
    key="portfolio",
    name="Portfolio",
    version="1.0.0",
    config={
        "theme": {"colors": {"primary": "#f97316", "secondary": "#ea580c"}},
        "sections": {"showHero": True, "showGallery": True, "showInventoryLink": False},
        "tokens": {"borderRadius": "20px"},
    },
    tokens={
        "color-brand-500": "#f97316",
        "color-brand-600": "#ea580c",
        "radius": "20px",
    },
    pages={
        "/": {
            "seo": {"title": "Creative work", "description": "Show your best projects"},
            "blocks": [
                {"type": "Hero", "props": {"title": "I build delightful products", "subtitle": "Designer & Developer"}},
                {
                    "type": "Features",
                    "props": {"items": [{"title": "Web Apps"}, {"title": "Branding"}, {"title": "Motion"}]},
                },
                {"type": "Footer", "props": {"brand": "YourName"}},
            ],
        },
    },
)


def build_default_template_registry() -> TemplateRegistry:
    return TemplateRegistry([SAAS_TEMPLATE, CLINIC_TEMPLATE, PORTFOLIO_TEMPLATE])
