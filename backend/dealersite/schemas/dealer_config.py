from __future__ import annotations

from datetime import datetime
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator
from pydantic.alias_generators import to_camel


# Wire format is camelCase (showHero, headingFont, ...); attributes stay snake_case.
_WIRE = ConfigDict(alias_generator=to_camel, populate_by_name=True)

MenuTarget = Literal["_self", "_blank", "_parent", "_top"]


class MenuItem(BaseModel):
    model_config = _WIRE

    id: str
    label: str
    slug: Optional[str] = None
    href: Optional[str] = None
    target: MenuTarget = "_self"
    order: int = 0
    children: Optional[List["MenuItem"]] = None

    @field_validator("id", "label")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class ThemeColors(BaseModel):
    model_config = _WIRE

    primary: str = "#3b82f6"
    secondary: str = "#64748b"
    accent: str = "#f59e0b"


class ThemeTypography(BaseModel):
    model_config = _WIRE

    heading_font: str = "Inter"
    body_font: str = "Inter"


class ThemeSpacing(BaseModel):
    model_config = _WIRE

    container_width: str = "1280px"
    section_padding: str = "4rem"


class ThemeConfig(BaseModel):
    model_config = _WIRE

    key: str = "base"
    colors: ThemeColors = Field(default_factory=ThemeColors)
    typography: ThemeTypography = Field(default_factory=ThemeTypography)
    spacing: ThemeSpacing = Field(default_factory=ThemeSpacing)


class SectionsConfig(BaseModel):
    model_config = _WIRE

    show_hero: StrictBool = True
    show_features: StrictBool = True
    show_footer: StrictBool = True
    show_inventory_link: StrictBool = True
    show_testimonials: StrictBool = False
    show_gallery: StrictBool = False
    show_contact_form: StrictBool = True


class ThemeTokens(BaseModel):
    model_config = _WIRE

    border_radius: str = "8px"
    shadow_sm: str = "0 1px 2px 0 rgb(0 0 0 / 0.05)"
    shadow_md: str = "0 4px 6px -1px rgb(0 0 0 / 0.1)"


class DealerConfig(BaseModel):
    """The fully populated site config handed to page rendering."""

    model_config = _WIRE

    theme: ThemeConfig = Field(default_factory=ThemeConfig)
    sections: SectionsConfig = Field(default_factory=SectionsConfig)
    menu: List[MenuItem] = Field(default_factory=list)
    tokens: ThemeTokens = Field(default_factory=ThemeTokens)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# Patch variants: every field optional, recursively. Used for merge-layer
# inputs only; the merged result is always checked against DealerConfig.
# Menu items stay strict because arrays replace wholesale when merged.


class ThemeColorsPatch(BaseModel):
    model_config = _WIRE

    primary: Optional[str] = None
    secondary: Optional[str] = None
    accent: Optional[str] = None


class ThemeTypographyPatch(BaseModel):
    model_config = _WIRE

    heading_font: Optional[str] = None
    body_font: Optional[str] = None


class ThemeSpacingPatch(BaseModel):
    model_config = _WIRE

    container_width: Optional[str] = None
    section_padding: Optional[str] = None


class ThemeConfigPatch(BaseModel):
    model_config = _WIRE

    key: Optional[str] = None
    colors: Optional[ThemeColorsPatch] = None
    typography: Optional[ThemeTypographyPatch] = None
    spacing: Optional[ThemeSpacingPatch] = None


class SectionsConfigPatch(BaseModel):
    model_config = _WIRE

    show_hero: Optional[StrictBool] = None
    show_features: Optional[StrictBool] = None
    show_footer: Optional[StrictBool] = None
    show_inventory_link: Optional[StrictBool] = None
    show_testimonials: Optional[StrictBool] = None
    show_gallery: Optional[StrictBool] = None
    show_contact_form: Optional[StrictBool] = None


class ThemeTokensPatch(BaseModel):
    model_config = _WIRE

    border_radius: Optional[str] = None
    shadow_sm: Optional[str] = None
    shadow_md: Optional[str] = None


class DealerConfigPatch(BaseModel):
    model_config = _WIRE

    theme: Optional[ThemeConfigPatch] = None
    sections: Optional[SectionsConfigPatch] = None
    menu: Optional[List[MenuItem]] = None
    tokens: Optional[ThemeTokensPatch] = None

    def to_payload(self) -> dict[str, Any]:
        # Unknown keys were already dropped; omitted and null fields never reach storage.
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True, exclude_none=True)


class CustomizationRead(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    dealer_id: str
    version: int
    status: Literal["DRAFT", "PUBLISHED"]
    data: dict
    created_at: datetime
    updated_at: datetime


class CustomizationRevisionRead(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    dealer_id: str
    version: int
    snapshot: dict
    created_at: datetime
