from __future__ import annotations

from typing import Mapping

from dealersite.schemas.dealer_config import DealerConfig


def generate_design_variables(config: DealerConfig) -> dict[str, str]:
    """Flatten a resolved config into CSS custom property values."""
    theme = config.theme
    return {
        "color-primary": theme.colors.primary,
        "color-secondary": theme.colors.secondary,
        "color-accent": theme.colors.accent,
        "font-heading": theme.typography.heading_font,
        "font-body": theme.typography.body_font,
        "container-width": theme.spacing.container_width,
        "section-padding": theme.spacing.section_padding,
        "border-radius": config.tokens.border_radius,
        "shadow-sm": config.tokens.shadow_sm,
        "shadow-md": config.tokens.shadow_md,
    }


def render_css_variables(variables: Mapping[str, str], *, selector: str = ":root") -> str:
    body = "".join(f"--{name}:{value};" for name, value in variables.items())
    return f"{selector}{{{body}}}"
