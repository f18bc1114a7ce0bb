from __future__ import annotations

from copy import deepcopy
from typing import Any

from dealersite.schemas.dealer_config import DealerConfig


# Layer 1: every field of DealerConfig at its schema default.
DEFAULT_DEALER_CONFIG: dict[str, Any] = DealerConfig().to_payload()

# Layer 2: per-theme defaults kept from the pre-registry theme table.
THEME_CONFIG_DEFAULTS: dict[str, dict[str, Any]] = {
    "base": {
        "theme": {
            "key": "base",
            "colors": {"primary": "#3b82f6", "secondary": "#64748b", "accent": "#f59e0b"},
            "typography": {"headingFont": "Inter", "bodyFont": "Inter"},
        },
        "tokens": {"borderRadius": "8px"},
    },
    "t1": {
        "theme": {
            "key": "t1",
            "colors": {"primary": "#dc2626", "secondary": "#1f2937", "accent": "#f97316"},
            "typography": {"headingFont": "Montserrat", "bodyFont": "Inter"},
        },
        "tokens": {"borderRadius": "12px"},
    },
    "t2": {
        "theme": {
            "key": "t2",
            "colors": {"primary": "#111827", "secondary": "#6b7280", "accent": "#d4af37"},
            "typography": {"headingFont": "Playfair Display", "bodyFont": "Lato"},
        },
        "tokens": {
            "borderRadius": "4px",
            "shadowMd": "0 10px 15px -3px rgb(0 0 0 / 0.1)",
        },
    },
}


def default_dealer_config() -> dict[str, Any]:
    return deepcopy(DEFAULT_DEALER_CONFIG)


def theme_config_defaults(theme_key: str | None) -> dict[str, Any]:
    """Layer 2 for `theme_key`; unknown keys contribute nothing."""
    return deepcopy(THEME_CONFIG_DEFAULTS.get(theme_key or "", {}))
