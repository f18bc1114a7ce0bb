"Theme descriptors, inheritance resolution and per-dealer overrides."

from .dealers import DealerOverrideRegistry, build_default_dealer_registry  # noqa: F401
from .errors import (  # noqa: F401
    CyclicThemeError,
    SelfExtendingThemeError,
    ThemeConfigurationError,
    ThemeRegistryEmpty,
    UnknownThemeError,
)
from .models import DealerOverrides, ResolvedTheme, ThemeDescriptor  # noqa: F401
from .registry import ThemeRegistry, build_default_theme_registry  # noqa: F401
from .resolver import resolve_theme, theme_chain  # noqa: F401
from .templates import TemplateDescriptor, TemplateRegistry, build_default_template_registry  # noqa: F401
