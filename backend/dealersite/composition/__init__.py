"Layered site config composition and design-variable rendering."

from .compositor import ConfigCompositor, compose_layers  # noqa: F401
from .defaults import default_dealer_config, theme_config_defaults  # noqa: F401
from .design import generate_design_variables, render_css_variables  # noqa: F401
