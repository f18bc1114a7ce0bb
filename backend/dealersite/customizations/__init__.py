"Draft/publish workflow over per-dealer customization records."

from .errors import InvalidCustomizationError, NoDraftError, UnknownTemplateError  # noqa: F401
from .store import CustomizationStore, SqlCustomizationStore  # noqa: F401
from .workflow import CustomizationWorkflow  # noqa: F401
