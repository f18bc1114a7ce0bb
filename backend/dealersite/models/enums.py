from enum import Enum

# Stored as strings (native enums disabled for easier evolution).


class CustomizationStatusEnum(str, Enum):
    # At most one row per status per dealer.
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
