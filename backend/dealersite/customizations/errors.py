"""
Custom exceptions for the customization workflow.
"""

from __future__ import annotations

from typing import Any


class NoDraftError(Exception):
    """Raised when publishing or resetting a dealer that has no DRAFT."""

    def __init__(self, tenant_id: str) -> None:
        self.tenant_id = tenant_id
        super().__init__(f"No draft customization for dealer {tenant_id!r}")


class InvalidCustomizationError(ValueError):
    """A partial edit failed shape validation; nothing was written."""

    def __init__(self, tenant_id: str, errors: list[dict[str, Any]]) -> None:
        self.tenant_id = tenant_id
        self.errors = errors
        fields = ", ".join(".".join(str(part) for part in err.get("loc", ())) for err in errors)
        super().__init__(f"Invalid customization for dealer {tenant_id!r}: {fields or 'payload'}")


class UnknownTemplateError(LookupError):
    """The requested starter template is not registered."""

    def __init__(self, template_key: str) -> None:
        self.template_key = template_key
        super().__init__(f"Unknown template {template_key!r}")
