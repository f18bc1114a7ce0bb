"""
Custom exceptions for tenant resolution.
"""


class NoTenantResolvedError(Exception):
    """Raised when neither header, host nor a default identifies a dealer."""


class DealerNotFoundError(Exception):
    """Raised when a dealer id does not exist or the dealer is inactive."""

    def __init__(self, tenant_id: str) -> None:
        self.tenant_id = tenant_id
        super().__init__(f"Dealer {tenant_id!r} not found")
