"""
Lightweight tenant identity passed to the resolvers.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class TenantInfo:
    """
    Who the request is for: the dealer, its active theme and the locale.
    """

    tenant_id: str
    theme_key: str
    locale: str = "en"
