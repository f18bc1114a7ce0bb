"Tenancy utilities: tenant identity, resolution errors and request middleware."

from .constants import DEALER_HEADER  # noqa: F401
from .context import TenantInfo  # noqa: F401
from .errors import DealerNotFoundError, NoTenantResolvedError  # noqa: F401
