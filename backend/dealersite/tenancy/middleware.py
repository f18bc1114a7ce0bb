"""
Middleware for request-scoped tenancy concerns.
"""

import logging
from typing import Callable

from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware

from dealersite.core.config import settings
from dealersite.tenancy.constants import DEALER_HEADER, PATHNAME_HEADER
from dealersite.tenancy.context import TenantInfo
from dealersite.tenancy.errors import NoTenantResolvedError
from dealersite.tenancy.resolver import resolve_tenant

logger = logging.getLogger(__name__)


class TenantResolutionMiddleware(BaseHTTPMiddleware):
    """
    Resolves the dealer for every request and stores the TenantInfo on
    request.state.tenant (None when nothing matched). Downstream handlers
    decide whether a missing tenant is an error.
    """

    def __init__(self, app, session_factory: Callable[[], Session] | None = None) -> None:
        super().__init__(app)
        if session_factory is None:
            from dealersite.core.db import SessionLocal

            session_factory = SessionLocal
        self._session_factory = session_factory

    def _resolve(self, request) -> TenantInfo | None:
        # Blocking DB and cache I/O; called from a worker thread.
        header_name = settings.DEALER_HEADER_NAME or DEALER_HEADER
        pathname = request.headers.get(PATHNAME_HEADER) or request.url.path
        db = self._session_factory()
        try:
            return resolve_tenant(
                db,
                host=request.headers.get("host"),
                pathname=pathname,
                dealer_header=request.headers.get(header_name),
            )
        except NoTenantResolvedError:
            logger.debug("tenant.unresolved", extra={"host": request.headers.get("host")})
            return None
        finally:
            db.close()

    async def dispatch(self, request, call_next):
        tenant = await run_in_threadpool(self._resolve, request)
        request.state.tenant = tenant
        response = await call_next(request)
        if tenant is not None:
            response.headers[DEALER_HEADER] = tenant.tenant_id
        return response
