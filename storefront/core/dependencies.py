"""
Request context and service dependencies for protected endpoints
Reference: https://fastapi.tiangolo.com/tutorial/dependencies/
"""
import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.database import get_db
from storefront.core.exceptions import AuthenticationError
from storefront.core.security import decode_access_token
from storefront.services.auth import AuthService

logger = logging.getLogger(__name__)

# auto_error=False so a missing header renders as our own 401 body
# Reference: https://fastapi.tiangolo.com/reference/security/#fastapi.security.HTTPBearer
security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class RequestContext:
    """
    Who is calling: derived from the bearer token once per request and passed
    explicitly to the services.
    """
    account_id: str
    tenant_id: Optional[str]
    role: str


async def get_request_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> RequestContext:
    """
    Dependency to resolve the caller from the Authorization header.

    The account is re-read from the database so a token issued before the
    account got its tenant (or for a removed account) reflects current state.

    Usage:
        @router.get("/protected")
        async def protected_route(ctx: RequestContext = Depends(get_request_context)):
            return {"account_id": ctx.account_id}

    Raises:
        AuthenticationError: 401 if the token is missing, invalid or expired,
            or the account no longer exists
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError()

    claims = decode_access_token(credentials.credentials)
    account = await AuthService().get_account(db, claims["sub"])
    if account is None:
        logger.warning(f"Session token for unknown account {claims['sub']}")
        raise AuthenticationError("Invalid or expired session")

    return RequestContext(
        account_id=account.id,
        tenant_id=account.tenant_id,
        role=account.role,
    )


async def require_tenant_context(
    ctx: RequestContext = Depends(get_request_context),
) -> RequestContext:
    """
    Same as get_request_context, for endpoints that act on the caller's tenant.

    Raises:
        AuthenticationError: 401 if the account has no tenant
    """
    if not ctx.tenant_id:
        logger.warning(f"Account {ctx.account_id} has no business attached")
        raise AuthenticationError()
    return ctx
