"""
Authentication routes: registration, login and the current account
Reference: https://fastapi.tiangolo.com/tutorial/security/
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.api.v1.schemas.auth import (
    AccountResponse,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
)
from storefront.core.config import settings
from storefront.core.database import get_db
from storefront.core.dependencies import RequestContext, get_request_context
from storefront.core.exceptions import AuthenticationError, StorefrontError
from storefront.core.security import create_access_token
from storefront.services.auth import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
)


@router.post(
    "/register",
    response_model=RegisterResponse,
    summary="Register a business",
    description="Create an owner account together with its business and public storefront slug.",
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "Account and business created"},
        400: {"description": "Missing fields or password too short"},
        409: {"description": "Email already registered"},
        500: {"description": "Internal server error"},
    },
)
async def register(
    registration: RegisterRequest,
    db: AsyncSession = Depends(get_db),
) -> RegisterResponse:
    """
    Register a new business owner.

    The storefront slug is derived from the business name; a name already in
    use gets the first free numeric suffix (``joes-auto-repair-1``).
    """
    auth_service = AuthService()
    try:
        account, tenant = await auth_service.register_business(db, registration)
        logger.info(f"Registered account {account.id} with business '{tenant.slug}'")
        return RegisterResponse(account_id=account.id, tenant_id=tenant.id, slug=tenant.slug)
    except (StorefrontError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"Unexpected error during registration: {type(e).__name__}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred during registration",
        ) from e


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Log in",
    description="Verify email and password and issue a bearer session token.",
    status_code=status.HTTP_200_OK,
    responses={
        200: {"description": "Login successful"},
        401: {"description": "Invalid email or password"},
        500: {"description": "Internal server error"},
    },
)
async def login(
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> LoginResponse:
    auth_service = AuthService()
    try:
        account = await auth_service.authenticate(db, credentials.email, credentials.password)
    except AuthenticationError:
        logger.warning("Failed login attempt")
        raise
    except Exception as e:
        logger.error(f"Unexpected error during login: {type(e).__name__}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred during login",
        ) from e

    return LoginResponse(
        access_token=create_access_token(account.id, account.tenant_id),
        expires_in=settings.ACCESS_TOKEN_EXPIRE_SECONDS,
        account=AccountResponse.model_validate(account),
    )


@router.get(
    "/me",
    response_model=AccountResponse,
    summary="Get current account",
    description="Return the account behind the bearer token.",
    status_code=status.HTTP_200_OK,
    responses={
        200: {"description": "Current account"},
        401: {"description": "Unauthorized - authentication required"},
    },
)
async def get_me(
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
) -> AccountResponse:
    account = await AuthService().get_account(db, ctx.account_id)
    if account is None:
        raise AuthenticationError()
    return AccountResponse.model_validate(account)
