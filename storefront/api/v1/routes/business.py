"""
Routes for the owner's business profile.
Reference: https://fastapi.tiangolo.com/tutorial/body-updates/#partial-updates-with-patch
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.api.v1.schemas.tenant import TenantResponse, TenantUpdate, TenantUpdateResponse
from storefront.core.database import get_db
from storefront.core.dependencies import RequestContext, require_tenant_context
from storefront.core.exceptions import StorefrontError
from storefront.services.tenant import TenantService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/business",
    tags=["business"],
)


@router.get(
    "/me",
    response_model=TenantResponse,
    summary="Get my business",
    description="Return the business profile owned by the authenticated account.",
    status_code=status.HTTP_200_OK,
    responses={
        200: {"description": "Business profile retrieved successfully"},
        401: {"description": "Unauthorized - authentication required"},
        404: {"description": "Business not found"},
    },
)
async def get_my_business(
    ctx: RequestContext = Depends(require_tenant_context),
    db: AsyncSession = Depends(get_db),
) -> TenantResponse:
    tenant = await TenantService().get_tenant(db, ctx.tenant_id)
    return TenantResponse.model_validate(tenant)


@router.patch(
    "/{tenant_id}",
    response_model=TenantUpdateResponse,
    summary="Update business profile",
    description="Partial update of the caller's business. The slug cannot be changed.",
    status_code=status.HTTP_200_OK,
    responses={
        200: {"description": "Business updated successfully"},
        400: {"description": "Invalid field value"},
        401: {"description": "Unauthorized - authentication required"},
        403: {"description": "Forbidden - not the caller's business"},
        404: {"description": "Business not found"},
        500: {"description": "Internal server error"},
    },
)
async def update_business(
    tenant_id: str,
    changes: TenantUpdate,
    ctx: RequestContext = Depends(require_tenant_context),
    db: AsyncSession = Depends(get_db),
) -> TenantUpdateResponse:
    """
    Update the business profile.

    **Authorization:**
    - ``tenant_id`` must be the caller's own business, otherwise 403 and the
      record is left unchanged
    """
    tenant_service = TenantService()
    try:
        tenant = await tenant_service.update_tenant(db, ctx.tenant_id, tenant_id, changes)
        return TenantUpdateResponse(business=TenantResponse.model_validate(tenant))
    except (StorefrontError, HTTPException):
        raise
    except Exception as e:
        logger.error(
            f"Unexpected error updating business {tenant_id}: {type(e).__name__}: {e}",
            exc_info=True,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while updating the business",
        ) from e
