"""
Owner dashboard routes.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.api.v1.schemas.catalog import CatalogStatsResponse
from storefront.core.database import get_db
from storefront.core.dependencies import RequestContext, require_tenant_context
from storefront.services.catalog import CatalogService

router = APIRouter(
    prefix="/dashboard",
    tags=["dashboard"],
)


@router.get(
    "/stats",
    response_model=CatalogStatsResponse,
    summary="Catalog summary",
    description="Product count, total views and clicks, and product count per status.",
    status_code=status.HTTP_200_OK,
    responses={
        200: {"description": "Summary retrieved successfully"},
        401: {"description": "Unauthorized - authentication required"},
    },
)
async def get_stats(
    ctx: RequestContext = Depends(require_tenant_context),
    db: AsyncSession = Depends(get_db),
) -> CatalogStatsResponse:
    stats = await CatalogService().get_stats(db, ctx.tenant_id)
    return CatalogStatsResponse(**stats)
