"""
Public storefront routes for anonymous visitors.

Sold products never appear in listings. Every lookup failure returns the
same 404 body so visitors cannot probe which slugs or products exist.

Reference: https://fastapi.tiangolo.com/tutorial/query-params/
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.api.v1.routes.products import page_to_pagination
from storefront.api.v1.schemas.catalog import (
    MessageResponse,
    ProductSort,
    PublicCatalogItemResponse,
    PublicCatalogPageResponse,
)
from storefront.api.v1.schemas.storefront import StorefrontProductResponse, StorefrontResponse
from storefront.api.v1.schemas.tenant import PublicTenantResponse
from storefront.core.config import settings
from storefront.core.database import get_db
from storefront.core.exceptions import StorefrontError
from storefront.services.catalog import ProductFilter
from storefront.services.storefront import StorefrontService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/public",
    tags=["public"],
    responses={
        404: {"description": "Not found"},
        500: {"description": "Internal server error"},
    },
)


def public_filter(
    search: Optional[str] = Query(None, description="Case-insensitive match on product name"),
    category: Optional[str] = Query(None, description="Filter by category"),
    sort: ProductSort = Query(ProductSort.NEWEST, description="newest, price-low or price-high"),
    min_price: Optional[float] = Query(None, ge=0, description="Minimum price (inclusive)"),
    max_price: Optional[float] = Query(None, ge=0, description="Maximum price (inclusive)"),
) -> ProductFilter:
    """Query parameters shared by the public listing endpoints."""
    if min_price is not None and max_price is not None and min_price > max_price:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="min_price must not be greater than max_price",
        )
    return ProductFilter(
        search=search,
        category=category,
        sort=sort,
        min_price=min_price,
        max_price=max_price,
    )


@router.get(
    "/business/{slug}",
    response_model=PublicTenantResponse,
    summary="Get business by slug",
    status_code=status.HTTP_200_OK,
)
async def get_business(
    slug: str,
    db: AsyncSession = Depends(get_db),
) -> PublicTenantResponse:
    tenant = await StorefrontService().resolve_tenant(db, slug)
    return PublicTenantResponse.model_validate(tenant)


@router.get(
    "/products/{tenant_id}",
    response_model=PublicCatalogPageResponse,
    summary="List a business's products",
    description="Visible (not sold) products of a business, with search, category, price range and sort.",
    status_code=status.HTTP_200_OK,
)
async def list_public_products(
    tenant_id: str,
    filters: ProductFilter = Depends(public_filter),
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    limit: int = Query(
        settings.STOREFRONT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE, description="Products per page"
    ),
    db: AsyncSession = Depends(get_db),
) -> PublicCatalogPageResponse:
    storefront_service = StorefrontService()
    try:
        product_page = await storefront_service.list_public_products(
            db, tenant_id, filters, page=page, page_size=limit
        )
    except (StorefrontError, HTTPException):
        raise
    except Exception as e:
        logger.error(
            f"Unexpected error listing public products for {tenant_id}: {type(e).__name__}: {e}",
            exc_info=True,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while retrieving products",
        ) from e

    return PublicCatalogPageResponse(
        products=[PublicCatalogItemResponse.model_validate(item) for item in product_page.items],
        pagination=page_to_pagination(product_page),
    )


@router.get(
    "/store/{slug}",
    response_model=StorefrontResponse,
    summary="Resolve storefront",
    description="Business profile plus the first page of its visible products.",
    status_code=status.HTTP_200_OK,
)
async def resolve_storefront(
    slug: str,
    filters: ProductFilter = Depends(public_filter),
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    limit: int = Query(
        settings.STOREFRONT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE, description="Products per page"
    ),
    db: AsyncSession = Depends(get_db),
) -> StorefrontResponse:
    """
    Resolve a storefront by its slug.

    **Examples:**
    - Cheapest first: `?sort=price-low`
    - Price range: `?min_price=100&max_price=500`
    - Search: `?search=corolla`
    """
    storefront_service = StorefrontService()
    try:
        tenant, product_page = await storefront_service.resolve_storefront(
            db, slug, filters, page=page, page_size=limit
        )
    except (StorefrontError, HTTPException):
        raise
    except Exception as e:
        logger.error(
            f"Unexpected error resolving storefront '{slug}': {type(e).__name__}: {e}",
            exc_info=True,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while loading the storefront",
        ) from e

    return StorefrontResponse(
        business=PublicTenantResponse.model_validate(tenant),
        products=[PublicCatalogItemResponse.model_validate(item) for item in product_page.items],
        pagination=page_to_pagination(product_page),
    )


@router.get(
    "/store/{slug}/products/{product_id}",
    response_model=StorefrontProductResponse,
    summary="Resolve storefront product",
    description="Product detail page data. Counts one view.",
    status_code=status.HTTP_200_OK,
)
async def resolve_product(
    slug: str,
    product_id: str,
    db: AsyncSession = Depends(get_db),
) -> StorefrontProductResponse:
    tenant, product = await StorefrontService().resolve_product(db, slug, product_id)
    return StorefrontProductResponse(
        business=PublicTenantResponse.model_validate(tenant),
        product=PublicCatalogItemResponse.model_validate(product),
    )


@router.post(
    "/store/{slug}/products/{product_id}/click",
    response_model=MessageResponse,
    summary="Record contact click",
    description="Count a click on the product's contact button.",
    status_code=status.HTTP_200_OK,
)
async def record_click(
    slug: str,
    product_id: str,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    await StorefrontService().record_click(db, slug, product_id)
    return MessageResponse(message="Click recorded")
