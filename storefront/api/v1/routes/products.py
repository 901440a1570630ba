"""
Routes for the owner's catalog.

Every route acts on the caller's own tenant; products of other tenants are
reported as not found.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.api.v1.schemas.catalog import (
    CatalogItemCreate,
    CatalogItemResponse,
    CatalogItemUpdate,
    CatalogPageResponse,
    MessageResponse,
    Pagination,
)
from storefront.core.config import settings
from storefront.core.database import get_db
from storefront.core.dependencies import RequestContext, require_tenant_context
from storefront.core.exceptions import StorefrontError
from storefront.models.catalog import CatalogItemStatus
from storefront.services.catalog import CatalogService, ProductFilter, ProductPage
from storefront.services.storage import StorageService, get_storage_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/products",
    tags=["products"],
)


def page_to_pagination(product_page: ProductPage) -> Pagination:
    return Pagination(
        page=product_page.page,
        limit=product_page.page_size,
        total=product_page.total,
        total_pages=product_page.total_pages,
        has_more=product_page.has_more,
    )


@router.get(
    "",
    response_model=CatalogPageResponse,
    summary="List my products",
    description="Paginated listing of the caller's catalog with optional search, category and status filters.",
    status_code=status.HTTP_200_OK,
    responses={
        200: {"description": "Products retrieved successfully"},
        401: {"description": "Unauthorized - authentication required"},
        500: {"description": "Internal server error"},
    },
)
async def list_products(
    search: Optional[str] = Query(None, description="Case-insensitive match on product name"),
    category: Optional[str] = Query(None, description="Filter by category"),
    status_filter: Optional[CatalogItemStatus] = Query(
        None,
        alias="status",
        description="Filter by status (available, sold, out_of_stock)",
    ),
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    limit: int = Query(
        settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE, description="Products per page"
    ),
    ctx: RequestContext = Depends(require_tenant_context),
    db: AsyncSession = Depends(get_db),
) -> CatalogPageResponse:
    catalog_service = CatalogService()
    filters = ProductFilter(search=search, category=category, status=status_filter)
    try:
        product_page = await catalog_service.list_products(
            db, ctx.tenant_id, filters, page=page, page_size=limit
        )
    except (StorefrontError, HTTPException):
        raise
    except Exception as e:
        logger.error(
            f"Unexpected error listing products for tenant {ctx.tenant_id}: {type(e).__name__}: {e}",
            exc_info=True,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while retrieving products",
        ) from e

    return CatalogPageResponse(
        products=[CatalogItemResponse.model_validate(item) for item in product_page.items],
        pagination=page_to_pagination(product_page),
    )


@router.post(
    "",
    response_model=CatalogItemResponse,
    summary="Create product",
    description="Add a product to the caller's catalog. Status defaults to 'available'.",
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "Product created successfully"},
        400: {"description": "Missing required fields"},
        401: {"description": "Unauthorized - authentication required"},
        500: {"description": "Internal server error"},
    },
)
async def create_product(
    item_data: CatalogItemCreate,
    ctx: RequestContext = Depends(require_tenant_context),
    db: AsyncSession = Depends(get_db),
) -> CatalogItemResponse:
    """
    Create a new product.

    **Requirements:**
    - name, price (>= 0) and 1 to 5 previously uploaded images
    - the first image flagged ``is_primary`` becomes the cover; the first
      image otherwise
    """
    catalog_service = CatalogService()
    try:
        item = await catalog_service.create_product(db, ctx.tenant_id, item_data)
        return CatalogItemResponse.model_validate(item)
    except (StorefrontError, HTTPException):
        raise
    except Exception as e:
        logger.error(
            f"Unexpected error creating product for tenant {ctx.tenant_id}: {type(e).__name__}: {e}",
            exc_info=True,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while creating the product",
        ) from e


@router.get(
    "/{product_id}",
    response_model=CatalogItemResponse,
    summary="Get product",
    status_code=status.HTTP_200_OK,
    responses={
        200: {"description": "Product retrieved successfully"},
        401: {"description": "Unauthorized - authentication required"},
        404: {"description": "Product not found"},
    },
)
async def get_product(
    product_id: str,
    ctx: RequestContext = Depends(require_tenant_context),
    db: AsyncSession = Depends(get_db),
) -> CatalogItemResponse:
    item = await CatalogService().get_product(db, ctx.tenant_id, product_id)
    return CatalogItemResponse.model_validate(item)


@router.put(
    "/{product_id}",
    response_model=CatalogItemResponse,
    summary="Update product",
    description="Partial update: only fields present in the body are changed.",
    status_code=status.HTTP_200_OK,
    responses={
        200: {"description": "Product updated successfully"},
        400: {"description": "Invalid field value"},
        401: {"description": "Unauthorized - authentication required"},
        404: {"description": "Product not found"},
        500: {"description": "Internal server error"},
    },
)
async def update_product(
    product_id: str,
    item_data: CatalogItemUpdate,
    ctx: RequestContext = Depends(require_tenant_context),
    db: AsyncSession = Depends(get_db),
) -> CatalogItemResponse:
    catalog_service = CatalogService()
    try:
        item = await catalog_service.update_product(db, ctx.tenant_id, product_id, item_data)
        return CatalogItemResponse.model_validate(item)
    except (StorefrontError, HTTPException):
        raise
    except Exception as e:
        logger.error(
            f"Unexpected error updating product {product_id}: {type(e).__name__}: {e}",
            exc_info=True,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while updating the product",
        ) from e


@router.delete(
    "/{product_id}",
    response_model=MessageResponse,
    summary="Delete product",
    description="Delete a product and, best-effort, its stored images.",
    status_code=status.HTTP_200_OK,
    responses={
        200: {"description": "Product deleted successfully"},
        401: {"description": "Unauthorized - authentication required"},
        404: {"description": "Product not found"},
        500: {"description": "Internal server error"},
    },
)
async def delete_product(
    product_id: str,
    ctx: RequestContext = Depends(require_tenant_context),
    storage: Optional[StorageService] = Depends(get_storage_service),
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    catalog_service = CatalogService()
    try:
        await catalog_service.delete_product(db, storage, ctx.tenant_id, product_id)
        return MessageResponse(message="Product deleted successfully")
    except (StorefrontError, HTTPException):
        raise
    except Exception as e:
        logger.error(
            f"Unexpected error deleting product {product_id}: {type(e).__name__}: {e}",
            exc_info=True,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while deleting the product",
        ) from e


@router.delete(
    "/{product_id}/images/{storage_key:path}",
    response_model=CatalogItemResponse,
    summary="Remove product image",
    description="Remove one image from a product. Removing the cover promotes the next image.",
    status_code=status.HTTP_200_OK,
    responses={
        200: {"description": "Image removed"},
        401: {"description": "Unauthorized - authentication required"},
        404: {"description": "Product or image not found"},
    },
)
async def remove_product_image(
    product_id: str,
    storage_key: str,
    ctx: RequestContext = Depends(require_tenant_context),
    storage: Optional[StorageService] = Depends(get_storage_service),
    db: AsyncSession = Depends(get_db),
) -> CatalogItemResponse:
    item = await CatalogService().remove_product_image(
        db, storage, ctx.tenant_id, product_id, storage_key
    )
    return CatalogItemResponse.model_validate(item)
