"""
Catalog service for managing tenant catalog items.

All reads and writes are scoped by tenant: an item belonging to another
tenant is reported as not found, never as forbidden.

Reference: https://docs.sqlalchemy.org/en/21/orm/queryguide/
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional, Protocol

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.api.v1.schemas.catalog import (
    CatalogItemCreate,
    CatalogItemUpdate,
    ProductSort,
)
from storefront.core.exceptions import NotFoundError, ValidationError
from storefront.models.catalog import CatalogItem, CatalogItemStatus

logger = logging.getLogger(__name__)


class ImageStore(Protocol):
    async def delete_image(self, storage_key: str) -> bool: ...


@dataclass
class ProductFilter:
    """
    Listing filter.

    visible_only adds the public storefront rule (status != sold).
    """

    search: Optional[str] = None
    category: Optional[str] = None
    status: Optional[CatalogItemStatus] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    visible_only: bool = False
    sort: ProductSort = ProductSort.NEWEST


@dataclass
class ProductPage:
    items: List[CatalogItem]
    total: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size)

    @property
    def has_more(self) -> bool:
        return self.page < self.total_pages


def normalize_images(images: Iterable[Any]) -> list[dict]:
    """
    Return plain image dicts with exactly one primary image.

    The first image flagged primary keeps the flag; if none is flagged the
    first image becomes primary. An empty list stays empty.
    """
    normalized = []
    for image in images:
        if hasattr(image, "model_dump"):
            image = image.model_dump()
        normalized.append(
            {
                "url": image["url"],
                "storage_key": image["storage_key"],
                "is_primary": bool(image.get("is_primary")),
            }
        )

    primary_index = next(
        (i for i, image in enumerate(normalized) if image["is_primary"]), 0
    )
    for i, image in enumerate(normalized):
        image["is_primary"] = i == primary_index
    return normalized


def remove_image(images: Iterable[dict], storage_key: str) -> list[dict]:
    """
    Drop the image with the given storage key.

    Removing the primary image promotes the first remaining one.

    Raises:
        NotFoundError: If no image has that key
    """
    images = list(images)
    remaining = [image for image in images if image["storage_key"] != storage_key]
    if len(remaining) == len(images):
        raise NotFoundError("Image not found")
    return normalize_images(remaining)


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class CatalogService:
    """Service for managing catalog items"""

    def _filter_conditions(self, tenant_id: str, filters: ProductFilter) -> list:
        conditions = [CatalogItem.tenant_id == tenant_id]

        if filters.search:
            pattern = f"%{_escape_like(filters.search.strip())}%"
            conditions.append(CatalogItem.name.ilike(pattern, escape="\\"))

        if filters.category:
            conditions.append(CatalogItem.category == filters.category)

        if filters.status:
            conditions.append(CatalogItem.status == CatalogItemStatus(filters.status).value)

        if filters.visible_only:
            conditions.append(CatalogItem.status != CatalogItemStatus.SOLD.value)

        if filters.min_price is not None:
            conditions.append(CatalogItem.price >= filters.min_price)

        if filters.max_price is not None:
            conditions.append(CatalogItem.price <= filters.max_price)

        return conditions

    @staticmethod
    def _ordering(sort: ProductSort) -> tuple:
        if sort == ProductSort.PRICE_LOW:
            return CatalogItem.price.asc(), CatalogItem.created_at.desc(), CatalogItem.id
        if sort == ProductSort.PRICE_HIGH:
            return CatalogItem.price.desc(), CatalogItem.created_at.desc(), CatalogItem.id
        return CatalogItem.created_at.desc(), CatalogItem.id

    async def list_products(
        self,
        db: AsyncSession,
        tenant_id: str,
        filters: Optional[ProductFilter] = None,
        page: int = 1,
        page_size: int = 20,
    ) -> ProductPage:
        """
        Filter, sort and paginate a tenant's catalog.

        Sorting happens in the query, over the whole filtered set, before the
        page window is applied. The total count and the page are two separate
        reads with no snapshot between them.

        Args:
            db: Database session
            tenant_id: Tenant whose catalog is listed
            filters: Optional filter (search, category, status, price range, visibility, sort)
            page: 1-indexed page number
            page_size: Maximum number of items per page

        Returns:
            ProductPage with items and pagination totals

        Raises:
            ValidationError: If page or page_size is below 1
        """
        if page < 1 or page_size < 1:
            raise ValidationError("page and limit must be positive integers")

        filters = filters or ProductFilter()
        conditions = self._filter_conditions(tenant_id, filters)

        total_result = await db.execute(
            select(func.count()).select_from(CatalogItem).where(*conditions)
        )
        total = total_result.scalar_one()

        query = (
            select(CatalogItem)
            .where(*conditions)
            .order_by(*self._ordering(filters.sort))
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        result = await db.execute(query)
        items = list(result.scalars().all())

        return ProductPage(items=items, total=total, page=page, page_size=page_size)

    async def get_product(
        self, db: AsyncSession, tenant_id: str, product_id: str
    ) -> CatalogItem:
        """
        Get a catalog item owned by the tenant.

        Raises:
            NotFoundError: If the item does not exist or belongs to another tenant
        """
        result = await db.execute(
            select(CatalogItem).where(
                CatalogItem.id == product_id,
                CatalogItem.tenant_id == tenant_id,
            )
        )
        item = result.scalar_one_or_none()
        if not item:
            raise NotFoundError("Product not found")
        return item

    async def create_product(
        self, db: AsyncSession, tenant_id: str, item_data: CatalogItemCreate
    ) -> CatalogItem:
        """
        Create a new catalog item for a tenant.

        Status defaults to available; the image list is normalized so exactly
        one image is primary.

        Raises:
            ValidationError: If the item violates a database constraint
        """
        item_dict = item_data.model_dump()
        item_dict["status"] = (
            CatalogItemStatus(item_dict["status"]).value
            if item_dict.get("status")
            else CatalogItemStatus.AVAILABLE.value
        )
        item_dict["images"] = normalize_images(item_dict["images"])
        item_dict["specs"] = dict(item_dict.get("specs") or {})

        catalog_item = CatalogItem(tenant_id=tenant_id, **item_dict)
        db.add(catalog_item)

        try:
            await db.flush()
        except IntegrityError as e:
            await db.rollback()
            logger.error("Failed to create catalog item due to database error", exc_info=True)
            raise ValidationError(
                "Failed to create catalog item due to database constraints"
            ) from e

        logger.info(f"Created catalog item '{catalog_item.name}' (ID: {catalog_item.id}) for tenant {tenant_id}")
        return catalog_item

    async def update_product(
        self,
        db: AsyncSession,
        tenant_id: str,
        product_id: str,
        item_data: CatalogItemUpdate,
    ) -> CatalogItem:
        """
        Update a catalog item.

        Only fields present in the request are written (partial update);
        omitted fields keep their stored values.

        Raises:
            NotFoundError: If the item does not exist or belongs to another tenant
        """
        catalog_item = await self.get_product(db, tenant_id, product_id)

        update_data = item_data.model_dump(exclude_unset=True)
        if not update_data:
            return catalog_item

        if "status" in update_data:
            update_data["status"] = CatalogItemStatus(update_data["status"]).value
        if "images" in update_data:
            update_data["images"] = normalize_images(update_data["images"])
        if "specs" in update_data:
            update_data["specs"] = dict(update_data["specs"])

        for field, value in update_data.items():
            setattr(catalog_item, field, value)

        catalog_item.updated_at = datetime.now(timezone.utc)

        try:
            await db.flush()
        except IntegrityError as e:
            await db.rollback()
            logger.error("Failed to update catalog item due to database error", exc_info=True)
            raise ValidationError(
                "Failed to update catalog item due to database constraints"
            ) from e

        logger.info(f"Updated catalog item {product_id}: {sorted(update_data)}")
        return catalog_item

    async def _cleanup_images(
        self, storage: Optional[ImageStore], storage_keys: list[str]
    ) -> None:
        """Best-effort removal of stored objects; failures are only logged."""
        if not storage_keys:
            return
        if storage is None:
            logger.warning(
                f"Object storage not configured, leaving {len(storage_keys)} image(s) in place"
            )
            return
        for storage_key in storage_keys:
            if not await storage.delete_image(storage_key):
                logger.error(f"Failed to delete image: {storage_key}")

    async def delete_product(
        self,
        db: AsyncSession,
        storage: Optional[ImageStore],
        tenant_id: str,
        product_id: str,
    ) -> None:
        """
        Delete a catalog item and its stored images.

        The row deletion is committed first so stored images are only removed
        once the item is gone. Image deletion is best-effort and never fails
        the request.

        Raises:
            NotFoundError: If the item does not exist or belongs to another tenant
        """
        catalog_item = await self.get_product(db, tenant_id, product_id)
        storage_keys = [image["storage_key"] for image in catalog_item.images or []]

        await db.delete(catalog_item)
        await db.commit()
        logger.info(f"Deleted catalog item {product_id} for tenant {tenant_id}")

        await self._cleanup_images(storage, storage_keys)

    async def remove_product_image(
        self,
        db: AsyncSession,
        storage: Optional[ImageStore],
        tenant_id: str,
        product_id: str,
        storage_key: str,
    ) -> CatalogItem:
        """
        Remove one image from a catalog item and from object storage.

        Raises:
            NotFoundError: If the item or the image does not exist
        """
        catalog_item = await self.get_product(db, tenant_id, product_id)
        catalog_item.images = remove_image(catalog_item.images or [], storage_key)
        catalog_item.updated_at = datetime.now(timezone.utc)
        await db.flush()
        logger.info(f"Removed image {storage_key} from catalog item {product_id}")

        await self._cleanup_images(storage, [storage_key])
        return catalog_item

    async def _increment(
        self, db: AsyncSession, tenant_id: str, product_id: str, column
    ) -> bool:
        stmt = (
            update(CatalogItem)
            .where(CatalogItem.id == product_id, CatalogItem.tenant_id == tenant_id)
            .values({column: column + 1})
            .execution_options(synchronize_session=False)
        )
        result = await db.execute(stmt)
        return result.rowcount > 0

    async def record_view(self, db: AsyncSession, tenant_id: str, product_id: str) -> bool:
        """Increment view count for a catalog item (atomic single-row update)."""
        return await self._increment(db, tenant_id, product_id, CatalogItem.view_count)

    async def record_click(self, db: AsyncSession, tenant_id: str, product_id: str) -> bool:
        """Increment contact click count for a catalog item (atomic single-row update)."""
        return await self._increment(db, tenant_id, product_id, CatalogItem.click_count)

    async def get_stats(self, db: AsyncSession, tenant_id: str) -> dict:
        """
        Summarize a tenant's catalog for the dashboard.

        Returns:
            Dict with total_products, total_views, total_clicks and a count per status
        """
        result = await db.execute(
            select(
                CatalogItem.status,
                func.count(CatalogItem.id),
                func.coalesce(func.sum(CatalogItem.view_count), 0),
                func.coalesce(func.sum(CatalogItem.click_count), 0),
            )
            .where(CatalogItem.tenant_id == tenant_id)
            .group_by(CatalogItem.status)
        )

        by_status = {item_status.value: 0 for item_status in CatalogItemStatus}
        total_views = 0
        total_clicks = 0
        for item_status, count, views, clicks in result.all():
            by_status[item_status] = count
            total_views += int(views)
            total_clicks += int(clicks)

        return {
            "total_products": sum(by_status.values()),
            "total_views": total_views,
            "total_clicks": total_clicks,
            "by_status": by_status,
        }
