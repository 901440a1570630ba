"""
Public resolution layer: what anonymous visitors can see.

Every failure here (unknown slug, unknown product, product of another
tenant) is reported with the same NotFoundError so a visitor cannot tell
which part of the lookup failed.
"""
import logging
from dataclasses import replace
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.exceptions import NotFoundError
from storefront.models.catalog import CatalogItem
from storefront.models.tenant import Tenant
from storefront.services.catalog import CatalogService, ProductFilter, ProductPage
from storefront.services.tenant import TenantService

logger = logging.getLogger(__name__)

PUBLIC_NOT_FOUND = "Not found"


class StorefrontService:
    def __init__(
        self,
        tenant_service: Optional[TenantService] = None,
        catalog_service: Optional[CatalogService] = None,
    ):
        self.tenant_service = tenant_service or TenantService()
        self.catalog_service = catalog_service or CatalogService()

    async def _tenant_by_slug(self, db: AsyncSession, slug: str) -> Tenant:
        tenant = await self.tenant_service.find_by_slug(db, slug)
        if tenant is None:
            logger.debug(f"Public lookup for unknown slug '{slug}'")
            raise NotFoundError(PUBLIC_NOT_FOUND)
        return tenant

    async def _public_page(
        self,
        db: AsyncSession,
        tenant_id: str,
        filters: Optional[ProductFilter],
        page: int,
        page_size: int,
    ) -> ProductPage:
        # Status filtering is an owner feature; visitors never see sold items
        filters = replace(filters or ProductFilter(), visible_only=True, status=None)
        return await self.catalog_service.list_products(
            db, tenant_id, filters, page=page, page_size=page_size
        )

    async def resolve_storefront(
        self,
        db: AsyncSession,
        slug: str,
        filters: Optional[ProductFilter] = None,
        page: int = 1,
        page_size: int = 50,
    ) -> tuple[Tenant, ProductPage]:
        """
        Resolve a storefront by slug and list its visible products.

        Raises:
            NotFoundError: If no tenant has this slug
        """
        tenant = await self._tenant_by_slug(db, slug)
        products = await self._public_page(db, tenant.id, filters, page, page_size)
        return tenant, products

    async def resolve_tenant(self, db: AsyncSession, slug: str) -> Tenant:
        return await self._tenant_by_slug(db, slug)

    async def resolve_product(
        self, db: AsyncSession, slug: str, product_id: str
    ) -> tuple[Tenant, CatalogItem]:
        """
        Resolve one product on a storefront and record a view.

        Sold products stay reachable by direct link; only listings hide them.

        Raises:
            NotFoundError: If the slug is unknown, the product does not exist,
                or the product belongs to another tenant
        """
        tenant = await self._tenant_by_slug(db, slug)
        try:
            product = await self.catalog_service.get_product(db, tenant.id, product_id)
        except NotFoundError as e:
            raise NotFoundError(PUBLIC_NOT_FOUND) from e

        await self.catalog_service.record_view(db, tenant.id, product.id)
        # The UPDATE bypasses the identity map; refresh so the response sees it
        await db.refresh(product)
        return tenant, product

    async def list_public_products(
        self,
        db: AsyncSession,
        tenant_id: str,
        filters: Optional[ProductFilter] = None,
        page: int = 1,
        page_size: int = 50,
    ) -> ProductPage:
        """
        Visible products of a tenant addressed by id.

        Raises:
            NotFoundError: If the tenant does not exist
        """
        try:
            tenant = await self.tenant_service.get_tenant(db, tenant_id)
        except NotFoundError as e:
            raise NotFoundError(PUBLIC_NOT_FOUND) from e
        return await self._public_page(db, tenant.id, filters, page, page_size)

    async def record_click(self, db: AsyncSession, slug: str, product_id: str) -> None:
        """
        Count a contact-button click on a storefront product.

        Raises:
            NotFoundError: If the slug or product is unknown
        """
        tenant = await self._tenant_by_slug(db, slug)
        if not await self.catalog_service.record_click(db, tenant.id, product_id):
            raise NotFoundError(PUBLIC_NOT_FOUND)
