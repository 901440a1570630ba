"""
Schemas for the public storefront resolution endpoints.
"""
from pydantic import BaseModel

from storefront.api.v1.schemas.catalog import Pagination, PublicCatalogItemResponse
from storefront.api.v1.schemas.tenant import PublicTenantResponse


class StorefrontResponse(BaseModel):
    business: PublicTenantResponse
    products: list[PublicCatalogItemResponse]
    pagination: Pagination


class StorefrontProductResponse(BaseModel):
    business: PublicTenantResponse
    product: PublicCatalogItemResponse
