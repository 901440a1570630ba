"""
Pydantic schemas for API request/response models
"""

from storefront.api.v1.schemas.catalog import CatalogItemCreate, CatalogItemUpdate, CatalogItemResponse
from storefront.api.v1.schemas.tenant import TenantUpdate, TenantResponse

__all__ = [
    "CatalogItemCreate",
    "CatalogItemResponse",
    "CatalogItemUpdate",
    "TenantResponse",
    "TenantUpdate",
]
