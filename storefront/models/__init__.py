"""
Database models
All SQLAlchemy models should be defined here or imported here
"""

from storefront.core.database import Base
from storefront.models.account import Account, AccountRole
from storefront.models.catalog import MAX_PRODUCT_IMAGES, CatalogItem, CatalogItemStatus
from storefront.models.tenant import DEFAULT_BRAND_COLOR, Tenant

__all__ = [
    "Account",
    "AccountRole",
    "Base",
    "CatalogItem",
    "CatalogItemStatus",
    "DEFAULT_BRAND_COLOR",
    "MAX_PRODUCT_IMAGES",
    "Tenant",
]
