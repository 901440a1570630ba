"""
Schemas for tenant catalog items.

Reference: https://fastapi.tiangolo.com/tutorial/body/
"""

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from storefront.models.catalog import MAX_PRODUCT_IMAGES, CatalogItemStatus


class ProductSort(str, Enum):
    """Public storefront ordering options."""

    NEWEST = "newest"
    PRICE_LOW = "price-low"
    PRICE_HIGH = "price-high"


class ProductImage(BaseModel):
    """An image previously uploaded through the upload gateway."""

    url: str = Field(..., min_length=1, max_length=500, description="Public image URL")
    storage_key: str = Field(..., min_length=1, max_length=500, description="Object storage key used for deletion")
    is_primary: bool = Field(default=False, description="Whether this is the cover image")


class CatalogItemCreate(BaseModel):
    """
    Schema for creating a new catalog item.

    Attributes:
        name: Product name (required)
        price: Non-negative price (required)
        images: 1 to 5 uploaded images (required)
        description: Optional product description
        category: Optional category
        status: Defaults to 'available' if not provided
        specs: Owner-defined attributes, e.g. {"year": "2019", "mileage": "45000 km"}
    """

    name: str = Field(..., min_length=1, max_length=200, description="Product name")
    price: float = Field(..., ge=0, description="Price, currency-agnostic")
    images: List[ProductImage] = Field(
        ..., min_length=1, max_length=MAX_PRODUCT_IMAGES, description="Product images (1-5)"
    )
    description: Optional[str] = Field(None, description="Product description")
    category: Optional[str] = Field(None, max_length=100, description="Product category")
    status: Optional[CatalogItemStatus] = Field(
        None, description="Product status (available, sold, out_of_stock)"
    )
    specs: Dict[str, str] = Field(default_factory=dict, description="Owner-defined attributes")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Product name is required")
        return v


class CatalogItemUpdate(BaseModel):
    """
    Schema for updating a catalog item.

    All fields are optional for partial updates. Only fields present in the
    request are applied; nullable fields may be cleared with an explicit null.
    """

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    price: Optional[float] = Field(None, ge=0)
    images: Optional[List[ProductImage]] = Field(None, max_length=MAX_PRODUCT_IMAGES)
    description: Optional[str] = None
    category: Optional[str] = Field(None, max_length=100)
    status: Optional[CatalogItemStatus] = None
    specs: Optional[Dict[str, str]] = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("name", "price", "images", "status", "specs")
    @classmethod
    def reject_null(cls, v):
        # Explicit null would clear a required column
        if v is None:
            raise ValueError("may not be null")
        return v


class PublicCatalogItemResponse(BaseModel):
    """Catalog item as shown to anonymous visitors (no engagement counters)."""

    id: str = Field(..., description="Product ID")
    tenant_id: str = Field(..., description="Owning business ID")
    name: str
    description: Optional[str] = None
    price: float
    category: Optional[str] = None
    images: List[ProductImage]
    status: CatalogItemStatus
    specs: Dict[str, str]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CatalogItemResponse(PublicCatalogItemResponse):
    """Catalog item as returned to the owning tenant."""

    view_count: int = Field(..., ge=0, description="Number of public detail views")
    click_count: int = Field(..., ge=0, description="Number of public contact clicks")


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_more: bool


class CatalogPageResponse(BaseModel):
    products: List[CatalogItemResponse]
    pagination: Pagination


class PublicCatalogPageResponse(BaseModel):
    products: List[PublicCatalogItemResponse]
    pagination: Pagination


class CatalogStatsResponse(BaseModel):
    """Dashboard summary for the owner's catalog."""

    total_products: int
    total_views: int
    total_clicks: int
    by_status: Dict[str, int]


class MessageResponse(BaseModel):
    message: str
