"""
Catalog models for tenant product listings.

Reference: https://docs.sqlalchemy.org/en/21/orm/basic_relationships.html
"""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Optional

from sqlalchemy import (
    JSON,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.core.database import Base
from storefront.models.account import new_id, utcnow

if TYPE_CHECKING:
    from storefront.models.tenant import Tenant


MAX_PRODUCT_IMAGES = 5


class CatalogItemStatus(str, Enum):
    """Catalog item status enumeration."""

    AVAILABLE = "available"
    SOLD = "sold"
    OUT_OF_STOCK = "out_of_stock"


class CatalogItem(Base):
    """
    Catalog item model representing a product listed by a tenant.

    Attributes:
        id: Primary key, UUID string
        tenant_id: Owning tenant
        name: Product name
        description: Product description (optional)
        price: Non-negative price, currency-agnostic
        category: Product category (optional)
        images: Ordered list of {"url", "storage_key", "is_primary"} (max 5,
            exactly one primary when non-empty)
        status: available, sold or out_of_stock
        specs: Owner-defined attributes, string to string (e.g. year, mileage)
        view_count: Number of public detail views
        click_count: Number of public contact clicks
        created_at: Timestamp when item was created
        updated_at: Timestamp when item was last updated
    """

    __tablename__ = "catalog_items"

    # Reference: https://docs.sqlalchemy.org/en/21/core/constraints.html#indexes
    __table_args__ = (
        Index("ix_catalog_items_tenant_id", "tenant_id"),
        Index("ix_catalog_items_status", "status"),
        Index("ix_catalog_items_category", "category"),
        Index("ix_catalog_items_tenant_created", "tenant_id", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)

    tenant_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        comment="Owning tenant",
    )
    tenant: Mapped["Tenant"] = relationship("Tenant", back_populates="catalog_items")

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    price: Mapped[float] = mapped_column(
        Numeric(14, 2, asdecimal=False),
        nullable=False,
        comment="Non-negative price, currency-agnostic",
    )

    category: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    images: Mapped[list[dict]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        comment="Ordered list of {url, storage_key, is_primary}",
    )

    # Status stored as String; enum validation is handled in Pydantic schemas
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=CatalogItemStatus.AVAILABLE.value,
        comment="Product status (available, sold, out_of_stock)",
    )

    specs: Mapped[dict[str, str]] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
        comment="Owner-defined attributes (string to string)",
    )

    view_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    click_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
        nullable=False,
    )

    def __repr__(self) -> str:
        return (
            f"<CatalogItem(id={self.id}, tenant_id={self.tenant_id}, "
            f"name='{self.name}', status='{self.status}')>"
        )
