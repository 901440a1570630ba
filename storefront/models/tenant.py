"""
Tenant model for business storefronts.

A tenant is the unit of data isolation: every catalog item belongs to exactly
one tenant, and each tenant is reachable publicly through its slug.

Reference: https://docs.sqlalchemy.org/en/21/orm/basic_relationships.html
"""

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import (
    JSON,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.core.database import Base
from storefront.models.account import new_id, utcnow

if TYPE_CHECKING:
    from storefront.models.account import Account
    from storefront.models.catalog import CatalogItem


DEFAULT_BRAND_COLOR = "#000000"


class Tenant(Base):
    """
    Tenant (business) profile.

    Created once per account at registration. The slug is allocated from the
    display name at creation and never changes afterwards.

    Attributes:
        id: Primary key, UUID string
        owner_id: Account that owns the business (unique, one tenant per account)
        display_name: Business name shown on the storefront
        slug: Unique lowercase identifier used in public URLs
        description, category: Free-form business information
        logo_url, banner_url: Brand images hosted in object storage
        phone, whatsapp, email, address: Contact details
        brand_color: Hex color used by the storefront theme
        year_established: Year the business was founded
        social_links: {"instagram": ..., "facebook": ..., "website": ...}
        created_at / updated_at: Timestamps
    """

    __tablename__ = "tenants"

    __table_args__ = (Index("ix_tenants_category", "category"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)

    owner_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("accounts.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
        comment="Account that owns this business",
    )
    owner: Mapped["Account"] = relationship("Account", back_populates="tenant")

    display_name: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str] = mapped_column(
        String(220),
        unique=True,
        index=True,
        nullable=False,
        comment="Public storefront identifier (lowercase, immutable)",
    )

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    category: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    logo_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    banner_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    whatsapp: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    brand_color: Mapped[str] = mapped_column(
        String(7), nullable=False, default=DEFAULT_BRAND_COLOR
    )
    year_established: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    social_links: Mapped[dict[str, str]] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
        comment="Social profile URLs keyed by network (instagram, facebook, website)",
    )

    catalog_items: Mapped[list["CatalogItem"]] = relationship(
        "CatalogItem", back_populates="tenant"
    )

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
        return f"<Tenant(id={self.id}, slug='{self.slug}', owner_id={self.owner_id})>"
