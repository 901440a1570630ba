"""
Account model for business owners who sign in to manage a storefront.

Reference: https://docs.sqlalchemy.org/en/21/orm/basic_relationships.html
"""
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.core.database import Base

if TYPE_CHECKING:
    from storefront.models.tenant import Tenant


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AccountRole(str, Enum):
    """Account role enumeration."""

    OWNER = "owner"
    ADMIN = "admin"


class Account(Base):
    """
    Account model representing a registered business owner.

    Attributes:
        id: Primary key, UUID string
        email: Login email, stored lowercase (unique)
        name: Display name of the owner
        password_hash: Salted bcrypt hash, never the plain password
        role: Account role (owner, admin)
        tenant_id: Tenant owned by this account; set right after registration.
            Plain pointer for session convenience, the Tenant row owns the link
            through Tenant.owner_id.
        created_at: Timestamp when account was created
        updated_at: Timestamp when account was last updated
    """

    __tablename__ = "accounts"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    email: Mapped[str] = mapped_column(
        String(255), unique=True, index=True, nullable=False
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=AccountRole.OWNER.value,
        comment="Account role (owner, admin)",
    )
    tenant_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        nullable=True,
        comment="Tenant owned by this account (non-owning pointer)",
    )

    tenant: Mapped[Optional["Tenant"]] = relationship(
        "Tenant", back_populates="owner", uselist=False
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
        return f"<Account(id={self.id}, email='{self.email}', tenant_id={self.tenant_id})>"
