"""
Tenant directory service: slug allocation, lookup and profile updates.

Reference: https://docs.sqlalchemy.org/en/21/orm/queryguide/
"""

import logging
import re
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.api.v1.schemas.auth import RegisterRequest
from storefront.api.v1.schemas.tenant import TenantUpdate
from storefront.core.exceptions import AuthorizationError, NotFoundError
from storefront.models.account import Account
from storefront.models.tenant import Tenant

logger = logging.getLogger(__name__)

FALLBACK_SLUG = "store"

_DISALLOWED_CHARS = re.compile(r"[^a-z0-9\s_-]")
_SEPARATOR_RUNS = re.compile(r"[\s_-]+")


def slugify(name: str) -> str:
    """
    Turn a business name into a URL slug.

    "Joe's Auto Repair!!" -> "joes-auto-repair"

    Lowercases and trims, drops every character outside [a-z0-9], whitespace,
    underscore and hyphen, collapses separator runs into one hyphen and trims
    hyphens from both ends. Names with nothing usable left map to "store".
    """
    slug = name.lower().strip()
    slug = _DISALLOWED_CHARS.sub("", slug)
    slug = _SEPARATOR_RUNS.sub("-", slug)
    slug = slug.strip("-")
    return slug or FALLBACK_SLUG


class TenantService:
    """Service for managing tenant (business) records"""

    async def allocate_slug(self, db: AsyncSession, name: str) -> str:
        """
        Pick the first free slug for a business name.

        Returns the base slug when unused, otherwise ``base-1``, ``base-2``, ...
        (first unused integer). This is a check-then-write sequence: a
        concurrent registration can take the same slug before this one is
        inserted, in which case the unique constraint on tenants.slug rejects
        the insert and the caller allocates again.
        """
        base = slugify(name)
        result = await db.execute(
            select(Tenant.slug).where(
                or_(Tenant.slug == base, Tenant.slug.like(f"{base}-%"))
            )
        )
        taken = set(result.scalars().all())

        if base not in taken:
            return base

        counter = 1
        while f"{base}-{counter}" in taken:
            counter += 1
        return f"{base}-{counter}"

    async def create_tenant(
        self, db: AsyncSession, owner: Account, registration: RegisterRequest
    ) -> Tenant:
        """
        Create the business for a freshly registered account.

        Raises:
            IntegrityError: If the allocated slug was taken concurrently
        """
        slug = await self.allocate_slug(db, registration.business_name)

        tenant = Tenant(
            owner_id=owner.id,
            display_name=registration.business_name,
            slug=slug,
            category=registration.category or None,
            logo_url=registration.logo_url or None,
            banner_url=registration.banner_url or None,
            social_links={},
        )
        db.add(tenant)
        await db.flush()
        logger.info(f"Created tenant '{tenant.slug}' (ID: {tenant.id}) for account {owner.id}")
        return tenant

    async def get_tenant(self, db: AsyncSession, tenant_id: str) -> Tenant:
        result = await db.execute(select(Tenant).where(Tenant.id == tenant_id))
        tenant = result.scalar_one_or_none()
        if not tenant:
            raise NotFoundError("Business not found")
        return tenant

    async def find_by_slug(self, db: AsyncSession, slug: str) -> Optional[Tenant]:
        """
        Look up a tenant by slug.

        Slugs are stored lowercase, so the inbound slug is lowercased first.
        """
        result = await db.execute(
            select(Tenant).where(Tenant.slug == slug.strip().lower())
        )
        return result.scalar_one_or_none()

    async def update_tenant(
        self,
        db: AsyncSession,
        caller_tenant_id: Optional[str],
        tenant_id: str,
        changes: TenantUpdate,
    ) -> Tenant:
        """
        Apply a partial profile update.

        Only fields present in the request are written. The caller must own
        the tenant being updated.

        Raises:
            AuthorizationError: If tenant_id is not the caller's tenant
            NotFoundError: If the tenant does not exist
        """
        if caller_tenant_id != tenant_id:
            logger.warning(
                f"Tenant {caller_tenant_id} attempted to update business {tenant_id}"
            )
            raise AuthorizationError()

        tenant = await self.get_tenant(db, tenant_id)

        update_data = changes.model_dump(exclude_unset=True)
        if not update_data:
            return tenant

        for field, value in update_data.items():
            setattr(tenant, field, value)

        tenant.updated_at = datetime.now(timezone.utc)
        await db.flush()
        logger.info(f"Updated business {tenant_id}: {sorted(update_data)}")
        return tenant
