"""
Identity service: account registration and credential checks.

Registration creates the owner account and its tenant in the same
transaction and links them; login verifies the password hash and issues a
session token.
"""
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.api.v1.schemas.auth import RegisterRequest
from storefront.core.config import settings
from storefront.core.exceptions import (
    AuthenticationError,
    ConflictError,
    DuplicateEmailError,
    WeakPasswordError,
)
from storefront.core.security import hash_password, verify_password
from storefront.models.account import Account, AccountRole
from storefront.models.tenant import Tenant
from storefront.services.tenant import TenantService

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AuthService:
    def __init__(self, tenant_service: Optional[TenantService] = None):
        self.tenant_service = tenant_service or TenantService()

    async def get_account(self, db: AsyncSession, account_id: str) -> Optional[Account]:
        result = await db.execute(select(Account).where(Account.id == account_id))
        return result.scalar_one_or_none()

    async def get_account_by_email(self, db: AsyncSession, email: str) -> Optional[Account]:
        result = await db.execute(
            select(Account).where(Account.email == normalize_email(email))
        )
        return result.scalar_one_or_none()

    async def register_account(
        self, db: AsyncSession, name: str, email: str, password: str
    ) -> Account:
        """
        Create an account without a tenant.

        The email pre-check only gives a friendlier error; the unique index on
        accounts.email is what actually prevents duplicates.

        Raises:
            WeakPasswordError: If the password is shorter than 6 characters
            DuplicateEmailError: If the email is already registered
        """
        if len(password) < MIN_PASSWORD_LENGTH:
            raise WeakPasswordError()

        email = normalize_email(email)
        if await self.get_account_by_email(db, email):
            raise DuplicateEmailError()

        account = Account(
            name=name,
            email=email,
            password_hash=hash_password(password),
            role=AccountRole.OWNER.value,
        )
        db.add(account)

        try:
            await db.flush()
        except IntegrityError as e:
            await db.rollback()
            logger.warning(f"Duplicate email rejected by database: {email}")
            raise DuplicateEmailError() from e

        logger.info(f"Registered account {account.id}")
        return account

    async def register_business(
        self, db: AsyncSession, registration: RegisterRequest
    ) -> tuple[Account, Tenant]:
        """
        Register an owner account together with its business.

        Slug allocation can lose a race against a concurrent registration of
        the same name. The unique constraint rejects the second insert; the
        transaction is rolled back and the whole registration is retried,
        which re-reads the taken slugs and moves to the next suffix.

        Raises:
            WeakPasswordError, DuplicateEmailError: From register_account
            ConflictError: If no slug could be allocated after the retries
        """
        for attempt in range(1, settings.SLUG_ALLOCATION_ATTEMPTS + 1):
            account = await self.register_account(
                db, registration.name, registration.email, registration.password
            )

            try:
                tenant = await self.tenant_service.create_tenant(db, account, registration)
            except IntegrityError:
                await db.rollback()
                logger.warning(
                    f"Slug collision for '{registration.business_name}' "
                    f"(attempt {attempt}/{settings.SLUG_ALLOCATION_ATTEMPTS}), retrying"
                )
                continue

            account.tenant_id = tenant.id
            await db.flush()
            return account, tenant

        logger.error(f"Could not allocate a slug for '{registration.business_name}'")
        raise ConflictError("Business name is already taken, please try again")

    async def authenticate(self, db: AsyncSession, email: str, password: str) -> Account:
        """
        Verify email and password.

        Unknown email and wrong password produce the same error, and both
        paths run a hash verification.

        Raises:
            AuthenticationError: If the credentials do not match an account
        """
        account = await self.get_account_by_email(db, email)
        password_hash = account.password_hash if account else None

        if not verify_password(password, password_hash) or account is None:
            raise AuthenticationError("Invalid email or password")

        return account
