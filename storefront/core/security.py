"""
Password hashing and session token helpers.

Passwords are stored as salted bcrypt hashes (passlib); sessions are HS256
JWTs signed with SECRET_KEY (authlib JOSE).

Reference:
- https://passlib.readthedocs.io/en/stable/narr/context-tutorial.html
- https://docs.authlib.org/en/latest/jose/jwt.html
"""
import logging
import time
from typing import Optional

from authlib.jose import jwt
from authlib.jose.errors import JoseError
from passlib.context import CryptContext

from storefront.core.config import settings
from storefront.core.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.PASSWORD_HASH_ROUNDS,
)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """
    Check a password against a stored hash.

    When there is no stored hash (unknown account) a dummy verification is
    still performed so both failure paths cost the same.
    """
    if hashed_password is None:
        pwd_context.dummy_verify()
        return False
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(account_id: str, tenant_id: Optional[str]) -> str:
    """
    Issue a signed session token.

    Claims:
        sub: account ID
        tid: tenant ID (absent until the account owns a tenant)
        iat / exp: issue and expiry timestamps
    """
    now = int(time.time())
    payload = {
        "sub": account_id,
        "iat": now,
        "exp": now + settings.ACCESS_TOKEN_EXPIRE_SECONDS,
    }
    if tenant_id:
        payload["tid"] = tenant_id

    token = jwt.encode({"alg": settings.JWT_ALGORITHM}, payload, settings.SECRET_KEY)
    return token.decode("utf-8")


def decode_access_token(token: str) -> dict:
    """
    Verify signature and expiry of a session token and return its claims.

    Raises:
        AuthenticationError: If the token is malformed, tampered with or expired
    """
    try:
        claims = jwt.decode(
            token,
            settings.SECRET_KEY,
            claims_options={
                "sub": {"essential": True},
                "exp": {"essential": True},
            },
        )
        claims.validate()
    except (JoseError, ValueError) as e:
        logger.debug(f"Rejected session token: {type(e).__name__}: {e}")
        raise AuthenticationError("Invalid or expired session") from e
    return dict(claims)
