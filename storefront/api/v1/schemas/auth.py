"""
Schemas for registration, login and the current account.

Reference: https://fastapi.tiangolo.com/tutorial/body/
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def check_email_format(v: str) -> str:
    v = v.strip().lower()
    local, _, domain = v.partition("@")
    if not local or "." not in domain:
        raise ValueError("Invalid email address format")
    return v


class RegisterRequest(BaseModel):
    """
    Schema for self-service registration.

    Creates the owner account and its business in one step. Password strength
    is checked by the service so the error matches the other domain errors.
    """
    name: str = Field(..., min_length=1, max_length=200, description="Owner name")
    email: str = Field(..., min_length=3, max_length=255, description="Login email")
    password: str = Field(..., min_length=1, max_length=255, description="Account password (min 6 characters)")
    business_name: str = Field(..., min_length=1, max_length=200, description="Business display name")
    category: Optional[str] = Field(None, max_length=100, description="Business category")
    logo_url: Optional[str] = Field(None, max_length=500, description="Uploaded logo URL")
    banner_url: Optional[str] = Field(None, max_length=500, description="Uploaded banner URL")

    @field_validator("name", "business_name")
    @classmethod
    def strip_required_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return check_email_format(v)


class RegisterResponse(BaseModel):
    message: str = Field(default="User created successfully")
    account_id: str = Field(..., description="Created account ID")
    tenant_id: str = Field(..., description="Created business ID")
    slug: str = Field(..., description="Public storefront slug")


class LoginRequest(BaseModel):
    email: str = Field(..., description="Login email")
    password: str = Field(..., description="Account password")


class AccountResponse(BaseModel):
    id: str
    email: str
    name: str
    role: str
    tenant_id: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class LoginResponse(BaseModel):
    access_token: str = Field(..., description="Bearer token for authenticated requests")
    token_type: str = Field(default="bearer")
    expires_in: int = Field(..., description="Token lifetime in seconds")
    account: AccountResponse
