"""
Schemas for tenant (business) profiles.

Reference: https://fastapi.tiangolo.com/tutorial/body-updates/#partial-updates-with-patch
"""
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from storefront.api.v1.schemas.auth import check_email_format

HEX_COLOR_PATTERN = r"^#(?:[0-9a-fA-F]{3}){1,2}$"


class SocialLinks(BaseModel):
    instagram: Optional[str] = Field(None, max_length=500)
    facebook: Optional[str] = Field(None, max_length=500)
    website: Optional[str] = Field(None, max_length=500)


class TenantUpdate(BaseModel):
    """
    Schema for a partial business profile update.

    Only fields present in the request body are written; omitted fields keep
    their stored values. The slug is not part of this schema and cannot change.
    """

    display_name: Optional[str] = Field(None, min_length=1, max_length=200, description="Business name")
    description: Optional[str] = Field(None, description="About the business")
    category: Optional[str] = Field(None, max_length=100)
    logo_url: Optional[str] = Field(None, max_length=500)
    banner_url: Optional[str] = Field(None, max_length=500)
    phone: Optional[str] = Field(None, max_length=30)
    whatsapp: Optional[str] = Field(None, max_length=30)
    email: Optional[str] = Field(None, max_length=255)
    address: Optional[str] = Field(None, max_length=500)
    brand_color: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN, description="Hex color, e.g. '#1a2b3c'")
    year_established: Optional[int] = Field(None, ge=1900, description="Year the business was founded")
    social_links: Optional[SocialLinks] = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("display_name", "brand_color", "social_links")
    @classmethod
    def reject_null(cls, v):
        # Explicit null would clear a required column
        if v is None:
            raise ValueError("may not be null")
        return v

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return check_email_format(v)

    @field_validator("year_established")
    @classmethod
    def validate_year(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v > date.today().year + 1:
            raise ValueError("Year established cannot be in the future")
        return v


class PublicTenantResponse(BaseModel):
    """Business profile as shown on the public storefront (no owner reference)."""

    id: str
    display_name: str
    slug: str
    description: Optional[str] = None
    category: Optional[str] = None
    logo_url: Optional[str] = None
    banner_url: Optional[str] = None
    phone: Optional[str] = None
    whatsapp: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    brand_color: str
    year_established: Optional[int] = None
    social_links: SocialLinks = Field(default_factory=SocialLinks)
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TenantResponse(PublicTenantResponse):
    """Full business profile, returned to the owner."""

    owner_id: str


class TenantUpdateResponse(BaseModel):
    message: str = Field(default="Business updated successfully")
    business: TenantResponse
