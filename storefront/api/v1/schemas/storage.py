"""
Storage schemas for image upload responses
"""
from pydantic import BaseModel, Field


class ImageUploadResponse(BaseModel):
    """
    Response schema for image upload endpoints

    Attributes:
        url: Public URL of the uploaded image
        storage_key: Opaque key needed to delete the image later
    """
    url: str = Field(..., description="Public URL of the uploaded image")
    storage_key: str = Field(..., description="Object storage key of the uploaded image")

    model_config = {"json_schema_extra": {"example": {
        "url": "https://bucket.s3.amazonaws.com/products/20241119_abc12345.jpg",
        "storage_key": "products/20241119_abc12345.jpg",
    }}}
