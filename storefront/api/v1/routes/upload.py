"""
Image upload routes
Proxies image files to S3-compatible object storage
"""
import logging
from pathlib import Path
from typing import Optional

from botocore.exceptions import BotoCoreError, ClientError
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status

from storefront.api.v1.schemas.storage import ImageUploadResponse
from storefront.core.config import settings
from storefront.core.dependencies import RequestContext, get_request_context
from storefront.core.exceptions import UpstreamError
from storefront.services.storage import (
    ALLOWED_IMAGE_EXTENSIONS,
    StorageService,
    get_storage_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["upload"],
    responses={
        400: {"description": "Invalid file format or size"},
        500: {"description": "Internal server error"},
    },
)

FOLDER_PATTERN = r"^[A-Za-z0-9_-]+(/[A-Za-z0-9_-]+)*$"


async def store_upload(
    file: UploadFile,
    folder: str,
    storage: Optional[StorageService],
) -> ImageUploadResponse:
    """
    Validate an uploaded image and push it to object storage.

    Raises:
        HTTPException: 400 for a missing, empty, oversized or non-image file
        UpstreamError: 500 if storage is not configured or the upload fails
    """
    if not file.filename:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No file provided"
        )

    file_extension = Path(file.filename).suffix.lower().lstrip(".")
    if file_extension not in ALLOWED_IMAGE_EXTENSIONS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Only {', '.join(sorted(ALLOWED_IMAGE_EXTENSIONS))} files are allowed"
        )

    # Read one byte past the limit so oversized files are detected without
    # buffering them whole
    file_content = await file.read(settings.MAX_UPLOAD_SIZE + 1)
    if len(file_content) > settings.MAX_UPLOAD_SIZE:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"File size exceeds maximum allowed size of {settings.MAX_UPLOAD_SIZE / (1024*1024):.1f}MB"
        )

    if not file_content:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="File is empty"
        )

    if storage is None:
        raise UpstreamError("Image storage is not configured")

    try:
        stored = await storage.upload_image(
            file_content=file_content,
            folder=folder,
            file_extension=file_extension
        )
    except ValueError as e:
        logger.warning(f"Image upload validation failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        ) from e
    except (ClientError, BotoCoreError) as e:
        # Backend/S3 issues - map to HTTP 500
        logger.error(f"S3 error uploading image: {e}", exc_info=True)
        raise UpstreamError("Failed to upload image") from e

    return ImageUploadResponse(url=stored.url, storage_key=stored.storage_key)


@router.post(
    "/upload",
    response_model=ImageUploadResponse,
    summary="Upload image",
    description="Upload an image for a product or the business profile. Returns its public URL and storage key.",
    status_code=status.HTTP_200_OK,
    responses={
        200: {"description": "Image uploaded successfully"},
        401: {"description": "Unauthorized - authentication required"},
    }
)
async def upload_image(
    file: UploadFile = File(..., description="Image file (jpg, jpeg, png, webp, gif; max 5MB)"),
    folder: str = Form(
        default="products",
        pattern=FOLDER_PATTERN,
        description="Storage folder prefix (e.g., 'products', 'brand')"
    ),
    ctx: RequestContext = Depends(get_request_context),
    storage: Optional[StorageService] = Depends(get_storage_service),
) -> ImageUploadResponse:
    """
    Upload an image file to object storage.

    **Usage:**
    - Put the returned ``{url, storage_key}`` into a product's ``images`` list
    - Use ``url`` as the business ``logo_url`` or ``banner_url``
    """
    result = await store_upload(file, folder, storage)
    logger.info(f"Image uploaded by account {ctx.account_id}: {result.storage_key}")
    return result


@router.post(
    "/public-upload",
    response_model=ImageUploadResponse,
    summary="Upload image (registration)",
    description="Unauthenticated upload used during registration for the logo and banner.",
    status_code=status.HTTP_200_OK,
    responses={
        200: {"description": "Image uploaded successfully"},
    }
)
async def public_upload_image(
    file: UploadFile = File(..., description="Image file (jpg, jpeg, png, webp, gif; max 5MB)"),
    storage: Optional[StorageService] = Depends(get_storage_service),
) -> ImageUploadResponse:
    result = await store_upload(file, "public", storage)
    logger.info(f"Public image uploaded: {result.storage_key}")
    return result
