"""
Storage service for handling image uploads to S3-compatible object storage
Reference: https://boto3.amazonaws.com/v1/documentation/api/latest/reference/services/s3.html
"""
import asyncio
import logging
import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from functools import lru_cache
from typing import BinaryIO, Optional, Union

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from storefront.core.config import settings

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_EXTENSIONS = {"jpg", "jpeg", "png", "webp", "gif"}


@dataclass(frozen=True)
class StoredImage:
    """Result of an upload: public URL plus the key needed to delete it."""

    url: str
    storage_key: str


@lru_cache()
def get_storage_service() -> Optional["StorageService"]:
    """
    Get a singleton StorageService instance.

    Returns None if object storage is not configured (uploads are then
    rejected and product deletion skips image cleanup).

    Using lru_cache ensures the same StorageService instance is reused across requests,
    avoiding repeated boto3 client initialization.

    Reference: https://docs.python.org/3/library/functools.html#functools.lru_cache
    """
    if not settings.AWS_S3_BUCKET_NAME:
        logger.warning("AWS_S3_BUCKET_NAME not configured - image uploads are disabled")
        return None
    return StorageService()


class StorageService:
    """Service for handling image uploads to S3"""

    def __init__(self):
        """Initialize S3 client with credentials from settings"""
        if not settings.AWS_S3_BUCKET_NAME:
            raise ValueError("AWS_S3_BUCKET_NAME must be set to enable image uploads")

        # Reference: https://boto3.amazonaws.com/v1/documentation/api/latest/guide/configuration.html
        config = Config(
            max_pool_connections=50,
            retries={
                'max_attempts': 3,
                'mode': 'standard'
            },
            connect_timeout=5,
            read_timeout=10
        )

        self.s3_client = boto3.client(
            's3',
            aws_access_key_id=settings.AWS_ACCESS_KEY_ID or None,
            aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY or None,
            region_name=settings.AWS_REGION,
            endpoint_url=settings.AWS_S3_ENDPOINT_URL or None,
            config=config
        )

        self.bucket_name = settings.AWS_S3_BUCKET_NAME
        self.base_url = (settings.AWS_S3_BASE_URL or self._generate_base_url()).rstrip("/")

    def _generate_base_url(self) -> str:
        """Generate S3 base URL from bucket name and region"""
        # Standard S3 URL format: https://bucket-name.s3.region.amazonaws.com
        return f"https://{self.bucket_name}.s3.{settings.AWS_REGION}.amazonaws.com"

    @staticmethod
    def build_key(folder: str, file_extension: str) -> str:
        """Unique object key: folder/YYYYMMDD_<8 hex chars>.ext"""
        timestamp = datetime.now(timezone.utc).strftime("%Y%m%d")
        unique_id = uuid.uuid4().hex[:8]
        return f"{folder.strip('/')}/{timestamp}_{unique_id}.{file_extension}"

    async def upload_image(
        self,
        file_content: Union[bytes, BinaryIO],
        folder: str = "images",
        file_extension: str = "jpg"
    ) -> StoredImage:
        """
        Upload an image file to S3 and return its public URL and storage key.

        Args:
            file_content: File content as bytes or file-like object
            folder: S3 folder/path prefix (e.g., "products", "brand", "public")
            file_extension: File extension without the dot (default: "jpg")

        Returns:
            StoredImage with the public URL and the object key

        Raises:
            ValueError: If file is empty or the extension is not an image type
            ClientError: If S3 upload fails
        """
        file_extension = file_extension.lower().lstrip(".")
        if file_extension not in ALLOWED_IMAGE_EXTENSIONS:
            raise ValueError(f"Unsupported image type: .{file_extension}")

        if hasattr(file_content, 'read'):
            file_content = file_content.read()

        if not file_content:
            raise ValueError("File is empty")

        s3_key = self.build_key(folder, file_extension)
        content_type = "image/jpeg" if file_extension in ("jpg", "jpeg") else f"image/{file_extension}"

        # put_object is synchronous; offload to a worker thread
        # Note: no ACL parameter - bucket policy should grant public read access instead
        s3_start = time.time()
        try:
            await asyncio.to_thread(
                self.s3_client.put_object,
                Bucket=self.bucket_name,
                Key=s3_key,
                Body=file_content,
                ContentType=content_type,
            )
        except ClientError:
            # Backend/S3 issue (credentials, network, bucket policy) - route maps it to HTTP 500
            logger.exception(
                "Couldn't put object '%s' to bucket '%s'.",
                s3_key,
                self.bucket_name
            )
            raise

        logger.info(
            "Put object '%s' to bucket '%s' (%d bytes) in %.2fms.",
            s3_key,
            self.bucket_name,
            len(file_content),
            (time.time() - s3_start) * 1000
        )
        return StoredImage(url=f"{self.base_url}/{s3_key}", storage_key=s3_key)

    async def delete_image(self, storage_key: str) -> bool:
        """
        Delete an image from S3 by its storage key.

        Args:
            storage_key: Object key returned by upload_image

        Returns:
            True if deleted successfully, False otherwise
        """
        try:
            await asyncio.to_thread(
                self.s3_client.delete_object,
                Bucket=self.bucket_name,
                Key=storage_key
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to delete image from S3: {storage_key}: {e}", exc_info=True)
            return False

        logger.info(f"Successfully deleted image from S3: {storage_key}")
        return True
