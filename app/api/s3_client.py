"""S3 client for uploading venue images and brochures.

Uses boto3 with asyncio.to_thread to avoid blocking the event loop.
Objects are only ever written; nothing here overwrites or deletes.
"""
import asyncio
import logging
import time
import uuid
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from app.metrics import (
    STORAGE_UPLOADS_TOTAL,
    STORAGE_UPLOAD_DURATION_SECONDS,
)

logger = logging.getLogger(__name__)


def random_object_key(extension: str) -> str:
    """Generate a random object key keeping the original file extension."""
    return f"{uuid.uuid4().hex[:13]}.{extension}"


class S3Client:
    """Async-friendly S3 client for venue file storage."""

    def __init__(
        self,
        region: str,
        access_key_id: str,
        secret_access_key: str,
        endpoint_url: Optional[str] = None,
        public_base_url: Optional[str] = None,
    ):
        """Initialize S3 client.

        Args:
            region: Storage region
            access_key_id: Access key
            secret_access_key: Secret key
            endpoint_url: Endpoint for S3-compatible hosts (None = AWS)
            public_base_url: Base for public object URLs (None = AWS virtual-hosted URLs)
        """
        self.region = region
        self.public_base_url = public_base_url.rstrip("/") if public_base_url else None
        self._s3 = boto3.client(
            "s3",
            region_name=region,
            endpoint_url=endpoint_url or None,
            aws_access_key_id=access_key_id or None,
            aws_secret_access_key=secret_access_key or None,
        )

    async def close(self):
        """Close the S3 client."""
        pass  # boto3 client doesn't need explicit close

    def public_url(self, bucket: str, key: str) -> str:
        """Build the public URL of an object."""
        if self.public_base_url:
            return f"{self.public_base_url}/{bucket}/{key}"
        return f"https://{bucket}.s3.{self.region}.amazonaws.com/{key}"

    async def upload_file(
        self,
        bucket: str,
        extension: str,
        content: bytes,
        content_type: str = "application/octet-stream",
    ) -> str:
        """Upload bytes under a random key and return the object's public URL.

        Args:
            bucket: Target bucket
            extension: File extension to keep on the generated key
            content: Raw file bytes
            content_type: MIME type of the file

        Returns:
            Public URL of the uploaded object

        Raises:
            ClientError, BotoCoreError: If the upload fails
        """
        key = random_object_key(extension)

        start_time = time.perf_counter()
        try:
            await asyncio.to_thread(
                self._s3.put_object,
                Bucket=bucket,
                Key=key,
                Body=content,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as e:
            STORAGE_UPLOAD_DURATION_SECONDS.labels(bucket=bucket).observe(
                time.perf_counter() - start_time
            )
            STORAGE_UPLOADS_TOTAL.labels(bucket=bucket, status="error").inc()
            logger.error(f"[S3Client] Failed to upload {bucket}/{key}: {e}")
            raise

        STORAGE_UPLOAD_DURATION_SECONDS.labels(bucket=bucket).observe(
            time.perf_counter() - start_time
        )
        STORAGE_UPLOADS_TOTAL.labels(bucket=bucket, status="success").inc()
        logger.debug(f"[S3Client] Uploaded {bucket}/{key} ({len(content)} bytes)")
        return self.public_url(bucket, key)
