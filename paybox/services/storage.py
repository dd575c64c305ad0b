"""
Blob storage for receipt images (S3 compatible, via MinIO client).
"""
from __future__ import annotations

import io
import logging
import time
import uuid
from urllib.parse import urlparse

from minio import Minio
from minio.error import S3Error

from paybox.config import settings
from paybox.errors import ExternalServiceError

logger = logging.getLogger(__name__)

OBJECT_PREFIX = "receipts"


def random_object_name(extension: str) -> str:
    extension = extension.lstrip(".").lower() or "bin"
    return f"{OBJECT_PREFIX}/{uuid.uuid4().hex}-{int(time.time() * 1000)}.{extension}"


class BlobStore:
    """upload(bytes, content_type) → public URL; delete(url)."""

    def upload(self, data: bytes, content_type: str, extension: str) -> str:
        raise NotImplementedError

    def delete(self, url: str) -> None:
        raise NotImplementedError


class MinioBlobStore(BlobStore):
    def __init__(self, client: Minio, bucket: str, public_url: str):
        self.client = client
        self.bucket = bucket
        self.public_url = public_url.rstrip("/")

    @classmethod
    def from_settings(cls) -> "MinioBlobStore":
        client = Minio(
            settings.STORAGE_ENDPOINT,
            access_key=settings.STORAGE_ACCESS_KEY,
            secret_key=settings.STORAGE_SECRET_KEY,
            secure=settings.STORAGE_SECURE,
        )
        return cls(client, settings.STORAGE_BUCKET, settings.STORAGE_PUBLIC_URL)

    def _ensure_bucket(self) -> None:
        if not self.client.bucket_exists(self.bucket):
            self.client.make_bucket(self.bucket)
            logger.info("Created bucket: %s", self.bucket)

    def url_for(self, object_name: str) -> str:
        return f"{self.public_url}/{self.bucket}/{object_name}"

    def object_name(self, url: str) -> str:
        path = urlparse(url).path.lstrip("/")
        prefix = f"{self.bucket}/"
        return path[len(prefix):] if path.startswith(prefix) else path

    def upload(self, data: bytes, content_type: str, extension: str) -> str:
        object_name = random_object_name(extension)
        try:
            self._ensure_bucket()
            self.client.put_object(
                self.bucket,
                object_name,
                io.BytesIO(data),
                length=len(data),
                content_type=content_type,
            )
        except S3Error as e:
            logger.error("Upload failed for %s: %s", object_name, e)
            raise ExternalServiceError("Could not store the file") from e
        logger.info("Uploaded %s (%d bytes)", object_name, len(data))
        return self.url_for(object_name)

    def delete(self, url: str) -> None:
        object_name = self.object_name(url)
        try:
            self.client.remove_object(self.bucket, object_name)
        except S3Error as e:
            logger.error("Delete failed for %s: %s", object_name, e)
            raise ExternalServiceError("Could not delete the file") from e
        logger.info("Deleted %s", object_name)
