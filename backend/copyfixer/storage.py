import logging
from urllib.parse import quote, unquote

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from copyfixer.core.config import settings
from copyfixer.errors import ConfigurationError, StorageError, ValidationError

logger = logging.getLogger(__name__)

REFERENCE_PREFIX = "reference-docs"


class ReferenceFileStorage:
    """
    Thin wrapper around S3-compatible storage for reference documents.

    Objects are public-read through STORAGE_PUBLIC_BASE_URL; keys are
    ``reference-docs/<file id>-<original name>``.
    """

    def __init__(self) -> None:
        if not settings.STORAGE_ENDPOINT:
            raise ConfigurationError("STORAGE_ENDPOINT is required for reference file storage")
        if not settings.STORAGE_ACCESS_KEY or not settings.STORAGE_SECRET_KEY:
            raise ConfigurationError("STORAGE_ACCESS_KEY and STORAGE_SECRET_KEY are required")

        addressing_style = "path" if settings.STORAGE_FORCE_PATH_STYLE else "auto"
        self.bucket = settings.STORAGE_BUCKET
        self.public_base_url = settings.storage_public_base_url

        session = boto3.session.Session()
        self.client = session.client(
            "s3",
            endpoint_url=settings.STORAGE_ENDPOINT,
            aws_access_key_id=settings.STORAGE_ACCESS_KEY,
            aws_secret_access_key=settings.STORAGE_SECRET_KEY,
            region_name=settings.STORAGE_REGION,
            config=Config(
                s3={"addressing_style": addressing_style},
                signature_version="s3v4",
                connect_timeout=settings.STORAGE_TIMEOUT_SECONDS,
                read_timeout=settings.STORAGE_TIMEOUT_SECONDS,
                retries={"max_attempts": 2},
            ),
        )

    @staticmethod
    def build_key(*, file_id: str, filename: str) -> str:
        safe_name = filename.replace("/", "_").replace("\\", "_")
        return f"{REFERENCE_PREFIX}/{file_id}-{safe_name}"

    def public_url(self, key: str) -> str:
        return f"{self.public_base_url}/{quote(key)}"

    def key_from_url(self, url: str) -> str:
        """Derive the object key from a URL previously returned by ``public_url``."""
        prefix = f"{self.public_base_url}/"
        if url.startswith(prefix):
            key = unquote(url[len(prefix):])
        else:
            marker = f"/{self.bucket}/"
            parts = url.split(marker)
            if len(parts) != 2:
                raise ValidationError("Invalid file URL format")
            key = unquote(parts[1])
        if not key.startswith(f"{REFERENCE_PREFIX}/") or ".." in key:
            raise ValidationError("Invalid file URL format")
        return key

    def upload_bytes(self, *, key: str, data: bytes, content_type: str | None) -> str:
        kwargs = {"Bucket": self.bucket, "Key": key, "Body": data}
        if content_type:
            kwargs["ContentType"] = content_type
        try:
            self.client.put_object(**kwargs)
        except (ClientError, BotoCoreError) as exc:
            logger.error("Failed to upload %s to bucket %s: %s", key, self.bucket, exc)
            raise StorageError(f"Failed to upload file to storage: {exc}") from exc
        return self.public_url(key)

    def delete_object(self, *, key: str) -> None:
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except (ClientError, BotoCoreError) as exc:
            logger.error("Failed to delete %s from bucket %s: %s", key, self.bucket, exc)
            raise StorageError(f"Failed to delete file from storage: {exc}") from exc

    def delete_urls(self, urls: list[str]) -> None:
        """Best-effort removal of several objects; failures are logged, not raised."""
        for url in urls:
            try:
                self.delete_object(key=self.key_from_url(url))
            except (StorageError, ValidationError):
                logger.exception("Could not remove reference object %s", url)


_storage: ReferenceFileStorage | None = None


def get_reference_storage() -> ReferenceFileStorage:
    global _storage
    if _storage is None:
        _storage = ReferenceFileStorage()
    return _storage
