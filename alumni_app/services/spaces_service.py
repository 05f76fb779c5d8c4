import asyncio
import logging
from functools import lru_cache

import boto3

from alumni_app.config import settings

logger = logging.getLogger(__name__)

DOCUMENTS_FOLDER = "documents"
PHOTOS_FOLDER = "photos"


def _join_path(*segments: str) -> str:
    cleaned = [segment.strip("/") for segment in segments if segment and segment.strip("/")]
    return "/".join(cleaned)


@lru_cache(maxsize=1)
def _s3_client():
    session = boto3.session.Session()
    return session.client(
        "s3",
        region_name=settings.SPACES_REGION,
        endpoint_url=settings.SPACES_ENDPOINT,
        aws_access_key_id=settings.SPACES_KEY,
        aws_secret_access_key=settings.SPACES_SECRET,
    )


class DocumentStorage:
    """Member documents and photos in an S3-compatible bucket served through a CDN."""

    def __init__(self, bucket: str | None, cdn_url: str, base_path: str = "", client=None):
        self.bucket = bucket
        self.cdn_url = cdn_url.rstrip("/")
        self.base_path = base_path.strip("/")
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = _s3_client()
        return self._client

    def member_folder(self, account_id: str) -> str:
        return _join_path(self.base_path, DOCUMENTS_FOLDER, account_id) + "/"

    def build_key(self, account_id: str, filename: str, timestamp_ms: int) -> str:
        safe_name = filename.replace("/", "_").replace("\\", "_")
        return _join_path(self.base_path, DOCUMENTS_FOLDER, account_id, f"{timestamp_ms}_{safe_name}")

    def photo_key(self, account_id: str, photo_type: str, timestamp_ms: int, extension: str) -> str:
        return _join_path(self.base_path, PHOTOS_FOLDER, account_id, f"{photo_type}-{timestamp_ms}.{extension}")

    def public_url(self, key: str) -> str:
        return f"{self.cdn_url}/{key}"

    def key_from_url(self, url: str | None) -> str | None:
        """Object key for a URL this storage issued, else None."""
        prefix = f"{self.cdn_url}/"
        if not url or not self.cdn_url or not url.startswith(prefix):
            return None
        return url[len(prefix):] or None

    def _put(self, data: bytes, key: str, content_type: str | None) -> None:
        extra_args = {"ACL": "public-read"}
        if content_type:
            extra_args["ContentType"] = content_type
        self.client.put_object(Bucket=self.bucket, Key=key, Body=data, **extra_args)

    async def upload(self, data: bytes, key: str, content_type: str | None = None) -> str:
        await asyncio.to_thread(self._put, data, key, content_type)
        logger.info("Uploaded object %s (%s bytes)", key, len(data))
        return self.public_url(key)

    async def delete(self, key: str) -> None:
        # S3 delete_object succeeds for keys that are already gone.
        await asyncio.to_thread(self.client.delete_object, Bucket=self.bucket, Key=key)
        logger.info("Deleted object %s", key)


_storage: DocumentStorage | None = None


def get_document_storage() -> DocumentStorage:
    global _storage
    if _storage is None:
        _storage = DocumentStorage(
            bucket=settings.SPACES_NAME,
            cdn_url=settings.SPACES_CDN_URL,
            base_path=settings.SPACES_BASE_PATH,
        )
    return _storage
