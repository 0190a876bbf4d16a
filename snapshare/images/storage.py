from __future__ import annotations

import re
from functools import lru_cache
from typing import Any, BinaryIO
from urllib.parse import quote

import boto3
from botocore.config import Config

from snapshare.core.config import settings


def _safe_name(file_name: str) -> str:
    safe = (file_name or "").strip().replace("\\", "/").split("/")[-1]
    safe = re.sub(r"[^a-zA-Z0-9._-]", "_", safe)[:120]
    return safe or "upload"


def make_image_key(*, user_id: str, image_id: str, file_name: str) -> str:
    """Owner- and image-scoped key, so two uploads of `cat.png` never collide."""
    return f"{user_id}/{image_id}/{_safe_name(file_name)}"


class ObjectStorage:
    """Thin wrapper over an S3 bucket. All calls are blocking."""

    def __init__(self, client: Any, bucket: str, public_base_url: str | None = None):
        self.client = client
        self.bucket = bucket
        self.public_base_url = (public_base_url or "").rstrip("/")

    def upload(self, *, key: str, fileobj: BinaryIO, content_type: str | None = None) -> None:
        extra: dict[str, Any] = {}
        if content_type:
            extra["ContentType"] = str(content_type)
        self.client.upload_fileobj(fileobj, self.bucket, key, ExtraArgs=extra or None)

    def make_public(self, *, key: str) -> None:
        self.client.put_object_acl(Bucket=self.bucket, Key=key, ACL="public-read")

    def delete(self, *, key: str) -> None:
        self.client.delete_object(Bucket=self.bucket, Key=key)

    def public_url(self, *, key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url}/{quote(key)}"
        return f"https://{self.bucket}.s3.{settings.AWS_REGION}.amazonaws.com/{quote(key)}"


@lru_cache(maxsize=1)
def botocore_config() -> Config:
    # Failures surface to the request; no retries beyond the first attempt.
    return Config(
        retries={"max_attempts": 1, "mode": "standard"},
        connect_timeout=5,
        read_timeout=30,
    )


@lru_cache(maxsize=1)
def get_object_storage() -> ObjectStorage:
    client = boto3.client(
        "s3",
        region_name=settings.AWS_REGION,
        endpoint_url=settings.STORAGE_ENDPOINT_URL,
        config=botocore_config(),
    )
    return ObjectStorage(client, settings.STORAGE_BUCKET_NAME, settings.STORAGE_PUBLIC_BASE_URL)
