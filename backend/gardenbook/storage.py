"""S3-compatible asset store for specimen photos and scan codes."""
import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional
from uuid import uuid4

import boto3
from botocore.exceptions import ClientError
from fastapi.concurrency import run_in_threadpool

from gardenbook.config import Settings, get_settings
from gardenbook.core.domain_types import AssetRef

logger = logging.getLogger("gardenbook.storage")

_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}


@lru_cache(maxsize=1)
def get_s3_client():
    settings = get_settings()
    endpoint = settings.s3_endpoint or None
    if settings.s3_provider == "aws":
        endpoint = None

    return boto3.client(
        "s3",
        endpoint_url=endpoint,
        region_name=settings.s3_region,
        aws_access_key_id=settings.s3_access_key_id,
        aws_secret_access_key=settings.s3_secret_access_key,
    )


def ensure_bucket_exists(client=None, settings: Optional[Settings] = None) -> None:
    client = client or get_s3_client()
    settings = settings or get_settings()
    bucket = settings.s3_bucket

    try:
        client.head_bucket(Bucket=bucket)
        return
    except ClientError as exc:
        code = exc.response.get("Error", {}).get("Code", "")
        if code not in {"404", "NoSuchBucket", "NotFound"}:
            raise

    create_args = {"Bucket": bucket}
    if settings.s3_provider == "aws" and settings.s3_region != "us-east-1":
        create_args["CreateBucketConfiguration"] = {
            "LocationConstraint": settings.s3_region
        }

    client.create_bucket(**create_args)
    logger.info("Created asset bucket %s", bucket)


class S3AssetStore:
    """Stores objects under ``{folder}/{public_id}{ext}``; the object key is the handle."""

    def __init__(self, client, bucket: str, public_base_url: str):
        self._client = client
        self._bucket = bucket
        self._public_base_url = public_base_url.rstrip("/")

    @classmethod
    def from_settings(cls, settings: Settings) -> "S3AssetStore":
        return cls(get_s3_client(), settings.s3_bucket, settings.asset_public_base_url)

    def public_url(self, key: str) -> str:
        return f"{self._public_base_url}/{key}"

    async def upload(
        self,
        source: bytes | Path,
        folder: str,
        content_type: str,
        public_id: Optional[str] = None,
    ) -> AssetRef:
        name = public_id or uuid4().hex
        key = f"{folder.strip('/')}/{name}{_EXTENSIONS.get(content_type, '')}"
        if isinstance(source, Path):
            await run_in_threadpool(
                self._client.upload_file,
                str(source), self._bucket, key,
                ExtraArgs={"ContentType": content_type},
            )
        else:
            await run_in_threadpool(
                self._client.put_object,
                Bucket=self._bucket, Key=key, Body=source, ContentType=content_type,
            )
        logger.info("Uploaded asset %s (%s)", key, content_type)
        return AssetRef(url=self.public_url(key), public_id=key)

    async def destroy(self, public_id: str) -> None:
        await run_in_threadpool(self._client.delete_object, Bucket=self._bucket, Key=public_id)
        logger.info("Destroyed asset %s", public_id)
