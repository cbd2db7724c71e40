"""Blob storage for uploaded document bytes: S3 or local disk."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Protocol

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from docanalytics import config
from docanalytics.errors import StorageFailure

logger = logging.getLogger(__name__)

OCTET_STREAM = "application/octet-stream"


def attachment_disposition(filename: str) -> str:
    safe = filename.replace('"', "")
    return f'attachment; filename="{safe}"'


class BlobStorage(Protocol):
    def upload(self, data: bytes, name: str, original_filename: Optional[str] = None) -> str:
        """Store `data` under `name` (overwriting) and return a durable reference URL."""
        ...

    def delete(self, name: str) -> None:
        """Remove `name` if it exists."""
        ...


class LocalBlobStorage:
    """Persist blobs under a local directory; references are file:// URIs."""

    def __init__(self, root: str | Path = config.LOCAL_STORAGE_PATH) -> None:
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def _path(self, name: str) -> Path:
        # blob names are generated server-side, but never let one escape the root
        return self.root / Path(name).name

    def upload(self, data: bytes, name: str, original_filename: Optional[str] = None) -> str:
        destination = self._path(name)
        try:
            with open(destination, "wb") as handle:
                handle.write(data)
        except OSError as exc:
            raise StorageFailure(f"Local upload failed: {exc}") from exc
        return destination.resolve().as_uri()

    def delete(self, name: str) -> None:
        try:
            self._path(name).unlink(missing_ok=True)
        except OSError as exc:
            raise StorageFailure(f"Local delete failed: {exc}") from exc


class S3BlobStorage:
    """
    Persist blobs to an S3 bucket. Objects are written with a forced-download
    Content-Disposition and referenced by a presigned GET URL.
    """

    def __init__(
        self,
        bucket: str = config.S3_BUCKET_NAME,
        client=None,
        url_ttl_seconds: int = config.SIGNED_URL_TTL,
    ) -> None:
        if not bucket:
            raise StorageFailure("S3 storage requested but S3_BUCKET_NAME is not set")
        self.bucket = bucket
        self.url_ttl_seconds = url_ttl_seconds
        self._s3 = client or boto3.client(
            "s3",
            region_name=config.S3_REGION,
            endpoint_url=config.S3_ENDPOINT_URL,
            config=Config(signature_version="s3v4"),
        )

    def upload(self, data: bytes, name: str, original_filename: Optional[str] = None) -> str:
        try:
            self._s3.put_object(
                Bucket=self.bucket,
                Key=name,
                Body=data,
                ContentType=OCTET_STREAM,
                ContentDisposition=attachment_disposition(name),
            )
        except (ClientError, BotoCoreError) as exc:
            raise StorageFailure(f"S3 upload failed: {exc}") from exc
        return self.signed_url(name, original_filename or name)

    def signed_url(self, name: str, download_name: str) -> str:
        try:
            return self._s3.generate_presigned_url(
                "get_object",
                Params={
                    "Bucket": self.bucket,
                    "Key": name,
                    "ResponseContentDisposition": attachment_disposition(download_name),
                },
                ExpiresIn=self.url_ttl_seconds,
            )
        except (ClientError, BotoCoreError) as exc:
            raise StorageFailure(f"S3 URL signing failed: {exc}") from exc

    def delete(self, name: str) -> None:
        # S3 DeleteObject already succeeds for missing keys
        try:
            self._s3.delete_object(Bucket=self.bucket, Key=name)
        except (ClientError, BotoCoreError) as exc:
            raise StorageFailure(f"S3 delete failed: {exc}") from exc


def make_storage(backend: Optional[str] = None) -> BlobStorage:
    backend = (backend or config.STORAGE_BACKEND or "local").lower()
    if backend == "s3":
        return S3BlobStorage(config.S3_BUCKET_NAME)
    if backend != "local":
        logger.warning("Unknown STORAGE_BACKEND %r; using local disk.", backend)
    return LocalBlobStorage(config.LOCAL_STORAGE_PATH)
