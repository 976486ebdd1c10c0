import asyncio
import logging
import time
from collections.abc import Iterator
from pathlib import PurePosixPath
from typing import Any, Final
from urllib.parse import quote

import boto3
from botocore.client import Config
from botocore.exceptions import ClientError

from file_gateway.core.config import Settings
from file_gateway.models import StoredObject, UploadedObject

logger = logging.getLogger(__name__)

DOWNLOAD_CHUNK_SIZE: Final[int] = 64 * 1024

_MISSING_OBJECT_CODES: Final[frozenset[str]] = frozenset({"404", "NoSuchKey", "NotFound"})


class StorageError(RuntimeError):
    """Raised when an object storage call fails."""


class ObjectMissingError(StorageError):
    """Raised when the requested key does not exist in the bucket."""


def _error_message(exc: Exception) -> str:
    if isinstance(exc, ClientError):
        message = exc.response.get("Error", {}).get("Message")
        if message:
            return str(message)
    return str(exc)


def _is_missing_object(exc: Exception) -> bool:
    if not isinstance(exc, ClientError):
        return False
    code = str(exc.response.get("Error", {}).get("Code", ""))
    return code in _MISSING_OBJECT_CODES


def build_object_key(filename: str, timestamp_ms: int | None = None) -> str:
    """Return ``<epoch-ms>-<filename>`` using only the last path component."""
    name = PurePosixPath(filename.replace("\\", "/")).name or "file"
    if timestamp_ms is None:
        timestamp_ms = time.time_ns() // 1_000_000
    return f"{timestamp_ms}-{name}"


class StorageService:
    """S3-compatible bucket access used by the gateway routes.

    boto3 is synchronous, so every network call runs in a worker thread.
    """

    def __init__(self, settings: Settings, client: Any | None = None) -> None:
        self.settings = settings
        self.bucket = settings.s3_bucket_name
        self.client = client if client is not None else self._build_client(settings)

    @staticmethod
    def _build_client(settings: Settings) -> Any:
        session = boto3.session.Session()
        return session.client(
            "s3",
            endpoint_url=str(settings.s3_endpoint) if settings.s3_endpoint else None,
            aws_access_key_id=settings.s3_access_key,
            aws_secret_access_key=settings.s3_secret_key,
            region_name=settings.s3_region,
            config=Config(signature_version="s3v4"),
        )

    async def _call(self, operation: str, **params: Any) -> dict[str, Any]:
        method = getattr(self.client, operation)
        try:
            return await asyncio.to_thread(method, **params)
        except Exception as exc:
            if _is_missing_object(exc):
                raise ObjectMissingError(_error_message(exc)) from exc
            raise StorageError(_error_message(exc)) from exc

    def object_location(self, key: str) -> str:
        quoted_key = quote(key)
        if self.settings.s3_endpoint:
            endpoint = str(self.settings.s3_endpoint).rstrip("/")
            return f"{endpoint}/{self.bucket}/{quoted_key}"
        region = self.settings.s3_region or "us-east-1"
        return f"https://{self.bucket}.s3.{region}.amazonaws.com/{quoted_key}"

    async def upload_object(self, key: str, data: bytes, content_type: str) -> UploadedObject:
        response = await self._call(
            "put_object",
            Bucket=self.bucket,
            Key=key,
            Body=data,
            ContentType=content_type,
            ACL="private",
        )
        logger.info("Stored %s (%d bytes) in bucket %s", key, len(data), self.bucket)
        return UploadedObject(
            key=key,
            location=self.object_location(key),
            bucket=self.bucket,
            etag=response.get("ETag"),
        )

    async def list_objects(self) -> list[StoredObject]:
        response = await self._call(
            "list_objects_v2",
            Bucket=self.bucket,
            MaxKeys=self.settings.list_max_keys,
        )
        return [
            StoredObject(
                key=item["Key"],
                size=int(item.get("Size", 0)),
                last_modified=item.get("LastModified"),
                etag=item.get("ETag"),
            )
            for item in response.get("Contents", [])
        ]

    async def head_object(self, key: str) -> StoredObject:
        response = await self._call("head_object", Bucket=self.bucket, Key=key)
        return StoredObject(
            key=key,
            size=int(response.get("ContentLength", 0)),
            last_modified=response.get("LastModified"),
            etag=response.get("ETag"),
            content_type=response.get("ContentType"),
        )

    async def open_object_stream(
        self, key: str, chunk_size: int = DOWNLOAD_CHUNK_SIZE
    ) -> Iterator[bytes]:
        response = await self._call("get_object", Bucket=self.bucket, Key=key)
        return self._iter_body(response["Body"], chunk_size)

    @staticmethod
    def _iter_body(body: Any, chunk_size: int) -> Iterator[bytes]:
        try:
            yield from body.iter_chunks(chunk_size)
        finally:
            body.close()

    def create_presigned_get(self, key: str, expires_in: int) -> str:
        try:
            url = self.client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self.bucket, "Key": key},
                ExpiresIn=int(expires_in),
            )
        except Exception as exc:
            raise StorageError(_error_message(exc)) from exc
        return str(url)

    async def delete_object(self, key: str) -> None:
        await self._call("delete_object", Bucket=self.bucket, Key=key)
        logger.info("Deleted %s from bucket %s", key, self.bucket)
