import logging
import re
from urllib.parse import quote

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import StreamingResponse
from starlette.datastructures import UploadFile

from file_gateway.api.deps import get_storage_service
from file_gateway.core.errors import (
    BackendError,
    ClientError,
    FileTooLargeError,
    ObjectNotFoundError,
)
from file_gateway.schemas import (
    DeleteResponse,
    ErrorResponse,
    FileListResponse,
    SignedUrlResponse,
    StoredObjectRead,
    UploadedObjectRead,
    UploadResponse,
)
from file_gateway.services.storage import (
    ObjectMissingError,
    StorageError,
    StorageService,
    build_object_key,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["files"])

UPLOAD_READ_CHUNK = 1024 * 1024
DEFAULT_CONTENT_TYPE = "application/octet-stream"

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

_error_responses = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    413: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


_upload_request_body = {
    "requestBody": {
        "required": True,
        "content": {
            "multipart/form-data": {
                "schema": {
                    "type": "object",
                    "properties": {"file": {"type": "string", "format": "binary"}},
                    "required": ["file"],
                }
            }
        },
    }
}


# A file of exactly ``limit`` bytes is accepted; only larger ones are rejected.
async def _read_limited(file: UploadFile, limit: int) -> bytes:
    too_large = FileTooLargeError(
        "File too large", details=f"Maximum upload size is {limit} bytes"
    )
    if file.size is not None and file.size > limit:
        raise too_large

    buffer = bytearray()
    while True:
        chunk = await file.read(UPLOAD_READ_CHUNK)
        if not chunk:
            break
        buffer.extend(chunk)
        if len(buffer) > limit:
            raise too_large
    return bytes(buffer)


def parse_expires(raw: str | None, default: int) -> int:
    """Leading integer of ``raw``; missing, unparsable or non-positive gives ``default``."""
    if raw is None:
        return default
    match = _LEADING_INT.match(raw)
    if not match:
        return default
    value = int(match.group(1))
    return value if value > 0 else default


def _content_disposition(key: str) -> str:
    escaped = key.replace("\\", "\\\\").replace('"', '\\"')
    try:
        escaped.encode("latin-1")
    except UnicodeEncodeError:
        fallback = escaped.encode("ascii", "replace").decode("ascii")
        return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(key, safe='')}"
    return f'attachment; filename="{escaped}"'


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses=_error_responses,
    openapi_extra=_upload_request_body,
)
async def upload_file(
    request: Request,
    storage: StorageService = Depends(get_storage_service),
) -> UploadResponse:
    # Parsed by hand so a text field named "file" is a 400, not a validation error.
    async with request.form() as form:
        file = form.get("file")
        if not isinstance(file, UploadFile) or not file.filename:
            raise ClientError("No file provided")

        data = await _read_limited(file, storage.settings.max_upload_size)
        filename = file.filename
        content_type = file.content_type or DEFAULT_CONTENT_TYPE

    key = build_object_key(filename)
    try:
        uploaded = await storage.upload_object(key, data, content_type)
    except StorageError as exc:
        logger.exception("Upload error for %s", key)
        raise BackendError("Failed to upload file", details=str(exc)) from exc

    return UploadResponse(data=UploadedObjectRead.model_validate(uploaded))


@router.get("/files", response_model=FileListResponse, responses=_error_responses)
async def list_files(
    storage: StorageService = Depends(get_storage_service),
) -> FileListResponse:
    try:
        objects = await storage.list_objects()
    except StorageError as exc:
        logger.exception("List files error")
        raise BackendError("Failed to retrieve files", details=str(exc)) from exc

    files = [StoredObjectRead.model_validate(obj) for obj in objects]
    return FileListResponse(files=files, count=len(files))


@router.get(
    "/download/{key:path}",
    response_class=StreamingResponse,
    responses=_error_responses,
)
async def download_file(
    key: str,
    storage: StorageService = Depends(get_storage_service),
) -> StreamingResponse:
    try:
        await storage.head_object(key)
        chunks = await storage.open_object_stream(key)
    except ObjectMissingError:
        raise ObjectNotFoundError("File not found") from None
    except StorageError as exc:
        logger.exception("Download error for %s", key)
        raise BackendError("Failed to download file", details=str(exc)) from exc

    return StreamingResponse(
        chunks,
        media_type="application/octet-stream",
        headers={"Content-Disposition": _content_disposition(key)},
    )


@router.get(
    "/file-url/{key:path}",
    response_model=SignedUrlResponse,
    responses=_error_responses,
)
async def get_file_url(
    key: str,
    expires: str | None = Query(default=None),
    storage: StorageService = Depends(get_storage_service),
) -> SignedUrlResponse:
    expiration = parse_expires(expires, storage.settings.signed_url_default_expires)
    try:
        url = storage.create_presigned_get(key, expiration)
    except StorageError as exc:
        logger.exception("Get URL error for %s", key)
        raise BackendError("Failed to generate file URL", details=str(exc)) from exc
    return SignedUrlResponse(url=url, expires=expiration)


@router.delete("/delete/{key:path}", response_model=DeleteResponse, responses=_error_responses)
async def delete_file(
    key: str,
    storage: StorageService = Depends(get_storage_service),
) -> DeleteResponse:
    # S3 does not report missing keys on delete, so this succeeds either way.
    try:
        await storage.delete_object(key)
    except StorageError as exc:
        logger.exception("Delete error for %s", key)
        raise BackendError("Failed to delete file", details=str(exc)) from exc
    return DeleteResponse(key=key)
