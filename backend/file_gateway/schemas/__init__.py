from file_gateway.schemas.health import HealthResponse
from file_gateway.schemas.storage import (
    DeleteResponse,
    ErrorResponse,
    FileListResponse,
    SignedUrlResponse,
    StoredObjectRead,
    UploadedObjectRead,
    UploadResponse,
)

__all__ = [
    "UploadResponse",
    "UploadedObjectRead",
    "FileListResponse",
    "StoredObjectRead",
    "SignedUrlResponse",
    "DeleteResponse",
    "ErrorResponse",
    "HealthResponse",
]
