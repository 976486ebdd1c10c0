from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class StoredObject:
    """An object as reported by the bucket listing or a HEAD request."""

    key: str
    size: int
    last_modified: datetime | None
    etag: str | None
    content_type: str | None = None


@dataclass(frozen=True, slots=True)
class UploadedObject:
    key: str
    location: str
    bucket: str
    etag: str | None
