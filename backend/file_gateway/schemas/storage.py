from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class UploadedObjectRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    key: str
    location: str
    bucket: str
    etag: str | None = None


class UploadResponse(BaseModel):
    success: bool = True
    message: str = "File uploaded successfully"
    data: UploadedObjectRead


class StoredObjectRead(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    key: str
    last_modified: datetime | None = Field(default=None, serialization_alias="lastModified")
    size: int
    etag: str | None = None


class FileListResponse(BaseModel):
    success: bool = True
    files: list[StoredObjectRead]
    count: int


class SignedUrlResponse(BaseModel):
    success: bool = True
    url: str
    expires: int


class DeleteResponse(BaseModel):
    success: bool = True
    message: str = "File deleted successfully"
    key: str


class ErrorResponse(BaseModel):
    error: str
    details: str | None = None
