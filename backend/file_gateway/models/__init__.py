from file_gateway.models.stored_object import StoredObject, UploadedObject

__all__ = [
    "StoredObject",
    "UploadedObject",
]
