from fastapi import Request

from file_gateway.services.storage import StorageService


def get_storage_service(request: Request) -> StorageService:
    return request.app.state.storage
