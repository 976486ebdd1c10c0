from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse


class GatewayError(Exception):
    """Base error rendered as ``{"error": ..., "details": ...}``."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, error: str, details: str | None = None) -> None:
        super().__init__(error)
        self.error = error
        self.details = details

    def to_payload(self) -> dict[str, str]:
        payload = {"error": self.error}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class ClientError(GatewayError):
    """Required request input is missing or unusable."""

    status_code = status.HTTP_400_BAD_REQUEST


class FileTooLargeError(ClientError):
    status_code = 413


class BackendError(GatewayError):
    """The object storage service rejected or failed a call."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class ObjectNotFoundError(BackendError):
    status_code = status.HTTP_404_NOT_FOUND


async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(GatewayError, gateway_error_handler)
