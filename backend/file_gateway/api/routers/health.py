from datetime import datetime, timezone

from fastapi import APIRouter

from file_gateway.schemas import HealthResponse

router = APIRouter(prefix="/api", tags=["health"])


def utc_timestamp() -> str:
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(status="OK", timestamp=utc_timestamp())
