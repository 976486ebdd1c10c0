from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str = "OK"
    timestamp: str
