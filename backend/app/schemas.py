from typing import Literal

from pydantic import BaseModel, Field


SeverityValue = Literal["INFO", "WARNING", "SEVERE", "CRITICAL"]


class HealthResponse(BaseModel):
    status: str


class PingResponse(BaseModel):
    message: str


class DocumentHealthResponse(BaseModel):
    document_path: str
    valid: bool


class AlertCreateRequest(BaseModel):
    id: str | None = Field(default=None, pattern=r"^ALERT-[1-9]\d*$")
    severity: SeverityValue
    message: str = Field(..., min_length=1, max_length=2000)
    region: str = Field(..., min_length=1, max_length=200)
    issuer: str | None = Field(default=None, max_length=200)


class AlertResponse(BaseModel):
    id: str
    severity: SeverityValue
    message: str
    region: str
    timestamp: str
    issuer: str | None = None


class BroadcastResponse(BaseModel):
    message: str
    alert: AlertResponse


class AlertCountResponse(BaseModel):
    severity: SeverityValue
    count: int = Field(..., ge=0)


class SeveritySummaryResponse(BaseModel):
    counts: dict[str, int]
    total: int | None = None
    available: bool
