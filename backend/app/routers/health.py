from fastapi import APIRouter, Depends

from app.dependencies import get_alert_service
from app.schemas import DocumentHealthResponse, HealthResponse, PingResponse
from app.services.alert_service import AlertService

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="ok")


@router.get("/health/document", response_model=DocumentHealthResponse)
def document_health(service: AlertService = Depends(get_alert_service)) -> DocumentHealthResponse:
    return DocumentHealthResponse.model_validate(service.document_health())


@router.get("/ping", response_model=PingResponse)
def ping(service: AlertService = Depends(get_alert_service)) -> PingResponse:
    return PingResponse(message=service.ping())
