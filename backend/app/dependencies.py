from fastapi import HTTPException, Request

from app.services.alert_service import AlertService


def get_alert_service(request: Request) -> AlertService:
    service = getattr(request.app.state, "alert_service", None)
    if service is None:
        raise HTTPException(status_code=503, detail="Alert service is not initialized")
    return service
