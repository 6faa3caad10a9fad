from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response

from app.dependencies import get_alert_service
from app.schemas import (
    AlertCountResponse,
    AlertCreateRequest,
    AlertResponse,
    BroadcastResponse,
    SeveritySummaryResponse,
)
from app.services.alert_service import AlertService
from alerts import COUNT_UNAVAILABLE, AlertRecord, PersistenceError

router = APIRouter()


def _to_response(record: AlertRecord) -> AlertResponse:
    return AlertResponse.model_validate(record.to_dict())


def _to_responses(records: list[AlertRecord]) -> list[AlertResponse]:
    return [_to_response(record) for record in records]


@router.post("/alerts", response_model=BroadcastResponse, status_code=201)
def broadcast_alert(
    payload: AlertCreateRequest,
    service: AlertService = Depends(get_alert_service),
) -> BroadcastResponse:
    try:
        saved = service.broadcast_alert(
            alert_id=payload.id,
            severity=payload.severity,
            message=payload.message,
            region=payload.region,
            issuer=payload.issuer,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except PersistenceError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    except Exception as exc:  # noqa: BLE001
        raise HTTPException(status_code=500, detail=f"Alert broadcast error: {exc}") from exc

    return BroadcastResponse(
        message=(
            f"Alert broadcasted successfully. ID: {saved.id}, "
            f"Severity: {saved.severity.value}, Region: {saved.region}"
        ),
        alert=_to_response(saved),
    )


@router.get("/alerts", response_model=list[AlertResponse])
def get_all_alerts(service: AlertService = Depends(get_alert_service)) -> list[AlertResponse]:
    return _to_responses(service.get_all_alerts())


@router.get("/alerts/critical", response_model=list[AlertResponse])
def get_critical_alerts(service: AlertService = Depends(get_alert_service)) -> list[AlertResponse]:
    try:
        return _to_responses(service.get_critical_alerts())
    except PersistenceError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    except Exception as exc:  # noqa: BLE001
        raise HTTPException(status_code=500, detail=f"Alert query error: {exc}") from exc


@router.get("/alerts/high-priority", response_model=list[AlertResponse])
def get_high_priority_alerts(service: AlertService = Depends(get_alert_service)) -> list[AlertResponse]:
    try:
        return _to_responses(service.get_high_priority_alerts())
    except PersistenceError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    except Exception as exc:  # noqa: BLE001
        raise HTTPException(status_code=500, detail=f"Alert query error: {exc}") from exc


@router.get("/alerts/latest", response_model=AlertResponse)
def get_most_recent_alert(service: AlertService = Depends(get_alert_service)) -> AlertResponse:
    try:
        return _to_response(service.get_most_recent_alert())
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except PersistenceError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    except Exception as exc:  # noqa: BLE001
        raise HTTPException(status_code=500, detail=f"Alert query error: {exc}") from exc


@router.get("/alerts/summary", response_model=SeveritySummaryResponse)
def get_severity_summary(service: AlertService = Depends(get_alert_service)) -> SeveritySummaryResponse:
    return SeveritySummaryResponse.model_validate(service.severity_summary())


@router.get("/alerts/region/{region}", response_model=list[AlertResponse])
def get_alerts_by_region(region: str, service: AlertService = Depends(get_alert_service)) -> list[AlertResponse]:
    try:
        return _to_responses(service.get_alerts_by_region(region))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except PersistenceError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    except Exception as exc:  # noqa: BLE001
        raise HTTPException(status_code=500, detail=f"Alert query error: {exc}") from exc


@router.get("/alerts/severity/{severity}", response_model=list[AlertResponse])
def get_alerts_by_severity(severity: str, service: AlertService = Depends(get_alert_service)) -> list[AlertResponse]:
    try:
        return _to_responses(service.get_alerts_by_severity(severity))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except PersistenceError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    except Exception as exc:  # noqa: BLE001
        raise HTTPException(status_code=500, detail=f"Alert query error: {exc}") from exc


@router.get("/alerts/severity/{severity}/count", response_model=AlertCountResponse)
def count_alerts_by_severity(severity: str, service: AlertService = Depends(get_alert_service)) -> AlertCountResponse:
    try:
        count = service.count_alerts_by_severity(severity)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    if count == COUNT_UNAVAILABLE:
        raise HTTPException(status_code=503, detail=f"Count of {severity} alerts is unavailable")
    return AlertCountResponse(severity=severity.strip(), count=count)


@router.get("/alerts/{alert_id}", response_model=AlertResponse)
def get_alert(alert_id: str, service: AlertService = Depends(get_alert_service)) -> AlertResponse:
    try:
        return _to_response(service.get_alert(alert_id))
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.delete("/alerts/{alert_id}", status_code=204)
def delete_alert(alert_id: str, service: AlertService = Depends(get_alert_service)) -> Response:
    try:
        service.delete_alert(alert_id)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except PersistenceError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    return Response(status_code=204)
