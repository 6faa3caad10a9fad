from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any

PROJECT_ROOT = Path(__file__).resolve().parents[3]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from alerts import (  # noqa: E402
    COUNT_UNAVAILABLE,
    AlertQueryEngine,
    AlertRecord,
    AlertStore,
    Severity,
    ValidationError,
    demo_alerts,
    parse_alert_number,
)

from app.config import Settings  # noqa: E402

logger = logging.getLogger("alerts.service")

PING_MESSAGE = "Alert Web Service is operational"


def _require_text(value: str | None, field: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"Alert {field} is required", field=field)
    return str(value)


def _parse_severity(value: Severity | str | None) -> Severity:
    if isinstance(value, Severity):
        return value
    return Severity.from_value(_require_text(value, "severity").strip())


class AlertService:
    """Validates caller input and routes it to the alert store or the document query engine."""

    def __init__(self, store: AlertStore, query_engine: AlertQueryEngine) -> None:
        self.store = store
        self.query_engine = query_engine

    @classmethod
    def from_settings(cls, settings: Settings) -> "AlertService":
        document_path = settings.alerts_document_file
        store = AlertStore(document_path, seed=demo_alerts if settings.alerts_seed_demo_data else None)
        return cls(store=store, query_engine=AlertQueryEngine(document_path))

    def broadcast_alert(
        self,
        *,
        severity: Severity | str | None,
        message: str | None,
        region: str | None,
        issuer: str | None = None,
        alert_id: str | None = None,
    ) -> AlertRecord:
        parsed_severity = _parse_severity(severity)
        message = _require_text(message, "message")
        region = _require_text(region, "region")
        if alert_id and parse_alert_number(alert_id) is None:
            raise ValidationError(f"Alert id must look like 'ALERT-<n>', got {alert_id!r}", field="id")

        saved = self.store.save(
            AlertRecord(
                id=alert_id or "",
                severity=parsed_severity,
                message=message,
                region=region,
                issuer=issuer,
            )
        )
        logger.info(
            "Alert broadcasted successfully id=%s severity=%s region=%s",
            saved.id,
            saved.severity.value,
            saved.region,
        )
        return saved

    def get_all_alerts(self) -> list[AlertRecord]:
        alerts = self.store.find_all()
        logger.info("Retrieved %s alerts", len(alerts))
        return alerts

    def get_alert(self, alert_id: str) -> AlertRecord:
        record = self.store.find_by_id(alert_id)
        if record is None:
            raise LookupError(f"alert not found: {alert_id}")
        return record

    def delete_alert(self, alert_id: str) -> None:
        if not self.store.delete(alert_id):
            raise LookupError(f"alert not found: {alert_id}")

    def get_critical_alerts(self) -> list[AlertRecord]:
        alerts = self.query_engine.filter_critical()
        logger.info("Retrieved %s critical alerts from document", len(alerts))
        return alerts

    def get_alerts_by_region(self, region: str | None) -> list[AlertRecord]:
        region = _require_text(region, "region").strip()
        alerts = self.query_engine.filter_by_region(region)
        logger.info("Retrieved %s alerts for region=%s", len(alerts), region)
        return alerts

    def get_alerts_by_severity(self, severity: Severity | str | None) -> list[AlertRecord]:
        parsed = _parse_severity(severity)
        alerts = self.query_engine.filter_by_severity(parsed)
        logger.info("Retrieved %s alerts with severity=%s", len(alerts), parsed.value)
        return alerts

    def get_high_priority_alerts(self) -> list[AlertRecord]:
        alerts = self.query_engine.filter_high_priority()
        logger.info("Retrieved %s high priority alerts", len(alerts))
        return alerts

    def count_alerts_by_severity(self, severity: Severity | str | None) -> int:
        parsed = _parse_severity(severity)
        count = self.query_engine.count_by_severity(parsed)
        logger.info("Count of %s alerts: %s", parsed.value, count)
        return count

    def get_most_recent_alert(self) -> AlertRecord:
        record = self.query_engine.most_recent()
        if record is None:
            raise LookupError("alert document holds no alerts")
        return record

    def severity_summary(self) -> dict[str, Any]:
        counts = {severity.value: self.query_engine.count_by_severity(severity) for severity in Severity}
        available = all(value != COUNT_UNAVAILABLE for value in counts.values())
        return {
            "counts": counts,
            "total": sum(counts.values()) if available else None,
            "available": available,
        }

    def document_health(self) -> dict[str, Any]:
        return {
            "document_path": str(self.query_engine.document_path),
            "valid": self.query_engine.validate_structure(),
        }

    def ping(self) -> str:
        return PING_MESSAGE
