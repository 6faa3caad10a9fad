from __future__ import annotations

import dataclasses
import logging
import threading
from pathlib import Path
from typing import Callable, Iterable

from .document_codec import read_alerts, write_alerts
from .models import AlertRecord, demo_alerts, format_alert_id, parse_alert_number

logger = logging.getLogger("alerts.store")


class AlertStore:
    """
    In-memory alert index, written through to the alert document.

    Every mutation builds the next index, persists it, and only then publishes
    it, all under one lock. A failed write therefore leaves both the index and
    the document at their previous state. Readers use whichever index was last
    published without taking the lock.
    """

    def __init__(
        self,
        document_path: str | Path,
        *,
        seed: Callable[[], Iterable[AlertRecord]] | None = demo_alerts,
    ) -> None:
        self._document_path = Path(document_path)
        self._lock = threading.Lock()
        self._alerts: dict[str, AlertRecord] = {}
        self._next_number = 1
        self._load(seed)

    @property
    def document_path(self) -> Path:
        return self._document_path

    def _load(self, seed: Callable[[], Iterable[AlertRecord]] | None) -> None:
        if self._document_path.exists():
            records = read_alerts(self._document_path)
            alerts: dict[str, AlertRecord] = {}
            for record in records:
                if record.id in alerts:
                    logger.warning("Duplicate alert id in document id=%s; keeping the later record", record.id)
                alerts[record.id] = record
            self._alerts = alerts
            self._next_number = self._counter_after(alerts.keys(), 1)
            logger.info(
                "Alert store loaded path=%s alerts=%s next_id=%s",
                self._document_path,
                len(alerts),
                format_alert_id(self._next_number),
            )
            return

        records = list(seed()) if seed is not None else []
        alerts = {record.id: record for record in records}
        write_alerts(self._document_path, alerts.values())
        self._alerts = alerts
        self._next_number = self._counter_after(alerts.keys(), 1)
        logger.info("Alert store initialized path=%s seeded_alerts=%s", self._document_path, len(alerts))

    @staticmethod
    def _counter_after(alert_ids: Iterable[str], current: int) -> int:
        next_number = current
        for alert_id in alert_ids:
            number = parse_alert_number(alert_id)
            if number is not None and number >= next_number:
                next_number = number + 1
        return next_number

    def save(self, record: AlertRecord) -> AlertRecord:
        """Insert or overwrite ``record``, generating an id when it has none."""
        with self._lock:
            next_number = self._next_number
            if not record.id:
                record = dataclasses.replace(record, id=format_alert_id(next_number))
            next_number = self._counter_after([record.id], next_number)

            alerts = dict(self._alerts)
            replaced = record.id in alerts
            alerts[record.id] = record
            write_alerts(self._document_path, alerts.values())

            self._alerts = alerts
            self._next_number = next_number

        logger.info(
            "Alert saved id=%s severity=%s region=%s replaced=%s",
            record.id,
            record.severity.value,
            record.region,
            replaced,
        )
        return record

    def find_by_id(self, alert_id: str) -> AlertRecord | None:
        return self._alerts.get(alert_id)

    def find_all(self) -> list[AlertRecord]:
        return list(self._alerts.values())

    def delete(self, alert_id: str) -> bool:
        with self._lock:
            if alert_id not in self._alerts:
                return False
            alerts = dict(self._alerts)
            del alerts[alert_id]
            write_alerts(self._document_path, alerts.values())
            self._alerts = alerts

        logger.info("Alert deleted id=%s", alert_id)
        return True

    def __len__(self) -> int:
        return len(self._alerts)
