from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from .errors import ValidationError

ALERT_ID_PREFIX = "ALERT-"
_ALERT_ID_PATTERN = re.compile(r"^ALERT-(\d+)$")
# Local date-time only: no offset, no compact or date-only forms, so string order is chronological.
_TIMESTAMP_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}(:\d{2}(\.\d{1,9})?)?$")
# Anything outside the XML 1.0 Char production.
_XML_INVALID_CHARS = re.compile("[^\u0009\u000A\u000D\u0020-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]")


class Severity(str, Enum):
    """Alert urgency, ordered by rank (INFO < WARNING < SEVERE < CRITICAL)."""

    INFO = "INFO"
    WARNING = "WARNING"
    SEVERE = "SEVERE"
    CRITICAL = "CRITICAL"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANKS[self]

    @property
    def display_name(self) -> str:
        return _SEVERITY_DISPLAY_NAMES[self]

    @classmethod
    def from_value(cls, value: str) -> "Severity":
        for level in cls:
            if level.value == value:
                return level
        raise ValidationError(
            f"Invalid severity level: {value!r}. Supported: {[level.value for level in cls]}",
            field="severity",
        )

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank >= other.rank

    def __str__(self) -> str:
        return self.value


_SEVERITY_RANKS = {
    Severity.INFO: 1,
    Severity.WARNING: 2,
    Severity.SEVERE: 3,
    Severity.CRITICAL: 4,
}

_SEVERITY_DISPLAY_NAMES = {
    Severity.INFO: "Informational",
    Severity.WARNING: "Warning",
    Severity.SEVERE: "Severe",
    Severity.CRITICAL: "Critical",
}

HIGH_PRIORITY_SEVERITIES = frozenset({Severity.SEVERE, Severity.CRITICAL})


def now_local_iso() -> str:
    return datetime.now().isoformat(timespec="milliseconds")


def format_alert_id(number: int) -> str:
    return f"{ALERT_ID_PREFIX}{number}"


def parse_alert_number(alert_id: str) -> int | None:
    """Return the numeric suffix of an ``ALERT-<n>`` id, or None for any other shape."""
    match = _ALERT_ID_PATTERN.match(alert_id or "")
    if match is None:
        return None
    number = int(match.group(1))
    return number if number > 0 else None


@dataclass(frozen=True)
class AlertRecord:
    """
    One emergency alert.

    ``id`` is empty until the store assigns one. ``timestamp`` is an ISO-8601
    local date-time string; uniform formatting keeps string order equal to
    chronological order.
    """

    severity: Severity
    message: str
    region: str
    id: str = ""
    timestamp: str = field(default_factory=now_local_iso)
    issuer: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.severity, Severity):
            object.__setattr__(self, "severity", Severity.from_value(str(self.severity)))

        for name in ("message", "region"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise ValidationError(f"Alert {name} is required", field=name)

        if not isinstance(self.timestamp, str) or not self.timestamp.strip():
            raise ValidationError("Alert timestamp is required", field="timestamp")
        invalid_timestamp = ValidationError(
            f"Alert timestamp is not an ISO-8601 local date-time: {self.timestamp!r}",
            field="timestamp",
        )
        if not _TIMESTAMP_PATTERN.fullmatch(self.timestamp):
            raise invalid_timestamp
        try:
            datetime.fromisoformat(self.timestamp)
        except ValueError as exc:
            raise invalid_timestamp from exc

        if self.id is None:
            object.__setattr__(self, "id", "")
        if self.issuer is not None and not self.issuer.strip():
            object.__setattr__(self, "issuer", None)

        for name in ("id", "message", "region", "issuer"):
            value = getattr(self, name)
            if value is None:
                continue
            match = _XML_INVALID_CHARS.search(value)
            if match is not None:
                raise ValidationError(
                    f"Alert {name} contains a character not allowed in XML: "
                    f"U+{ord(match.group()):04X} at offset {match.start()}",
                    field=name,
                )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "severity": self.severity.value,
            "message": self.message,
            "region": self.region,
            "timestamp": self.timestamp,
            "issuer": self.issuer,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AlertRecord":
        if "severity" not in data or data["severity"] is None:
            raise ValidationError("Alert severity is required", field="severity")
        kwargs: dict[str, Any] = {
            "severity": Severity.from_value(str(data["severity"])),
            "message": data.get("message", ""),
            "region": data.get("region", ""),
            "id": data.get("id") or "",
            "issuer": data.get("issuer"),
        }
        if data.get("timestamp"):
            kwargs["timestamp"] = data["timestamp"]
        return cls(**kwargs)


def demo_alerts() -> list[AlertRecord]:
    """Records used to seed a brand-new alert document."""
    return [
        AlertRecord(
            id=format_alert_id(1),
            severity=Severity.CRITICAL,
            message="Inondations majeures suite aux fortes pluies. Évitez les déplacements et montez aux étages.",
            region="Nabeul",
            issuer="Protection Civile",
        ),
        AlertRecord(
            id=format_alert_id(2),
            severity=Severity.SEVERE,
            message="Vague de chaleur extrême. Températures dépassant 48°C à l'ombre.",
            region="Tozeur",
            issuer="INM (Météo Tunisie)",
        ),
        AlertRecord(
            id=format_alert_id(3),
            severity=Severity.WARNING,
            message="Vents de sable violents réduisant la visibilité à moins de 50m. Prudence sur l'autoroute.",
            region="Gabès - Autoroute A1",
            issuer="Garde Nationale",
        ),
        AlertRecord(
            id=format_alert_id(4),
            severity=Severity.CRITICAL,
            message="Fuite de gaz industrielle détectée. Zone industrielle fermée. Portez des masques.",
            region="Sfax - Zone Thyna",
            issuer="ONAS",
        ),
        AlertRecord(
            id=format_alert_id(5),
            severity=Severity.INFO,
            message="Travaux de maintenance sur le Pont Rades-La Goulette. Circulation ralentie.",
            region="Tunis - La Goulette",
            issuer="Ministère de l'Équipement",
        ),
    ]
