from .alert_store import AlertStore
from .document_codec import (
    ALERT_NAMESPACE,
    decode_alerts,
    encode_alerts,
    read_alerts,
    write_alerts,
)
from .errors import AlertStoreError, PersistenceError, ValidationError
from .models import (
    HIGH_PRIORITY_SEVERITIES,
    AlertRecord,
    Severity,
    demo_alerts,
    format_alert_id,
    parse_alert_number,
)
from .query_engine import COUNT_UNAVAILABLE, AlertQueryEngine

__all__ = [
    "AlertRecord",
    "AlertStore",
    "AlertQueryEngine",
    "Severity",
    "AlertStoreError",
    "ValidationError",
    "PersistenceError",
    "ALERT_NAMESPACE",
    "COUNT_UNAVAILABLE",
    "HIGH_PRIORITY_SEVERITIES",
    "encode_alerts",
    "decode_alerts",
    "read_alerts",
    "write_alerts",
    "demo_alerts",
    "format_alert_id",
    "parse_alert_number",
]
