from __future__ import annotations

import logging
import os
import tempfile
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Iterable

from .errors import PersistenceError, ValidationError
from .models import AlertRecord, Severity

logger = logging.getLogger("alerts.codec")

ALERT_NAMESPACE = "http://smartcity.com/alert"
NAMESPACES = {"a": ALERT_NAMESPACE}

ROOT_TAG = "alerts"
RECORD_TAG = "alert"
FIELD_ORDER = ("id", "severity", "message", "region", "timestamp", "issuer")
REQUIRED_FIELDS = ("id", "severity", "message", "region", "timestamp")

RECORD_XPATH = ".//a:alert"


def _qualified(local_name: str) -> str:
    return f"{{{ALERT_NAMESPACE}}}{local_name}"


def _record_to_element(record: AlertRecord) -> ET.Element:
    element = ET.Element(_qualified(RECORD_TAG))
    values = record.to_dict()
    for name in FIELD_ORDER:
        value = values.get(name)
        if value is None:
            continue
        child = ET.SubElement(element, _qualified(name))
        child.text = str(value)
    return element


def encode_alerts(records: Iterable[AlertRecord]) -> bytes:
    """Serialize records, in the given order, into a UTF-8 namespaced alert document."""
    root = ET.Element(_qualified(ROOT_TAG))
    for record in records:
        root.append(_record_to_element(record))
    ET.indent(root, space="  ")
    return ET.tostring(root, encoding="utf-8", xml_declaration=True, default_namespace=ALERT_NAMESPACE)


def parse_document(data: bytes) -> ET.Element:
    """Parse document bytes and return the ``alerts`` root element."""
    try:
        root = ET.fromstring(data)
    except ET.ParseError as exc:
        raise ValidationError(f"Alert document is not well-formed XML: {exc}") from exc

    if root.tag != _qualified(ROOT_TAG):
        raise ValidationError(
            f"Alert document root must be {_qualified(ROOT_TAG)!r}, found {root.tag!r}"
        )
    return root


def _child_text(element: ET.Element, local_name: str) -> str | None:
    child = element.find(f"a:{local_name}", NAMESPACES)
    if child is None:
        return None
    return "".join(child.itertext())


def record_from_element(element: ET.Element, position: int) -> AlertRecord:
    """Build a record from one ``alert`` element; ``position`` is 1-based and only used in errors."""
    values = {name: _child_text(element, name) for name in FIELD_ORDER}

    for name in REQUIRED_FIELDS:
        text = values[name]
        if text is None or not text.strip():
            raise ValidationError(
                f"Alert record #{position} is missing required field '{name}'",
                field=name,
                position=position,
            )

    try:
        severity = Severity.from_value(values["severity"].strip())
        return AlertRecord(
            id=values["id"].strip(),
            severity=severity,
            message=values["message"],
            region=values["region"],
            timestamp=values["timestamp"].strip(),
            issuer=values["issuer"],
        )
    except ValidationError as exc:
        raise ValidationError(
            f"Alert record #{position}: {exc}",
            field=exc.field,
            position=position,
        ) from exc


def iter_record_elements(root: ET.Element) -> list[ET.Element]:
    return root.findall(RECORD_XPATH, NAMESPACES)


def decode_alerts(data: bytes) -> list[AlertRecord]:
    """Parse a namespaced alert document back into records, in document order."""
    root = parse_document(data)
    return [
        record_from_element(element, position)
        for position, element in enumerate(iter_record_elements(root), start=1)
    ]


def read_document_bytes(path: str | Path) -> bytes:
    try:
        return Path(path).read_bytes()
    except OSError as exc:
        raise PersistenceError(f"Failed to read alert document {path}: {exc}") from exc


def read_alerts(path: str | Path) -> list[AlertRecord]:
    return decode_alerts(read_document_bytes(path))


def write_alerts(path: str | Path, records: Iterable[AlertRecord]) -> None:
    """
    Atomically replace the document at ``path`` with ``records``.

    The payload goes to a temporary file in the target directory which is
    fsynced and then renamed over the target, so readers observe either the
    previous document or the new one in full. A payload that does not parse
    back raises ValidationError and leaves the target untouched.
    """
    target = Path(path)
    payload = encode_alerts(records)
    # refuse to replace a readable document with one that cannot be parsed back
    parse_document(payload)
    temp_name: str | None = None
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=target.parent)
        with os.fdopen(fd, "wb") as file:
            file.write(payload)
            file.flush()
            os.fsync(file.fileno())
        os.replace(temp_name, target)
        temp_name = None
    except OSError as exc:
        raise PersistenceError(f"Failed to write alert document {target}: {exc}") from exc
    finally:
        if temp_name is not None:
            try:
                os.unlink(temp_name)
            except OSError as exc:
                logger.warning("Failed to remove temporary alert document %s: %s", temp_name, exc)

    logger.debug("Alert document written path=%s bytes=%s", target, len(payload))
