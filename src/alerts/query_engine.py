from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Iterable

from .document_codec import (
    NAMESPACES,
    RECORD_XPATH,
    iter_record_elements,
    parse_document,
    read_document_bytes,
    record_from_element,
)
from .errors import PersistenceError, ValidationError
from .models import HIGH_PRIORITY_SEVERITIES, AlertRecord, Severity

logger = logging.getLogger("alerts.query")

COUNT_UNAVAILABLE = -1

_SEVERITY_XPATH = ".//a:alert[a:severity='{value}']"


class AlertQueryEngine:
    """
    Predicate queries evaluated against the persisted alert document.

    Nothing is cached: every call re-reads and re-parses the file, so results
    always reflect the last completed write regardless of in-memory state.
    """

    def __init__(self, document_path: str | Path) -> None:
        self._document_path = Path(document_path)

    @property
    def document_path(self) -> Path:
        return self._document_path

    def _load_root(self) -> ET.Element:
        return parse_document(read_document_bytes(self._document_path))

    def _severity_elements(self, root: ET.Element, severity: Severity) -> list[ET.Element]:
        return root.findall(_SEVERITY_XPATH.format(value=severity.value), NAMESPACES)

    @staticmethod
    def _to_records(root: ET.Element, elements: Iterable[ET.Element]) -> list[AlertRecord]:
        # positions refer to the record's place in the whole document
        positions = {id(element): index for index, element in enumerate(iter_record_elements(root), start=1)}
        return [record_from_element(element, positions.get(id(element), 0)) for element in elements]

    def filter_by_severity(self, severity: Severity) -> list[AlertRecord]:
        root = self._load_root()
        return self._to_records(root, self._severity_elements(root, severity))

    def filter_by_region(self, region: str) -> list[AlertRecord]:
        """Records whose region equals ``region``, ignoring case."""
        wanted = region.casefold()
        root = self._load_root()
        matches = [
            element
            for element in root.iterfind(RECORD_XPATH, NAMESPACES)
            if element.findtext("a:region", default="", namespaces=NAMESPACES).casefold() == wanted
        ]
        return self._to_records(root, matches)

    def filter_by_severity_set(self, severities: Iterable[Severity]) -> list[AlertRecord]:
        """Union of the per-severity filters, in document order."""
        root = self._load_root()
        matched: set[int] = set()
        for severity in set(severities):
            matched.update(id(element) for element in self._severity_elements(root, severity))
        ordered = [element for element in iter_record_elements(root) if id(element) in matched]
        return self._to_records(root, ordered)

    def filter_critical(self) -> list[AlertRecord]:
        return self.filter_by_severity(Severity.CRITICAL)

    def filter_high_priority(self) -> list[AlertRecord]:
        return self.filter_by_severity_set(HIGH_PRIORITY_SEVERITIES)

    def count_by_severity(self, severity: Severity) -> int:
        """Number of records with ``severity``, or COUNT_UNAVAILABLE if the document cannot be read."""
        try:
            root = self._load_root()
        except (PersistenceError, ValidationError) as exc:
            logger.warning("Alert count unavailable severity=%s path=%s: %s", severity.value, self._document_path, exc)
            return COUNT_UNAVAILABLE
        return len(self._severity_elements(root, severity))

    def most_recent(self) -> AlertRecord | None:
        root = self._load_root()
        records = self._to_records(root, iter_record_elements(root))
        if not records:
            return None
        return max(records, key=lambda record: record.timestamp)

    def validate_structure(self) -> bool:
        """True when the document parses and holds at least one well-formed alert."""
        try:
            root = self._load_root()
            for position, element in enumerate(iter_record_elements(root), start=1):
                try:
                    record_from_element(element, position)
                except ValidationError as exc:
                    logger.debug("Malformed alert element in %s: %s", self._document_path, exc)
                    continue
                return True
        except (PersistenceError, ValidationError) as exc:
            logger.debug("Alert document failed structure check path=%s: %s", self._document_path, exc)
        return False
