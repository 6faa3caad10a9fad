from __future__ import annotations

import sys
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from alerts.alert_store import AlertStore  # noqa: E402
from alerts.document_codec import write_alerts  # noqa: E402
from alerts.errors import PersistenceError  # noqa: E402
from alerts.models import AlertRecord, Severity  # noqa: E402
from alerts.query_engine import COUNT_UNAVAILABLE, AlertQueryEngine  # noqa: E402


def _alert(alert_id: str, severity: Severity, region: str, timestamp: str) -> AlertRecord:
    return AlertRecord(
        id=alert_id,
        severity=severity,
        message=f"{severity.display_name} alert for {region}",
        region=region,
        timestamp=timestamp,
    )


@pytest.fixture()
def document_path(tmp_path: Path) -> Path:
    path = tmp_path / "alerts.xml"
    write_alerts(
        path,
        [
            _alert("ALERT-1", Severity.CRITICAL, "Nabeul", "2026-05-01T08:00:00.000"),
            _alert("ALERT-2", Severity.SEVERE, "Tozeur", "2026-05-03T09:00:00.000"),
            _alert("ALERT-3", Severity.WARNING, "Gabès", "2026-05-02T10:00:00.000"),
            _alert("ALERT-4", Severity.CRITICAL, "Sfax", "2026-05-01T11:00:00.000"),
            _alert("ALERT-5", Severity.INFO, "TOZEUR", "2026-04-30T12:00:00.000"),
            _alert("ALERT-6", Severity.SEVERE, "Bizerte", "2026-05-02T13:00:00.000"),
        ],
    )
    return path


def _ids(records: list[AlertRecord]) -> set[str]:
    return {record.id for record in records}


def test_filter_by_severity_returns_exact_matches(document_path: Path):
    engine = AlertQueryEngine(document_path)

    critical = engine.filter_by_severity(Severity.CRITICAL)

    assert _ids(critical) == {"ALERT-1", "ALERT-4"}
    assert all(record.severity is Severity.CRITICAL for record in critical)
    assert engine.count_by_severity(Severity.CRITICAL) == 2
    assert engine.filter_critical() == critical


def test_filter_by_region_ignores_case(document_path: Path):
    engine = AlertQueryEngine(document_path)

    assert _ids(engine.filter_by_region("tozeur")) == {"ALERT-2", "ALERT-5"}
    assert _ids(engine.filter_by_region("GABÈS")) == {"ALERT-3"}
    assert engine.filter_by_region("Kairouan") == []


def test_severity_set_is_union_of_single_filters(document_path: Path):
    engine = AlertQueryEngine(document_path)

    high_priority = engine.filter_by_severity_set({Severity.SEVERE, Severity.CRITICAL})

    expected = _ids(engine.filter_by_severity(Severity.SEVERE)) | _ids(engine.filter_by_severity(Severity.CRITICAL))
    assert _ids(high_priority) == expected == {"ALERT-1", "ALERT-2", "ALERT-4", "ALERT-6"}
    assert [record.id for record in high_priority] == ["ALERT-1", "ALERT-2", "ALERT-4", "ALERT-6"]
    assert engine.filter_high_priority() == high_priority
    assert engine.filter_by_severity_set([]) == []


def test_most_recent_returns_latest_timestamp(document_path: Path):
    engine = AlertQueryEngine(document_path)

    assert engine.most_recent().id == "ALERT-2"


def test_most_recent_on_empty_document(tmp_path: Path):
    path = tmp_path / "alerts.xml"
    write_alerts(path, [])
    engine = AlertQueryEngine(path)

    assert engine.most_recent() is None
    assert engine.count_by_severity(Severity.INFO) == 0
    assert engine.validate_structure() is False


def test_queries_read_the_persisted_document(tmp_path: Path):
    path = tmp_path / "alerts.xml"
    store = AlertStore(path, seed=None)
    engine = AlertQueryEngine(path)

    store.save(_alert("ALERT-1", Severity.CRITICAL, "Nabeul", "2026-05-01T08:00:00.000"))
    assert engine.count_by_severity(Severity.CRITICAL) == 1

    # rewrite behind the store's back; the engine follows the file
    write_alerts(path, [_alert("ALERT-9", Severity.INFO, "Tunis", "2026-05-04T08:00:00.000")])
    assert engine.count_by_severity(Severity.CRITICAL) == 0
    assert engine.most_recent().id == "ALERT-9"
    assert store.find_by_id("ALERT-1") is not None


def test_count_returns_sentinel_when_document_unreadable(tmp_path: Path):
    missing = AlertQueryEngine(tmp_path / "absent.xml")
    assert missing.count_by_severity(Severity.CRITICAL) == COUNT_UNAVAILABLE

    corrupt_path = tmp_path / "corrupt.xml"
    corrupt_path.write_text("<alerts>", encoding="utf-8")
    assert AlertQueryEngine(corrupt_path).count_by_severity(Severity.CRITICAL) == COUNT_UNAVAILABLE


def test_filters_raise_when_document_missing(tmp_path: Path):
    engine = AlertQueryEngine(tmp_path / "absent.xml")

    with pytest.raises(PersistenceError):
        engine.filter_by_severity(Severity.INFO)


def test_validate_structure(document_path: Path, tmp_path: Path):
    assert AlertQueryEngine(document_path).validate_structure() is True
    assert AlertQueryEngine(tmp_path / "absent.xml").validate_structure() is False

    corrupt_path = tmp_path / "corrupt.xml"
    corrupt_path.write_text("not xml at all", encoding="utf-8")
    assert AlertQueryEngine(corrupt_path).validate_structure() is False


def test_queries_during_rewrites_see_whole_documents(tmp_path: Path):
    path = tmp_path / "alerts.xml"
    store = AlertStore(path, seed=None)
    engine = AlertQueryEngine(path)
    writes_done = threading.Event()

    def write_loop() -> None:
        try:
            for n in range(60):
                store.save(_alert("", Severity.CRITICAL, f"Region {n}", "2026-05-01T08:00:00.000"))
        finally:
            writes_done.set()

    def read_loop() -> list[int]:
        counts = []
        while not writes_done.is_set():
            counts.append(engine.count_by_severity(Severity.CRITICAL))
        counts.append(engine.count_by_severity(Severity.CRITICAL))
        return counts

    with ThreadPoolExecutor(max_workers=4) as pool:
        readers = [pool.submit(read_loop) for _ in range(3)]
        pool.submit(write_loop).result()
        observed = [reader.result() for reader in readers]

    for counts in observed:
        assert COUNT_UNAVAILABLE not in counts
        assert counts == sorted(counts)
        assert counts[-1] == 60
    assert engine.validate_structure() is True
