from pathlib import Path

from app.config import PROJECT_ROOT, Settings


def test_production_cors_uses_only_explicit_allowlist() -> None:
    settings = Settings(
        environment="production",
        cors_origins="https://app.example.com,https://stg-app.example.com",
        frontend_port=5173,
    )

    assert settings.cors_list == [
        "https://app.example.com",
        "https://stg-app.example.com",
    ]


def test_development_cors_adds_localhost_origins() -> None:
    settings = Settings(
        environment="development",
        cors_origins="https://app.example.com",
        frontend_port=5179,
    )

    assert "https://app.example.com" in settings.cors_list
    assert "http://localhost:5179" in settings.cors_list
    assert "http://127.0.0.1:5179" in settings.cors_list


def test_alert_document_path_resolution(tmp_path: Path) -> None:
    relative = Settings(alerts_document_path="data/alerts.xml")
    absolute = Settings(alerts_document_path=str(tmp_path / "alerts.xml"))

    assert relative.alerts_document_file == (PROJECT_ROOT / "data" / "alerts.xml").resolve()
    assert absolute.alerts_document_file == tmp_path / "alerts.xml"


def test_alert_settings_read_from_environment(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("ALERTS_DOCUMENT_PATH", str(tmp_path / "env_alerts.xml"))
    monkeypatch.setenv("ALERTS_SEED_DEMO_DATA", "0")

    settings = Settings()

    assert settings.alerts_document_file == tmp_path / "env_alerts.xml"
    assert settings.alerts_seed_demo_data is False
