"""Config, logging, client log and password helper tests."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

import pytest

from fitlockr_app.client_log import ClientLogWriter
from fitlockr_app.config import AppConfig
from fitlockr_app.logging_config import JsonFormatter, correlation_context, log_event, redact_for_log
from tools.passwords import WeakPasswordError, hash_password, verify_password


def test_config_merges_yaml_and_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_file = tmp_path / "staging.yaml"
    config_file.write_text(
        "# staging\n"
        "wardrobe_db_path: /srv/wardrobe.db\n"
        "cors_origins: \"https://fitlockr.app, http://localhost:5173\"\n"
        "chat_room: lobby\n"
    )
    monkeypatch.setenv("APP_ENV", "staging")
    monkeypatch.setenv("FITLOCKR_CONFIG_DIR", str(tmp_path))
    monkeypatch.setenv("CHAT_ROOM", "afterparty")
    for name in ("APP_CONFIG_PATH", "PORT", "TICKETING_PORT", "WARDROBE_DB_PATH", "CORS_ORIGINS"):
        monkeypatch.delenv(name, raising=False)

    config = AppConfig.from_env()

    assert config.environment == "staging"
    assert config.wardrobe_db_path == "/srv/wardrobe.db"
    assert config.cors_origins == ["https://fitlockr.app", "http://localhost:5173"]
    assert config.chat_room == "afterparty"
    assert config.ticketing_port == 4005
    assert not config.cloudinary_configured


def test_redact_for_log_scrubs_sensitive_values() -> None:
    payload = {
        "password": "hunter22",
        "note": "contact ada@example.com",
        "upload": "data:image/png;base64,AAAA",
        "nested": [{"email": "ada@example.com", "count": 2}],
    }
    assert redact_for_log(payload) == {
        "password": "[redacted]",
        "note": "contact [redacted-email]",
        "upload": "[redacted-data-url]",
        "nested": [{"email": "[redacted]", "count": 2}],
    }


def test_json_formatter_includes_correlation_id() -> None:
    record = logging.LogRecord("fitlockr", logging.INFO, __file__, 1, "piece_created", None, None)
    record.piece_id = "abc"
    with correlation_context("req-1"):
        payload = json.loads(JsonFormatter().format(record))
    assert payload["correlation_id"] == "req-1"
    assert payload["event"] == "piece_created"
    assert payload["piece_id"] == "abc"


def test_log_event_attaches_scoped_correlation_id(caplog: pytest.LogCaptureFixture) -> None:
    logger = logging.getLogger("fitlockr.tests")
    with caplog.at_level(logging.INFO, logger="fitlockr.tests"), correlation_context("req-7"):
        log_event(logger, logging.INFO, "user_created", user_id="u1", email="ada@example.com")

    record = caplog.records[-1]
    assert record.event == "user_created"
    assert record.correlation_id == "req-7"
    assert record.user_id == "u1"
    assert record.email == "[redacted]"


def test_client_log_writer_appends_daily_arrays(tmp_path: Path) -> None:
    moments = iter(
        [
            datetime(2025, 10, 24, 9, 0, tzinfo=timezone.utc),
            datetime(2025, 10, 24, 23, 59, tzinfo=timezone.utc),
            datetime(2025, 10, 25, 0, 1, tzinfo=timezone.utc),
        ]
    )
    writer = ClientLogWriter(tmp_path, prefix="fitlockrLog", clock=lambda: next(moments))

    writer.write({"level": "info", "msg": "first"})
    writer.write({"level": "error", "msg": "second"})
    record = writer.write({"msg": "next day"})

    first_day = json.loads((tmp_path / "fitlockrLog-2025-10-24.json").read_text())
    assert [entry["msg"] for entry in first_day] == ["first", "second"]
    assert first_day[0]["timestamp"] == "2025-10-24T09:00:00+00:00"
    assert record["timestamp"].startswith("2025-10-25")
    assert (tmp_path / "fitlockrLog-2025-10-25.json").exists()


def test_client_log_writer_recovers_from_corrupt_file(tmp_path: Path) -> None:
    moment = datetime(2025, 10, 24, tzinfo=timezone.utc)
    writer = ClientLogWriter(tmp_path, clock=lambda: moment)
    writer.path_for(moment).write_text("{not json")

    writer.write({"msg": "fresh"})
    assert json.loads(writer.path_for(moment).read_text()) == [
        {"timestamp": moment.isoformat(), "msg": "fresh"}
    ]


def test_password_hashing_round_trip() -> None:
    hashed = hash_password("correct horse")
    assert hashed.startswith("$2b$10$")
    assert verify_password("correct horse", hashed)
    assert not verify_password("wrong horse", hashed)
    assert not verify_password("correct horse", None)
    assert not verify_password("correct horse", "not-a-bcrypt-hash")

    with pytest.raises(WeakPasswordError):
        hash_password("  abc  ")
