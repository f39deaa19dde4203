"""Shared fixtures for the FitLockr test-suite."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from fitlockr_app.config import AppConfig  # noqa: E402
from storage.ticketing_store import TicketingStore  # noqa: E402
from storage.wardrobe_store import WardrobeStore  # noqa: E402
from tools.image_host import MockImageHost  # noqa: E402


@pytest.fixture()
def config(tmp_path: Path) -> AppConfig:
    return AppConfig(
        wardrobe_db_path=str(tmp_path / "wardrobe.db"),
        ticketing_db_path=str(tmp_path / "ticketing.db"),
        log_dir=str(tmp_path / "logs"),
    )


@pytest.fixture()
def wardrobe_store(config: AppConfig) -> WardrobeStore:
    return WardrobeStore.sqlite(config.wardrobe_db_path)


@pytest.fixture()
def ticketing_store(config: AppConfig) -> TicketingStore:
    return TicketingStore.sqlite(config.ticketing_db_path)


@pytest.fixture()
def image_host() -> MockImageHost:
    return MockImageHost()


@pytest.fixture()
def owner() -> dict:
    return {
        "created_by_name": "Ada Lovelace",
        "created_by_username": "ada",
        "created_by_id": "a" * 24,
    }
