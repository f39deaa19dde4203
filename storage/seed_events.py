"""Seed the ticketing store with the sample tour events."""

from __future__ import annotations

import logging
from typing import Dict, List

from fitlockr_app.config import AppConfig
from fitlockr_app.logging_config import get_logger, log_event
from models.event import Event
from storage.ticketing_store import TicketingStore

LOGGER = get_logger(__name__)


def _alt_images(slug: str) -> List[str]:
    return [f"{slug}_alt_{index}" for index in range(1, 7)]


SAMPLE_EVENTS: List[Dict[str, object]] = [
    {"name": "Dijon", "slogan": "Baby Tour", "primary_img_src": "dijon_primary",
     "alt_img_srcs": _alt_images("dijon"), "city": "Boston, MA", "date": "2025-11-29", "time": "8 PM"},
    {"name": "Olivia Dean", "slogan": "The Art of Loving Tour", "primary_img_src": "oliviadean_primary",
     "alt_img_srcs": _alt_images("oliviadean"), "city": "San Diego, CA", "date": "2025-11-20", "time": "8:30 PM"},
    {"name": "Geese", "slogan": "Getting Killed Tour", "primary_img_src": "geese_primary",
     "alt_img_srcs": _alt_images("geese"), "city": "Portland, ME", "date": "2025-10-18", "time": "7:30 PM"},
    {"name": "Kacy Hill", "slogan": "Bug Tour", "primary_img_src": "kacyhill_primary",
     "alt_img_srcs": _alt_images("kacyhill"), "city": "Austin, TX", "date": "2025-11-08", "time": "6 PM"},
    {"name": "Jay-Z", "slogan": "Homecoming Tour", "primary_img_src": "jayz_primary",
     "alt_img_srcs": _alt_images("jayz"), "city": "Brooklyn, NY", "date": "2025-10-27", "time": "9 PM"},
    {"name": "Adele", "slogan": "25 Tour", "primary_img_src": "adele_primary",
     "alt_img_srcs": _alt_images("adele"), "city": "Seattle, WA", "date": "2025-11-14", "time": "7 PM"},
]


def seed_events(store: TicketingStore, samples: List[Dict[str, object]] | None = None) -> List[Event]:
    """Upsert every sample event by name. Safe to run repeatedly."""

    seeded = [store.upsert_event_by_name(Event(**sample)) for sample in (samples or SAMPLE_EVENTS)]
    log_event(LOGGER, logging.INFO, "events_seeded", count=len(seeded))
    return seeded


def main(config: AppConfig | None = None) -> None:
    config = config or AppConfig.from_env()
    seed_events(TicketingStore.sqlite(config.ticketing_db_path))


if __name__ == "__main__":
    main()
