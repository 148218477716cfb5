from __future__ import annotations

from functools import lru_cache
from typing import Generator

from fastapi import Depends
from sqlalchemy.orm import Session

from backend.app.core.config import Settings, get_settings
from backend.app.db.session import SessionLocal
from backend.services.notifier import Notifier, build_notifier
from backend.services.procurement import build_reprovisioning_service
from backend.services.reprovisioning import ReprovisioningService


def get_db() -> Generator:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@lru_cache(maxsize=4)
def _notifier_for(settings: Settings) -> Notifier:
    # un seul notifier (et une seule session HTTP Mailgun) par configuration
    return build_notifier(settings)


def get_notifier(settings: Settings = Depends(get_settings)) -> Notifier:
    return _notifier_for(settings)


def get_reprovisioning_service(
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
    settings: Settings = Depends(get_settings),
) -> ReprovisioningService:
    return build_reprovisioning_service(
        db,
        notifier=notifier,
        failure_policy=settings.reorder_failure_policy,
    )
