from collections.abc import Generator

from sqlalchemy.orm import Session

from siteflow.core.config import Settings, get_settings
from siteflow.db.session import SessionLocal
from siteflow.services.distribution import HorizonPolicy


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def horizon_policy(settings: Settings | None = None) -> HorizonPolicy:
    settings = settings or get_settings()
    return HorizonPolicy(settings.forecast_horizon_policy)
