# weatherscore/services/store.py
from __future__ import annotations

import threading
from contextlib import contextmanager
from datetime import date, datetime, timezone
from typing import Iterator, List, Optional

import structlog
from sqlalchemy import delete, desc, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from weatherscore.models import Forecast, Resolution
from weatherscore.utils.dates import to_utc, utc_midnight

logger = structlog.get_logger(__name__)


class WeatherStore:
    """
    Read/write contract over the forecasts and resolutions tables.

    Each call opens its own short-lived session, and every write is a single
    independent insert committed on its own. Calls may come from worker threads;
    they are serialized per store.
    """

    def __init__(self, session_factory: sessionmaker[Session]):
        self._session_factory = session_factory
        self._lock = threading.RLock()

    @contextmanager
    def _session(self) -> Iterator[Session]:
        with self._lock, self._session_factory() as db:
            yield db

    # ------------------------------------------------------------------ forecasts

    def add_forecast(
        self,
        source: str,
        target_date: datetime,
        predicted_high: float,
        raw_response: Optional[str] = None,
        captured_at: Optional[datetime] = None,
    ) -> Forecast:
        row = Forecast(
            source=source,
            target_date=to_utc(target_date),
            predicted_high=float(predicted_high),
            raw_response=raw_response,
            captured_at=to_utc(captured_at) if captured_at else datetime.now(timezone.utc),
        )
        with self._session() as db:
            db.add(row)
            db.commit()
            db.refresh(row)
            db.expunge(row)
        return row

    def list_forecasts(self, source: Optional[str] = None, limit: Optional[int] = None) -> List[Forecast]:
        """All forecasts in insertion order, or the newest ``limit`` by capture time."""
        stmt = select(Forecast)
        if source is not None:
            stmt = stmt.where(Forecast.source == source)
        if limit is not None:
            stmt = stmt.order_by(desc(Forecast.captured_at), desc(Forecast.id)).limit(int(limit))
        else:
            stmt = stmt.order_by(Forecast.id)
        with self._session() as db:
            rows = list(db.execute(stmt).scalars().all())
            db.expunge_all()
        return rows

    def clear_forecasts(self) -> int:
        with self._session() as db:
            result = db.execute(delete(Forecast))
            db.commit()
        deleted = int(result.rowcount or 0)
        logger.info("store.forecasts_cleared", deleted=deleted)
        return deleted

    # ---------------------------------------------------------------- resolutions

    def get_resolution(self, day: datetime | date) -> Optional[Resolution]:
        stmt = select(Resolution).where(Resolution.target_date == utc_midnight(day))
        with self._session() as db:
            row = db.execute(stmt).scalars().first()
            if row is not None:
                db.expunge(row)
        return row

    def create_resolution(self, target_date: datetime | date, actual_high: float) -> Optional[Resolution]:
        """
        Insert the resolution for ``target_date``'s day.

        Returns None, without raising, when the day is already resolved.
        """
        normalized = utc_midnight(target_date)
        if self.get_resolution(normalized) is not None:
            return None
        row = Resolution(target_date=normalized, actual_high=float(actual_high))
        with self._session() as db:
            db.add(row)
            try:
                db.commit()
            except IntegrityError:
                db.rollback()
                logger.info("store.resolution_exists", target_date=normalized.isoformat())
                return None
            db.refresh(row)
            db.expunge(row)
        return row

    def list_resolutions(self, newest_first: bool = False) -> List[Resolution]:
        order = desc(Resolution.target_date) if newest_first else Resolution.target_date
        with self._session() as db:
            rows = list(db.execute(select(Resolution).order_by(order)).scalars().all())
            db.expunge_all()
        return rows


def default_store() -> WeatherStore:
    # Resolved lazily so tests can swap the sessionmaker on the session module.
    from weatherscore.db import session as db_session  # pylint: disable=import-outside-toplevel

    return WeatherStore(db_session.get_sessionmaker())
