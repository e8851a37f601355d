# weatherscore/models/forecast.py
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Float, Integer, String, Text

from weatherscore.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Forecast(Base):
    """One provider's predicted daily high for one calendar day.

    Rows are append-only: every collection run inserts again, so several rows can
    exist for the same (source, target_date).
    """

    __tablename__ = "forecasts"
    id = Column(Integer, primary_key=True)
    source = Column(String(32), index=True, nullable=False)
    # Noon UTC on the predicted day, not normalized to midnight.
    target_date = Column(DateTime(timezone=True), index=True, nullable=False)
    predicted_high = Column(Float, nullable=False)  # degrees F
    raw_response = Column(Text, nullable=True)
    captured_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
