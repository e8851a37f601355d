# weatherscore/models/resolution.py
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Float, Integer

from weatherscore.db.base import Base


class Resolution(Base):
    __tablename__ = "resolutions"
    id = Column(Integer, primary_key=True)
    target_date = Column(DateTime(timezone=True), unique=True, nullable=False)  # midnight UTC
    actual_high = Column(Float, nullable=False)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
