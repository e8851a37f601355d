# weatherscore/schemas/weather.py
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ModelAccuracy(BaseModel):
    """Per-source accuracy aggregate. Computed on demand, never persisted."""

    source: str
    mae: float
    rmse: float
    accuracy_percent: float
    total_forecasts: int
    total_resolved: int


class ForecastOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    source: str
    target_date: datetime
    predicted_high: float
    captured_at: datetime


class ResolutionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    target_date: datetime
    actual_high: float


class ForecastError(BaseModel):
    source: str
    predicted_high: float
    error: float
    within_margin: bool


class ResolvedDay(BaseModel):
    target_date: datetime
    actual_high: float
    forecasts: List[ForecastError] = []


class CollectIn(BaseModel):
    start_date: Optional[datetime] = None


class ResolveIn(BaseModel):
    target_date: datetime


class ResolutionIn(BaseModel):
    target_date: datetime
    actual_high: float = Field(..., ge=-150, le=150)
