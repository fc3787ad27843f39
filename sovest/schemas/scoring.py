"""Scoring engine data transfer objects."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from sovest.storage.models.prediction import PredictionType


class PredictionRecord(BaseModel):
    """Snapshot of a due prediction, detached from the ORM session."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    symbol: str
    prediction_type: PredictionType
    target_price: Optional[float] = None
    prediction_date: datetime
    end_date: datetime


class EvaluationOutcome(BaseModel):
    """Result of scoring one prediction."""
    prediction_id: int
    user_id: int
    start_price: float
    end_price: float
    percent_change: float
    correct: bool
    accuracy: float = Field(ge=0, le=100)
    reputation_delta: int


class EvaluationSummary(BaseModel):
    """Counts for one batch evaluation run."""
    total: int = 0
    evaluated: int = 0
    errors: int = 0


class TopUser(BaseModel):
    """Leaderboard row."""
    id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: str
    reputation_score: int
    predictions_count: int = 0
    avg_accuracy: float = 0.0


class UserPredictionStats(BaseModel):
    """Per-user prediction counts; all zero for unknown users."""
    total: int = 0
    accurate: int = 0
    inaccurate: int = 0
    pending: int = 0
    avg_accuracy: float = 0.0
    reputation: int = 0
