"""Prediction model."""
import enum
from datetime import datetime

from sqlalchemy import (
    Column, Integer, Float, DateTime, Boolean, Text, Enum, ForeignKey, Index, CheckConstraint
)
from sqlalchemy.orm import relationship

from sovest.storage.base import Base


class PredictionType(str, enum.Enum):
    BULLISH = "Bullish"
    BEARISH = "Bearish"


class Prediction(Base):
    """A user's directional call on a stock."""

    __tablename__ = "predictions"
    __table_args__ = (
        Index('idx_pred_due', 'is_active', 'end_date'),
        Index('idx_pred_user', 'user_id'),
        CheckConstraint('end_date > prediction_date', name='check_end_after_start'),
        CheckConstraint('target_price IS NULL OR target_price > 0', name='check_target_price_positive'),
        CheckConstraint('accuracy IS NULL OR (accuracy >= 0 AND accuracy <= 100)', name='check_accuracy_range'),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    stock_id = Column(Integer, ForeignKey("stocks.id", ondelete="CASCADE"), nullable=False)

    prediction_type = Column(
        Enum(PredictionType, values_callable=lambda e: [m.value for m in e], name="prediction_type"),
        nullable=False,
    )
    target_price = Column(Float)

    # Timing
    prediction_date = Column(DateTime, nullable=False, default=datetime.utcnow)
    end_date = Column(DateTime, nullable=False)

    # Evaluation state: accuracy stays NULL until the scoring engine runs
    is_active = Column(Boolean, nullable=False, default=True)
    accuracy = Column(Float)

    reasoning = Column(Text, nullable=False)

    # Relationships
    user = relationship("User", back_populates="predictions")
    stock = relationship("Stock", back_populates="predictions")
