"""Repository for prediction evaluation and reputation queries."""
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, List, Optional, Tuple
from sqlalchemy import and_, case, func, update
from sqlalchemy.orm import Session

from sovest.exceptions import PredictionAlreadyEvaluatedError, ScoringError
from sovest.schemas.scoring import PredictionRecord
from sovest.storage.models import Prediction, Stock, User
from sovest.app_logging import get_logger

logger = get_logger(__name__)


class PredictionRepository:
    """Reads due predictions and writes evaluation results."""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def unit_of_work(self) -> Iterator[None]:
        """Commit everything written inside the block, or roll all of it back."""
        try:
            yield
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def get_due_predictions(self, now: datetime) -> List[PredictionRecord]:
        """Active, unscored predictions whose end date has passed."""
        rows = self.db.query(Prediction, Stock.symbol).join(
            Stock, Stock.id == Prediction.stock_id
        ).filter(
            Prediction.is_active.is_(True),
            Prediction.end_date <= now,
            Prediction.accuracy.is_(None),
        ).order_by(Prediction.id).all()

        return [
            PredictionRecord(
                id=prediction.id,
                user_id=prediction.user_id,
                symbol=symbol,
                prediction_type=prediction.prediction_type,
                target_price=prediction.target_price,
                prediction_date=prediction.prediction_date,
                end_date=prediction.end_date,
            )
            for prediction, symbol in rows
        ]

    def mark_evaluated(self, prediction_id: int, accuracy: float) -> None:
        """Write accuracy and deactivate, guarded on the prediction still being unscored."""
        result = self.db.execute(
            update(Prediction)
            .where(
                Prediction.id == prediction_id,
                Prediction.is_active.is_(True),
                Prediction.accuracy.is_(None),
            )
            .values(accuracy=accuracy, is_active=False)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise PredictionAlreadyEvaluatedError(prediction_id)

    def apply_reputation_delta(self, user_id: int, delta: int) -> None:
        """Increment reputation in the database so concurrent updates don't overwrite each other."""
        result = self.db.execute(
            update(User)
            .where(User.id == user_id)
            .values(reputation_score=User.reputation_score + delta)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise ScoringError(f"User {user_id} not found")

    def get_top_users(self, limit: int) -> List[Tuple[User, int, Optional[float]]]:
        """Users by reputation with their prediction count and scored-only average accuracy."""
        per_user = self.db.query(
            Prediction.user_id.label("user_id"),
            func.count(Prediction.id).label("predictions_count"),
            func.avg(Prediction.accuracy).label("avg_accuracy"),
        ).group_by(Prediction.user_id).subquery()

        return self.db.query(
            User,
            func.coalesce(per_user.c.predictions_count, 0),
            per_user.c.avg_accuracy,
        ).outerjoin(
            per_user, per_user.c.user_id == User.id
        ).order_by(
            User.reputation_score.desc(), User.id
        ).limit(limit).all()

    def get_prediction_counts(self, user_id: int) -> Tuple[int, int, int, int, Optional[float]]:
        """(total, accurate, inaccurate, pending, avg_accuracy) for one user."""
        row = self.db.query(
            func.count(Prediction.id),
            func.sum(case((Prediction.accuracy >= 50, 1), else_=0)),
            func.sum(case((and_(Prediction.accuracy.isnot(None), Prediction.accuracy < 50), 1), else_=0)),
            func.sum(case((Prediction.accuracy.is_(None), 1), else_=0)),
            func.avg(Prediction.accuracy),
        ).filter(Prediction.user_id == user_id).one()

        total, accurate, inaccurate, pending, avg_accuracy = row
        return total or 0, accurate or 0, inaccurate or 0, pending or 0, avg_accuracy

    def get_reputation(self, user_id: int) -> Optional[int]:
        row = self.db.query(User.reputation_score).filter(User.id == user_id).first()
        return row.reputation_score if row else None
