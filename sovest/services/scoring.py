"""Prediction evaluation and reputation scoring."""
from datetime import datetime
from typing import Callable, List, Optional

from sovest.exceptions import PriceUnavailableError
from sovest.schemas.scoring import (
    EvaluationOutcome, EvaluationSummary, PredictionRecord, TopUser, UserPredictionStats
)
from sovest.services.price_lookup import PriceLookup
from sovest.storage.models.prediction import PredictionType
from sovest.storage.repositories.prediction_repo import PredictionRepository
from sovest.app_logging import get_logger

logger = get_logger(__name__)

CORRECT_BASE_SCORE = 75
INCORRECT_BASE_SCORE = 25

# (minimum abs percent change, bonus), checked top down
MAGNITUDE_BONUSES = ((10.0, 25), (5.0, 15), (2.0, 10))
SMALL_MOVE_BONUS = 5

# (minimum accuracy, reputation delta), checked top down
REPUTATION_TIERS = ((90.0, 10), (70.0, 5), (50.0, 2), (30.0, 0))
POOR_PREDICTION_DELTA = -2


def is_prediction_correct(prediction_type: PredictionType, price_change: float) -> bool:
    """Bullish needs a rise, Bearish needs a fall. A flat market is wrong for both."""
    if prediction_type == PredictionType.BULLISH:
        return price_change > 0
    if prediction_type == PredictionType.BEARISH:
        return price_change < 0
    raise ValueError(f"Unknown prediction type: {prediction_type}")


def calculate_accuracy_score(prediction_correct: bool, percent_change: float) -> float:
    """
    Score a prediction from 0 to 100.

    Correct calls start at 75 and gain a bonus that grows with the size of
    the move; incorrect calls start at 25 and lose the same bonus, so big
    moves in the wrong direction cost more.

    Args:
        prediction_correct: Whether the direction was right
        percent_change: Signed percent move, e.g. 3.5 for +3.5%

    Returns:
        Accuracy clamped to [0, 100]
    """
    base_score = CORRECT_BASE_SCORE if prediction_correct else INCORRECT_BASE_SCORE

    abs_change = abs(percent_change)
    magnitude_bonus = SMALL_MOVE_BONUS
    for threshold, bonus in MAGNITUDE_BONUSES:
        if abs_change >= threshold:
            magnitude_bonus = bonus
            break

    if not prediction_correct:
        magnitude_bonus = -magnitude_bonus

    return float(max(0, min(100, base_score + magnitude_bonus)))


def calculate_reputation_points(accuracy: float) -> int:
    """Map an accuracy score to a reputation delta."""
    for threshold, points in REPUTATION_TIERS:
        if accuracy >= threshold:
            return points
    return POOR_PREDICTION_DELTA


class PredictionScoringService:
    """
    Evaluates expired predictions and maintains user reputation.

    Collaborators are passed in so the batch job can run against any
    session, and tests can substitute fakes.
    """

    def __init__(
        self,
        price_lookup: PriceLookup,
        repository: PredictionRepository,
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        self.price_lookup = price_lookup
        self.repository = repository
        self.clock = clock

    def evaluate_active_predictions(self) -> EvaluationSummary:
        """Score every due prediction. Per-prediction failures are counted, not raised."""
        summary = EvaluationSummary()

        try:
            predictions = self.repository.get_due_predictions(self.clock())
        except Exception as e:
            logger.error(f"Error fetching predictions: {e}")
            raise

        summary.total = len(predictions)
        logger.info(f"Found {summary.total} predictions due for evaluation")

        for prediction in predictions:
            try:
                self.evaluate_prediction(prediction)
                summary.evaluated += 1
            except Exception as e:
                summary.errors += 1
                logger.error(f"Error evaluating prediction ID {prediction.id}: {e}")

        return summary

    def evaluate_prediction(self, prediction: PredictionRecord) -> EvaluationOutcome:
        """
        Score one prediction and apply its reputation delta.

        Price lookups, the accuracy write and the reputation update share one
        transaction; any failure rolls all of it back so the session stays
        usable for the next prediction.
        """
        with self.repository.unit_of_work():
            start_price = self.price_lookup.price_at_or_before(prediction.symbol, prediction.prediction_date)
            end_price = self.price_lookup.price_at_or_before(prediction.symbol, prediction.end_date)

            if not start_price or not end_price:
                raise PriceUnavailableError(prediction.symbol)

            price_change = end_price - start_price
            percent_change = (price_change / start_price) * 100

            correct = is_prediction_correct(prediction.prediction_type, price_change)
            accuracy = calculate_accuracy_score(correct, percent_change)
            reputation_delta = calculate_reputation_points(accuracy)

            self.repository.mark_evaluated(prediction.id, accuracy)
            self.update_user_reputation(prediction.user_id, accuracy)

        logger.debug(
            f"Prediction {prediction.id} ({prediction.prediction_type.value} {prediction.symbol}): "
            f"{percent_change:+.2f}% -> accuracy {accuracy}, reputation {reputation_delta:+d}"
        )

        return EvaluationOutcome(
            prediction_id=prediction.id,
            user_id=prediction.user_id,
            start_price=start_price,
            end_price=end_price,
            percent_change=percent_change,
            correct=correct,
            accuracy=accuracy,
            reputation_delta=reputation_delta,
        )

    def update_user_reputation(self, user_id: int, accuracy: float) -> int:
        """Add the delta for `accuracy` to the user's reputation. Returns the delta."""
        reputation_change = calculate_reputation_points(accuracy)
        try:
            self.repository.apply_reputation_delta(user_id, reputation_change)
        except Exception as e:
            logger.error(f"Error updating user reputation: {e}")
            raise
        return reputation_change

    def get_top_users(self, limit: int = 10) -> List[TopUser]:
        """Leaderboard. Returns an empty list on failure."""
        try:
            rows = self.repository.get_top_users(limit)
        except Exception as e:
            logger.error(f"Error fetching top users: {e}")
            return []

        return [
            TopUser(
                id=user.id,
                first_name=user.first_name,
                last_name=user.last_name,
                email=user.email,
                reputation_score=user.reputation_score or 0,
                predictions_count=predictions_count,
                avg_accuracy=float(avg_accuracy) if avg_accuracy is not None else 0.0,
            )
            for user, predictions_count, avg_accuracy in rows
        ]

    def get_user_prediction_stats(self, user_id: int) -> UserPredictionStats:
        """Counts and average accuracy for one user. Zero-valued on failure or unknown user."""
        stats = UserPredictionStats()

        try:
            total, accurate, inaccurate, pending, avg_accuracy = (
                self.repository.get_prediction_counts(user_id)
            )
            stats.total = total
            stats.accurate = accurate
            stats.inaccurate = inaccurate
            stats.pending = pending
            stats.avg_accuracy = round(float(avg_accuracy), 1) if avg_accuracy is not None else 0.0

            reputation: Optional[int] = self.repository.get_reputation(user_id)
            if reputation is not None:
                stats.reputation = int(reputation)
        except Exception as e:
            logger.error(f"Error getting user prediction stats: {e}")
            return UserPredictionStats()

        return stats
