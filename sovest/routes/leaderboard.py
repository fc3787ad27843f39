"""Reputation leaderboard and per-user stats."""
from typing import List
from fastapi import APIRouter, Depends, Query

from sovest.config import settings
from sovest.deps import get_scoring_service
from sovest.schemas.scoring import TopUser, UserPredictionStats
from sovest.services.scoring import PredictionScoringService

router = APIRouter()


@router.get("/leaderboard", response_model=List[TopUser])
def get_leaderboard(
    limit: int = Query(settings.TOP_USERS_LIMIT, ge=1, le=100, description="Number of users to return"),
    service: PredictionScoringService = Depends(get_scoring_service),
) -> List[TopUser]:
    """Top users by reputation score."""
    return service.get_top_users(limit)


@router.get("/users/{user_id}/stats", response_model=UserPredictionStats)
def get_user_stats(
    user_id: int,
    service: PredictionScoringService = Depends(get_scoring_service),
) -> UserPredictionStats:
    """Prediction counts, average accuracy and reputation for one user."""
    return service.get_user_prediction_stats(user_id)
