"""Tests for leaderboard and per-user prediction stats."""
import pytest
from sqlalchemy.exc import OperationalError

from sovest.schemas.scoring import UserPredictionStats


@pytest.fixture
def stock(make_stock):
    return make_stock("AAPL")


class TestTopUsers:

    def test_ordered_by_reputation(self, make_user, scoring_service):
        low = make_user(reputation_score=-4)
        high = make_user(reputation_score=25)
        mid = make_user(reputation_score=10)

        top = scoring_service.get_top_users(10)

        assert [u.id for u in top] == [high.id, mid.id, low.id]
        assert [u.reputation_score for u in top] == [25, 10, -4]

    def test_limit(self, make_user, scoring_service):
        for score in range(5):
            make_user(reputation_score=score)

        assert len(scoring_service.get_top_users(3)) == 3

    def test_counts_and_scored_only_average(self, make_user, make_prediction, stock, scoring_service):
        user = make_user(reputation_score=12)
        make_prediction(user, stock, accuracy=100.0, is_active=False)
        make_prediction(user, stock, accuracy=20.0, is_active=False)
        make_prediction(user, stock)  # pending, excluded from the average

        [row] = scoring_service.get_top_users(10)

        assert row.email == user.email
        assert row.predictions_count == 3
        assert row.avg_accuracy == pytest.approx(60.0)

    def test_user_without_scored_predictions_averages_zero(self, make_user, make_prediction, stock,
                                                           scoring_service):
        newcomer = make_user()
        pending_only = make_user()
        make_prediction(pending_only, stock)

        rows = {row.id: row for row in scoring_service.get_top_users(10)}

        assert rows[newcomer.id].predictions_count == 0
        assert rows[newcomer.id].avg_accuracy == 0.0
        assert rows[pending_only.id].predictions_count == 1
        assert rows[pending_only.id].avg_accuracy == 0.0

    def test_query_failure_returns_empty_list(self, monkeypatch, make_user, prediction_repo, scoring_service):
        make_user(reputation_score=5)

        def fail(limit):
            raise OperationalError("SELECT", {}, Exception("db down"))

        monkeypatch.setattr(prediction_repo, "get_top_users", fail)

        assert scoring_service.get_top_users(10) == []


class TestUserPredictionStats:

    def test_mixed_predictions(self, make_user, make_prediction, stock, scoring_service):
        user = make_user(reputation_score=8)
        make_prediction(user, stock, accuracy=100.0, is_active=False)
        make_prediction(user, stock, accuracy=50.0, is_active=False)
        make_prediction(user, stock, accuracy=20.0, is_active=False)
        make_prediction(user, stock)

        stats = scoring_service.get_user_prediction_stats(user.id)

        assert stats == UserPredictionStats(
            total=4, accurate=2, inaccurate=1, pending=1, avg_accuracy=56.7, reputation=8
        )

    def test_only_counts_own_predictions(self, make_user, make_prediction, stock, scoring_service):
        user = make_user()
        other = make_user()
        make_prediction(other, stock, accuracy=90.0, is_active=False)

        stats = scoring_service.get_user_prediction_stats(user.id)

        assert stats.total == 0

    def test_user_with_no_predictions(self, make_user, scoring_service):
        user = make_user(reputation_score=-6)

        stats = scoring_service.get_user_prediction_stats(user.id)

        assert stats == UserPredictionStats(reputation=-6)
        assert stats.avg_accuracy == 0

    def test_unknown_user_is_all_zero(self, scoring_service):
        assert scoring_service.get_user_prediction_stats(9999) == UserPredictionStats()

    def test_query_failure_returns_zero_stats(self, monkeypatch, make_user, prediction_repo, scoring_service):
        user = make_user(reputation_score=4)

        def fail(user_id):
            raise OperationalError("SELECT", {}, Exception("db down"))

        monkeypatch.setattr(prediction_repo, "get_prediction_counts", fail)

        assert scoring_service.get_user_prediction_stats(user.id) == UserPredictionStats()
