"""Tests for scheduled jobs and the task CLI."""
from contextlib import contextmanager
from datetime import datetime

import pytest

from sovest.jobs import scoring as scoring_jobs
from sovest.scripts import run_task
from sovest.storage.models import PredictionType, User


@pytest.fixture
def job_db(db, monkeypatch):
    @contextmanager
    def fake_context():
        yield db
        db.commit()

    monkeypatch.setattr(scoring_jobs, "get_db_context", fake_context)
    return db


def test_job_evaluate_predictions(job_db, make_user, make_stock, make_prediction, monkeypatch):
    user = make_user()
    stock = make_stock("AAPL", prices={
        datetime(2020, 1, 2).date(): 100.0,
        datetime(2020, 2, 3).date(): 112.0,
    })
    make_prediction(user, stock, PredictionType.BULLISH,
                    start=datetime(2020, 1, 2, 10), end=datetime(2020, 2, 3, 16))

    result = scoring_jobs.job_evaluate_predictions()

    assert (result["total"], result["evaluated"], result["errors"]) == (1, 1, 0)
    job_db.expire_all()
    assert job_db.get(User, user.id).reputation_score == 10


def test_job_update_stock_prices(job_db, monkeypatch):
    class FakeService:
        def __init__(self, repository):
            pass

        def update_all_stocks(self):
            return {"AAPL": True, "MSFT": False}

    monkeypatch.setattr(scoring_jobs, "StockDataService", FakeService)

    result = scoring_jobs.job_update_stock_prices()

    assert result["updated"] == 1
    assert result["total"] == 2


def test_cli_runs_named_task(monkeypatch, capsys):
    monkeypatch.setattr(scoring_jobs, "job_evaluate_predictions",
                        lambda: {"total": 0, "evaluated": 0, "errors": 0})

    assert run_task.main(["evaluate"]) == 0
    assert '"evaluated": 0' in capsys.readouterr().out


def test_cli_reports_failure(monkeypatch):
    def boom():
        raise RuntimeError("redis unavailable")

    monkeypatch.setattr(scoring_jobs, "job_update_stock_prices", boom)

    assert run_task.main(["update-prices"]) == 1


def test_cli_requires_command():
    with pytest.raises(SystemExit):
        run_task.main([])
