import os

# Settings are read at import time; point them at throwaway backends first.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/15")
os.environ.setdefault("ADMIN_USERNAME", "admin")
os.environ.setdefault("ADMIN_PASSWORD", "test-password")
os.environ.setdefault("ALPHA_VANTAGE_API_KEY", "demo")

from datetime import datetime, date, timedelta
from itertools import count

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from sovest.storage.base import Base
from sovest.storage.models import Prediction, PredictionType, Stock, StockPrice, User
from sovest.storage.repositories import PredictionRepository, StockRepository
from sovest.services.price_lookup import PriceLookup
from sovest.services.scoring import PredictionScoringService

NOW = datetime(2025, 3, 1, 12, 0, 0)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    Session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    session = Session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(db):
    seq = count(1)

    def _make(reputation_score=0, first_name="Test", last_name=None):
        n = next(seq)
        user = User(
            email=f"user{n}@example.com",
            first_name=first_name,
            last_name=last_name or f"User{n}",
            reputation_score=reputation_score,
        )
        db.add(user)
        db.commit()
        return user

    return _make


@pytest.fixture
def make_stock(db):
    def _make(symbol="AAPL", prices=None, company_name=None, **kwargs):
        stock = Stock(symbol=symbol, company_name=company_name or f"{symbol} Inc.", **kwargs)
        db.add(stock)
        db.flush()
        for price_date, close in (prices or {}).items():
            db.add(StockPrice(stock_id=stock.id, price_date=price_date, close_price=close))
        db.commit()
        return stock

    return _make


@pytest.fixture
def make_prediction(db):
    def _make(user, stock, prediction_type=PredictionType.BULLISH, start=None, end=None,
              accuracy=None, is_active=True, target_price=None):
        start = start or datetime(2025, 1, 2, 9, 30)
        end = end or datetime(2025, 2, 3, 16, 0)
        prediction = Prediction(
            user_id=user.id,
            stock_id=stock.id,
            prediction_type=prediction_type,
            target_price=target_price,
            prediction_date=start,
            end_date=end,
            is_active=is_active,
            accuracy=accuracy,
            reasoning="Earnings momentum",
        )
        db.add(prediction)
        db.commit()
        return prediction

    return _make


@pytest.fixture
def stock_repo(db):
    return StockRepository(db)


@pytest.fixture
def prediction_repo(db):
    return PredictionRepository(db)


@pytest.fixture
def price_lookup(stock_repo):
    return PriceLookup(stock_repo)


@pytest.fixture
def scoring_service(price_lookup, prediction_repo):
    return PredictionScoringService(price_lookup, prediction_repo, clock=lambda: NOW)


def daily_prices(start: date, closes):
    """{date: close} for consecutive days starting at `start`."""
    return {start + timedelta(days=i): close for i, close in enumerate(closes)}
