"""Repositories wrapping a SQLAlchemy session."""
from sovest.storage.repositories.stock_repo import StockRepository
from sovest.storage.repositories.prediction_repo import PredictionRepository

__all__ = ['StockRepository', 'PredictionRepository']
