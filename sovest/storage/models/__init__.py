"""Database models."""
from sovest.storage.models.user import User
from sovest.storage.models.stock import Stock
from sovest.storage.models.stock_price import StockPrice
from sovest.storage.models.prediction import Prediction, PredictionType

__all__ = ['User', 'Stock', 'StockPrice', 'Prediction', 'PredictionType']
