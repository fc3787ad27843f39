"""Stock data transfer objects."""
from datetime import date, datetime
from pydantic import BaseModel


class StockQuote(BaseModel):
    """Latest quote from the stock data provider."""
    symbol: str
    price: float
    change: float = 0.0
    change_percent: float = 0.0
    timestamp: datetime


class PricePoint(BaseModel):
    """One entry of a stock's closing price history."""
    price: float
    price_date: date
