"""Closing price lookup used by the scoring engine."""
from datetime import date, datetime
from typing import Optional, Union

from sovest.storage.repositories.stock_repo import StockRepository
from sovest.app_logging import get_logger

logger = get_logger(__name__)


class PriceLookup:
    """Read-only access to a stock's closing prices."""

    def __init__(self, repository: StockRepository):
        self.repository = repository

    def price_at_or_before(self, symbol: str, when: Union[date, datetime]) -> Optional[float]:
        """
        Close on the most recent trading day at or before `when`.

        Time of day is ignored. When the stock has no price on or before that
        day, the latest known close is returned instead. Returns None only if
        the symbol is unknown or the stock has no prices at all.
        """
        stock = self.repository.get_by_symbol(symbol)
        if not stock:
            logger.debug(f"No stock found for symbol {symbol}")
            return None

        day = when.date() if isinstance(when, datetime) else when
        price = self.repository.get_close_on_or_before(stock.id, day)
        if price is not None:
            return price

        logger.info(f"No {stock.symbol} price on or before {day}, falling back to latest close")
        return self.repository.get_latest_close(stock.id)

    def latest_price(self, symbol: str) -> Optional[float]:
        stock = self.repository.get_by_symbol(symbol)
        if not stock:
            return None
        return self.repository.get_latest_close(stock.id)
