"""Stock tracking and Alpha Vantage price ingestion."""
from datetime import datetime, timedelta
from typing import Dict, List, Optional

import requests
from sqlalchemy.exc import SQLAlchemyError

from sovest.config import settings
from sovest.schemas.stock import PricePoint, StockQuote
from sovest.services.rate_limiter import RateLimiter
from sovest.storage.models import Stock
from sovest.storage.repositories.stock_repo import StockRepository, normalize_symbol
from sovest.app_logging import get_logger

logger = get_logger(__name__)


class StockDataService:
    """
    Manages tracked stocks and their daily closing prices.

    Quotes come from Alpha Vantage's GLOBAL_QUOTE endpoint. Every outbound
    request first waits on the injected RateLimiter.
    """

    def __init__(
        self,
        repository: StockRepository,
        rate_limiter: Optional[RateLimiter] = None,
        http: Optional[requests.Session] = None,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.repository = repository
        self.rate_limiter = rate_limiter or RateLimiter(settings.API_RATE_LIMIT)
        self.http = http or requests.Session()
        self.api_key = api_key if api_key is not None else settings.ALPHA_VANTAGE_API_KEY
        self.base_url = base_url or settings.ALPHA_VANTAGE_BASE_URL
        self.timeout = timeout or settings.STOCK_API_TIMEOUT

        if not self.api_key:
            logger.warning("ALPHA_VANTAGE_API_KEY is not set - stock data fetches will fail")

    def add_stock(
        self,
        symbol: str,
        company_name: str,
        sector: Optional[str] = None,
        description: Optional[str] = None,
    ) -> bool:
        """Start tracking a stock and try to record its current price."""
        symbol = normalize_symbol(symbol)
        if self.repository.get_by_symbol(symbol):
            logger.warning(f"Stock {symbol} is already tracked")
            return False

        try:
            self.repository.add_stock(symbol, company_name, sector, description)
            self.repository.db.commit()
        except SQLAlchemyError as e:
            self.repository.db.rollback()
            logger.error(f"Error adding stock {symbol}: {e}")
            return False

        logger.info(f"Added stock {symbol} ({company_name})")

        # Initial price is best effort; the stock stays tracked either way
        self.fetch_and_store_stock_data(symbol)
        return True

    def remove_stock(self, symbol: str) -> bool:
        stock = self.repository.get_by_symbol(symbol)
        if not stock:
            return False

        try:
            self.repository.delete_stock(stock)
            self.repository.db.commit()
        except SQLAlchemyError as e:
            self.repository.db.rollback()
            logger.error(f"Error removing stock {symbol}: {e}")
            return False

        logger.info(f"Removed stock {stock.symbol}")
        return True

    def get_stocks(self, active_only: bool = True) -> List[Stock]:
        return self.repository.list_stocks(active_only)

    def fetch_stock_data(self, symbol: str) -> Optional[StockQuote]:
        """Fetch the latest quote. Returns None on any provider failure."""
        symbol = normalize_symbol(symbol)
        self.rate_limiter.wait()

        logger.info(f"Fetching stock data for {symbol}")
        try:
            response = self.http.get(
                self.base_url,
                params={"function": "GLOBAL_QUOTE", "symbol": symbol, "apikey": self.api_key},
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(f"API request failed for {symbol}: {e}")
            return None

        if "Error Message" in data:
            logger.error(f"API Error: {data['Error Message']}")
            return None

        quote = data.get("Global Quote")
        if not quote or "05. price" not in quote:
            logger.warning(f"No data returned for {symbol}")
            return None

        return StockQuote(
            symbol=symbol,
            price=float(quote["05. price"]),
            change=float(quote.get("09. change", 0) or 0),
            change_percent=float(str(quote.get("10. change percent", "0")).rstrip("%") or 0),
            timestamp=datetime.utcnow(),
        )

    def fetch_and_store_stock_data(self, symbol: str) -> bool:
        quote = self.fetch_stock_data(symbol)
        if quote is None:
            return False
        return self.store_stock_price(quote.symbol, quote.price, quote.timestamp)

    def store_stock_price(self, symbol: str, price: float, timestamp: Optional[datetime] = None) -> bool:
        """Record the day's closing price, replacing an earlier value for the same day."""
        timestamp = timestamp or datetime.utcnow()

        stock = self.repository.get_by_symbol(symbol)
        if not stock:
            logger.error(f"Error: Stock not found for symbol {normalize_symbol(symbol)}")
            return False

        try:
            self.repository.upsert_price(stock, timestamp, float(price))
            self.repository.db.commit()
        except SQLAlchemyError as e:
            self.repository.db.rollback()
            logger.error(f"Error storing price: {e}")
            return False

        return True

    def get_latest_price(self, symbol: str) -> Optional[float]:
        stock = self.repository.get_by_symbol(symbol)
        if not stock:
            return None
        return self.repository.get_latest_close(stock.id)

    def get_price_history(self, symbol: str, days: int = 30) -> List[PricePoint]:
        """Closing prices for the last `days` days, oldest first."""
        stock = self.repository.get_by_symbol(symbol)
        if not stock:
            return []

        since = (datetime.utcnow() - timedelta(days=int(days))).date()
        return [
            PricePoint(price=float(row.close_price), price_date=row.price_date)
            for row in self.repository.get_price_history(stock.id, since)
        ]

    def update_all_stocks(self) -> Dict[str, bool]:
        """Refresh the price of every active stock."""
        results = {}
        for stock in self.get_stocks(active_only=True):
            results[stock.symbol] = self.fetch_and_store_stock_data(stock.symbol)

        succeeded = sum(1 for ok in results.values() if ok)
        logger.info(f"Stock update completed: {succeeded}/{len(results)} stocks updated successfully")
        return results

    def initialize_default_stocks(self, defaults: Optional[Dict[str, str]] = None) -> Dict[str, bool]:
        defaults = defaults if defaults is not None else settings.DEFAULT_STOCKS
        return {
            symbol: self.add_stock(symbol, company_name)
            for symbol, company_name in defaults.items()
        }
