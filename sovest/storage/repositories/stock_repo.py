"""Repository for stocks and their daily prices."""
from datetime import date, datetime
from typing import List, Optional
from sqlalchemy.orm import Session

from sovest.storage.models import Stock, StockPrice
from sovest.app_logging import get_logger

logger = get_logger(__name__)


def normalize_symbol(symbol: str) -> str:
    return symbol.strip().upper()


class StockRepository:
    """Stock and StockPrice queries."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_symbol(self, symbol: str) -> Optional[Stock]:
        return self.db.query(Stock).filter(
            Stock.symbol == normalize_symbol(symbol)
        ).first()

    def list_stocks(self, active_only: bool = True) -> List[Stock]:
        query = self.db.query(Stock)
        if active_only:
            query = query.filter(Stock.active.is_(True))
        return query.order_by(Stock.symbol).all()

    def add_stock(self, symbol: str, company_name: str, sector: Optional[str] = None,
                  description: Optional[str] = None) -> Stock:
        stock = Stock(
            symbol=normalize_symbol(symbol),
            company_name=company_name,
            sector=sector or "Unknown",
            description=description or None,
            active=True,
        )
        self.db.add(stock)
        self.db.flush()
        return stock

    def delete_stock(self, stock: Stock) -> None:
        self.db.delete(stock)
        self.db.flush()

    def get_close_on_or_before(self, stock_id: int, day: date) -> Optional[float]:
        """Close of the most recent price row dated on or before `day`."""
        row = self.db.query(StockPrice.close_price).filter(
            StockPrice.stock_id == stock_id,
            StockPrice.price_date <= day,
        ).order_by(StockPrice.price_date.desc()).first()
        return float(row.close_price) if row else None

    def get_latest_close(self, stock_id: int) -> Optional[float]:
        row = self.db.query(StockPrice.close_price).filter(
            StockPrice.stock_id == stock_id
        ).order_by(StockPrice.price_date.desc()).first()
        return float(row.close_price) if row else None

    def get_price_history(self, stock_id: int, since: date) -> List[StockPrice]:
        return self.db.query(StockPrice).filter(
            StockPrice.stock_id == stock_id,
            StockPrice.price_date >= since,
        ).order_by(StockPrice.price_date).all()

    def upsert_price(self, stock: Stock, when: datetime, close_price: float, **bar) -> StockPrice:
        """Insert the day's price row, or overwrite it if one already exists."""
        day = when.date()
        price = self.db.query(StockPrice).filter(
            StockPrice.stock_id == stock.id,
            StockPrice.price_date == day,
        ).first()

        if price:
            price.close_price = close_price
            for key, value in bar.items():
                setattr(price, key, value)
        else:
            price = StockPrice(stock_id=stock.id, price_date=day, close_price=close_price, **bar)
            self.db.add(price)

        stock.updated_at = when
        self.db.flush()
        return price
