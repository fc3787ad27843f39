"""Daily stock price model."""
from sqlalchemy import Column, Integer, Float, Date, BigInteger, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import relationship

from sovest.storage.base import Base


class StockPrice(Base):
    """Daily price bar. The scoring engine only reads close_price."""

    __tablename__ = "stock_prices"
    __table_args__ = (
        UniqueConstraint('stock_id', 'price_date', name='uq_stock_price_day'),
        Index('idx_price_stock_date', 'stock_id', 'price_date'),
    )

    id = Column(Integer, primary_key=True, index=True)
    stock_id = Column(Integer, ForeignKey("stocks.id", ondelete="CASCADE"), nullable=False)
    price_date = Column(Date, nullable=False)

    close_price = Column(Float, nullable=False)
    open_price = Column(Float)
    high_price = Column(Float)
    low_price = Column(Float)
    volume = Column(BigInteger)

    # Relationships
    stock = relationship("Stock", back_populates="prices")
