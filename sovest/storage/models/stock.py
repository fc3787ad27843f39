"""Stock model."""
from datetime import datetime

from sqlalchemy import Column, String, Integer, Boolean, DateTime, Text
from sqlalchemy.orm import relationship

from sovest.storage.base import Base


class Stock(Base):
    """Tracked stock, one row per ticker."""

    __tablename__ = "stocks"

    id = Column(Integer, primary_key=True, index=True)
    symbol = Column(String(10), unique=True, nullable=False, index=True)  # Always upper case
    company_name = Column(String(100), nullable=False)
    description = Column(Text)
    sector = Column(String(50), nullable=False, default="Unknown")
    active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime)

    # Relationships
    prices = relationship("StockPrice", back_populates="stock", cascade="all, delete-orphan")
    predictions = relationship("Prediction", back_populates="stock", passive_deletes=True)
