"""User model."""
from datetime import datetime

from sqlalchemy import Column, String, Integer, DateTime, Index
from sqlalchemy.orm import relationship

from sovest.storage.base import Base


class User(Base):
    """Registered user. Credentials are managed outside the scoring engine."""

    __tablename__ = "users"
    __table_args__ = (
        Index('idx_user_reputation', 'reputation_score'),
    )

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    first_name = Column(String(50))
    last_name = Column(String(50))
    password_hash = Column(String(255))

    # Running sum of reputation deltas from evaluated predictions
    reputation_score = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    predictions = relationship("Prediction", back_populates="user")

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)
