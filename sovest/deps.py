"""Common dependencies."""
import secrets
from functools import lru_cache
from typing import Generator
from uuid import uuid4
from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from sovest.config import settings
from sovest.services.price_lookup import PriceLookup
from sovest.services.scoring import PredictionScoringService
from sovest.storage.db import get_db as get_database_session
from sovest.storage.repositories import PredictionRepository, StockRepository

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
security = HTTPBasic()


@lru_cache()
def _admin_password_hash() -> str:
    return pwd_context.hash(settings.ADMIN_PASSWORD)


def get_request_id(x_request_id: str | None = Header(None)) -> str:
    """Get or generate request ID."""
    return x_request_id or str(uuid4())


def get_db() -> Generator[Session, None, None]:
    """Database session dependency."""
    yield from get_database_session()


def get_scoring_service(db: Session = Depends(get_db)) -> PredictionScoringService:
    """Scoring service bound to the request's session."""
    return PredictionScoringService(
        price_lookup=PriceLookup(StockRepository(db)),
        repository=PredictionRepository(db),
    )


def verify_admin(credentials: HTTPBasicCredentials = Depends(security)) -> str:
    """Verify admin credentials."""
    correct_username = secrets.compare_digest(credentials.username, settings.ADMIN_USERNAME)
    correct_password = pwd_context.verify(credentials.password, _admin_password_hash())

    if not (correct_username and correct_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )

    return credentials.username
