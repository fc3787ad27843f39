"""Scheduled scoring and price update jobs."""
from datetime import datetime

from sovest.services.price_lookup import PriceLookup
from sovest.services.scoring import PredictionScoringService
from sovest.services.stock_data import StockDataService
from sovest.storage.db import get_db_context
from sovest.storage.repositories import PredictionRepository, StockRepository
from sovest.app_logging import get_logger

logger = get_logger(__name__)


def job_evaluate_predictions() -> dict:
    """Evaluate every expired, unscored prediction."""
    logger.info("Starting scheduled prediction evaluation")

    with get_db_context() as db:
        service = PredictionScoringService(
            price_lookup=PriceLookup(StockRepository(db)),
            repository=PredictionRepository(db),
        )
        summary = service.evaluate_active_predictions()

    logger.info(
        f"Evaluation results: Total predictions: {summary.total}, "
        f"Successfully evaluated: {summary.evaluated}, "
        f"Errors: {summary.errors}"
    )
    results = summary.model_dump()
    results['timestamp'] = datetime.utcnow().isoformat()
    return results


def job_update_stock_prices() -> dict:
    """Refresh prices for all active stocks."""
    logger.info("Starting scheduled stock price update")

    with get_db_context() as db:
        service = StockDataService(StockRepository(db))
        updates = service.update_all_stocks()

    return {
        'updated': sum(1 for ok in updates.values() if ok),
        'total': len(updates),
        'stocks': updates,
        'timestamp': datetime.utcnow().isoformat(),
    }


def job_initialize_default_stocks() -> dict:
    """Track the configured default stocks."""
    with get_db_context() as db:
        service = StockDataService(StockRepository(db))
        added = service.initialize_default_stocks()

    logger.info(f"Default stocks initialized: {added}")
    return added
