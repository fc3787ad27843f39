"""Domain services."""
from sovest.services.price_lookup import PriceLookup
from sovest.services.rate_limiter import RateLimiter
from sovest.services.scoring import PredictionScoringService
from sovest.services.stock_data import StockDataService

__all__ = ['PriceLookup', 'RateLimiter', 'PredictionScoringService', 'StockDataService']
