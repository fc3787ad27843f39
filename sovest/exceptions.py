"""Exceptions raised by the scoring engine and stock data services."""


class ScoringError(Exception):
    """Base class for prediction evaluation failures."""


class PriceUnavailableError(ScoringError):
    """No closing price could be found for a symbol/date, even after fallback."""

    def __init__(self, symbol: str, message: str | None = None):
        self.symbol = symbol
        super().__init__(message or f"Unable to retrieve stock prices for {symbol}")


class PredictionAlreadyEvaluatedError(ScoringError):
    """The conditional accuracy write matched no row."""

    def __init__(self, prediction_id: int):
        self.prediction_id = prediction_id
        super().__init__(f"Prediction {prediction_id} was already evaluated or is inactive")

