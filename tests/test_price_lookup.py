"""Tests for closing price lookup."""
from datetime import date, datetime

from sovest.storage.models import StockPrice


class TestPriceAtOrBefore:

    def test_exact_day(self, make_stock, price_lookup):
        make_stock("AAPL", prices={date(2025, 1, 2): 100.0, date(2025, 1, 3): 101.0})

        assert price_lookup.price_at_or_before("AAPL", date(2025, 1, 3)) == 101.0

    def test_time_of_day_is_ignored(self, make_stock, price_lookup):
        make_stock("AAPL", prices={date(2025, 1, 2): 100.0, date(2025, 1, 3): 101.0})

        assert price_lookup.price_at_or_before("AAPL", datetime(2025, 1, 3, 23, 59, 59)) == 101.0
        assert price_lookup.price_at_or_before("AAPL", datetime(2025, 1, 3, 0, 0, 1)) == 101.0

    def test_uses_most_recent_earlier_day(self, make_stock, price_lookup):
        # Friday close is used for a Sunday lookup
        make_stock("AAPL", prices={
            date(2025, 1, 1): 99.0,
            date(2025, 1, 3): 101.0,
            date(2025, 1, 7): 104.0,
        })

        assert price_lookup.price_at_or_before("AAPL", date(2025, 1, 5)) == 101.0

    def test_symbol_is_case_insensitive(self, make_stock, price_lookup):
        make_stock("MSFT", prices={date(2025, 1, 2): 400.0})

        assert price_lookup.price_at_or_before("msft", date(2025, 1, 2)) == 400.0
        assert price_lookup.price_at_or_before(" Msft ", date(2025, 1, 2)) == 400.0

    def test_falls_back_to_latest_price_before_history_starts(self, make_stock, price_lookup):
        make_stock("AAPL", prices={date(2025, 2, 1): 110.0, date(2025, 2, 10): 120.0})

        assert price_lookup.price_at_or_before("AAPL", date(2024, 12, 31)) == 120.0

    def test_unknown_symbol_returns_none(self, make_stock, price_lookup):
        make_stock("AAPL", prices={date(2025, 1, 2): 100.0})

        assert price_lookup.price_at_or_before("ZZZZ", date(2025, 1, 2)) is None

    def test_stock_without_prices_returns_none(self, make_stock, price_lookup):
        make_stock("NEWCO")

        assert price_lookup.price_at_or_before("NEWCO", date(2025, 1, 2)) is None

    def test_does_not_write(self, db, make_stock, price_lookup):
        make_stock("AAPL", prices={date(2025, 1, 2): 100.0})

        price_lookup.price_at_or_before("AAPL", date(2024, 1, 1))

        assert not db.new and not db.dirty
        assert db.query(StockPrice).count() == 1


def test_latest_price(make_stock, price_lookup):
    make_stock("AAPL", prices={date(2025, 1, 2): 100.0, date(2025, 1, 9): 108.5})

    assert price_lookup.latest_price("aapl") == 108.5
    assert price_lookup.latest_price("NOPE") is None
