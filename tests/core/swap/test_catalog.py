"""
Tests for the price catalog
"""

from decimal import Decimal

import pytest

from swapdesk.core.swap import CurrencyQuote, DataUnavailable, PriceCatalog, quote_from_record


class TestQuoteFromRecord:
    """Tests for record ingestion."""

    def test_valid_record(self):
        quote = quote_from_record({"currency": "ETH", "date": "2023-08-29T07:10:52.000Z", "price": 1645.93})
        assert quote == CurrencyQuote(symbol="ETH", unit_price=Decimal("1645.93"))

    @pytest.mark.parametrize(
        "record",
        [
            {"currency": "ETH"},
            {"currency": "ETH", "price": 0},
            {"currency": "ETH", "price": -1},
            {"currency": "ETH", "price": None},
            {"currency": "ETH", "price": "abc"},
            {"currency": "ETH", "price": float("inf")},
            {"currency": "ETH", "price": True},
            {"price": 1.0},
            {"currency": "", "price": 1.0},
            {"currency": "   ", "price": 1.0},
            {"currency": 42, "price": 1.0},
        ],
    )
    def test_unusable_records_are_dropped(self, record):
        assert quote_from_record(record) is None

    def test_price_as_string(self):
        quote = quote_from_record({"currency": "USD", "price": "1.00"})
        assert quote is not None
        assert quote.unit_price == Decimal("1.00")


class TestPriceCatalog:
    """Tests for PriceCatalog."""

    @pytest.fixture
    def catalog(self) -> PriceCatalog:
        return PriceCatalog.from_records([
            {"currency": "USD", "price": 1.0},
            {"currency": "ETH", "price": 3000.0},
            {"currency": "BROKEN", "price": 0},
            "not-a-record",
            {"currency": "ETH", "price": 2500.0},
            {"currency": "ATOM", "price": 7.18},
        ])

    def test_drops_invalid_and_keeps_order(self, catalog):
        assert catalog.symbols == ["USD", "ETH", "ATOM"]
        assert len(catalog) == 3

    def test_first_listing_wins(self, catalog):
        assert catalog.get("ETH").unit_price == Decimal("3000.0")

    def test_lookup(self, catalog):
        assert "USD" in catalog
        assert "BROKEN" not in catalog
        assert catalog.get("NOPE") is None
        assert catalog.get("") is None

    def test_require_raises_data_unavailable(self, catalog):
        with pytest.raises(DataUnavailable) as exc_info:
            catalog.require("NOPE")
        assert exc_info.value.symbol == "NOPE"
        assert "NOPE" in exc_info.value.message

    def test_empty_catalog_is_falsy(self):
        assert not PriceCatalog.empty()
        assert len(PriceCatalog.empty()) == 0

    def test_to_records(self, catalog):
        assert catalog.to_records()[0] == {"currency": "USD", "price": "1.0"}

    def test_padded_symbols_match_either_way(self):
        catalog = PriceCatalog.from_records([{"currency": " ETH ", "price": 3000}])

        assert catalog.symbols == ["ETH"]
        assert catalog.get("ETH").unit_price == Decimal("3000")
        assert catalog.get(" ETH").symbol == "ETH"
        assert " ETH " in catalog
        assert catalog.require("ETH\t").symbol == "ETH"
        assert catalog.get("   ") is None
