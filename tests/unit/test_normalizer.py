"""Unit tests for provider payload normalization."""

import pytest

from src.pm_orderbook.infrastructure.normalizer import (
    parse_candidate_markets,
    parse_json_array,
    parse_levels,
    parse_market_tokens,
    parse_order_book,
    parse_reference_price,
    to_float,
)


class TestParseJsonArray:
    def test_list_passthrough(self) -> None:
        assert parse_json_array(["a", "b"]) == ["a", "b"]

    def test_json_string(self) -> None:
        assert parse_json_array('["0.5", "0.5"]') == ["0.5", "0.5"]

    @pytest.mark.parametrize("value", [None, "", "not json", '{"a": 1}', 42])
    def test_garbage_is_empty(self, value) -> None:
        assert parse_json_array(value) == []


class TestToFloat:
    def test_numeric_string(self) -> None:
        assert to_float("0.55") == 0.55

    @pytest.mark.parametrize("value", [None, "abc", True, [1]])
    def test_invalid(self, value) -> None:
        assert to_float(value) is None


class TestParseLevels:
    def test_drops_invalid_levels(self) -> None:
        raw = [
            {"price": "0.48", "size": "100"},
            {"price": "1.5", "size": "100"},
            {"price": "0", "size": "100"},
            {"price": "0.40", "size": "-3"},
            {"price": "x", "size": "1"},
            "junk",
        ]
        lvls = parse_levels(raw)
        assert [(lv.price, lv.size) for lv in lvls] == [(0.48, 100.0)]

    def test_non_list(self) -> None:
        assert parse_levels(None) == []

    @pytest.mark.parametrize("size", ["NaN", "inf", "-inf"])
    def test_non_finite_size_dropped(self, size: str) -> None:
        raw = [{"price": "0.48", "size": size}, {"price": "0.47", "size": "10"}]
        assert [(lv.price, lv.size) for lv in parse_levels(raw)] == [(0.47, 10.0)]


class TestParseOrderBook:
    def test_clob_book(self) -> None:
        payload = {
            "market": "0xmkt",
            "asset_id": "123",
            "bids": [{"price": "0.47", "size": "500"}],
            "asks": [{"price": "0.53", "size": "200"}],
        }
        book = parse_order_book("123", payload)

        assert book.token_id == "123"
        assert book.market_id == "0xmkt"
        assert book.bids[0].price == 0.47
        assert book.asks[0].size == 200.0

    def test_missing_sides_are_empty(self) -> None:
        book = parse_order_book("123", {})
        assert book.bids == []
        assert book.asks == []
        assert book.market_id is None

    def test_non_object_raises(self) -> None:
        with pytest.raises(ValueError):
            parse_order_book("123", ["not", "a", "book"])


class TestParseMarketTokens:
    def test_two_tokens(self) -> None:
        payload = {
            "condition_id": "0xmkt",
            "question": "Will it rain?",
            "tokens": [
                {"token_id": "111", "outcome": "Yes", "price": 0.62},
                {"token_id": "222", "outcome": "No", "price": "0.39"},
            ],
        }
        tokens = parse_market_tokens("0xmkt", payload)

        assert tokens is not None
        assert (tokens.token_a, tokens.token_b) == ("111", "222")
        assert tokens.outcome_prices == (0.62, 0.39)
        assert tokens.complement_of("111") == "222"
        assert tokens.complement_of("999") is None

    def test_single_token_is_none(self) -> None:
        assert parse_market_tokens("0xmkt", {"tokens": [{"token_id": "111"}]}) is None


class TestParseReferencePrice:
    def test_nested_side(self) -> None:
        assert parse_reference_price({"111": {"BUY": "0.55"}}, "111", "BUY") == 0.55

    def test_flat(self) -> None:
        assert parse_reference_price({"111": "0.55"}, "111", "BUY") == 0.55

    @pytest.mark.parametrize("payload", [{}, {"111": {"SELL": "0.5"}}, {"111": "1.0"}, []])
    def test_unusable(self, payload) -> None:
        assert parse_reference_price(payload, "111", "BUY") is None


class TestParseCandidateMarkets:
    def test_flattens_events(self) -> None:
        events = [
            {
                "title": "Weather",
                "liquidity": 9000,
                "markets": [
                    {
                        "conditionId": "0xa",
                        "question": "Rain?",
                        "clobTokenIds": '["1", "2"]',
                        "outcomePrices": '["0.6", "0.4"]',
                        "liquidity": "5000",
                    },
                    {
                        "conditionId": "0xsettled",
                        "clobTokenIds": '["3", "4"]',
                        "outcomePrices": '["1", "0"]',
                    },
                    {"conditionId": "0xbroken", "clobTokenIds": '["5"]', "outcomePrices": "[]"},
                ],
            }
        ]
        candidates = parse_candidate_markets(events)

        assert len(candidates) == 1
        c = candidates[0]
        assert c.market_id == "0xa"
        assert (c.token_a, c.token_b) == ("1", "2")
        assert c.liquidity == 5000.0

    def test_non_list(self) -> None:
        assert parse_candidate_markets({"error": "x"}) == []

    def test_non_object_markets_skipped(self) -> None:
        events = [
            {
                "title": "Mixed",
                "markets": [
                    "junk",
                    None,
                    42,
                    {
                        "conditionId": "0xb",
                        "clobTokenIds": ["7", "8"],
                        "outcomePrices": ["0.3", "0.7"],
                    },
                ],
            }
        ]
        candidates = parse_candidate_markets(events)

        assert [c.market_id for c in candidates] == ["0xb"]
        assert candidates[0].question == "Mixed"
