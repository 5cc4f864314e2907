"""Unit tests for position and pricing models."""

import pytest
import pytz
from datetime import date, datetime, timedelta

from optiontrack.positions.enrichment import enrich_position
from optiontrack.positions.models import OptionPosition, OptionStrategy
from optiontrack.pricing.models import GreekKind, InvalidParameter, OptionSide
from tests.conftest import NOW, make_position


class TestOptionPositionSerialization:
    def test_round_trip_after_enrichment(self):
        position = enrich_position(make_position(), NOW)
        restored = OptionPosition.from_dict(position.to_dict())
        assert restored == position

    def test_date_only_expiration_stays_date(self):
        data = make_position().to_dict()
        data["expiration"] = "2026-03-20"
        restored = OptionPosition.from_dict(data)
        assert type(restored.expiration) is date

    def test_datetime_expiration(self):
        data = make_position().to_dict()
        data["expiration"] = "2026-03-20T20:00:00+00:00"
        assert isinstance(OptionPosition.from_dict(data).expiration, datetime)

    def test_utc_z_suffix(self):
        data = make_position().to_dict()
        data["expiration"] = "2026-03-20T20:00:00.000Z"
        restored = OptionPosition.from_dict(data)
        assert restored.expiration == datetime(2026, 3, 20, 20, 0, tzinfo=pytz.UTC)

    def test_numeric_strings_coerced(self):
        data = make_position().to_dict()
        data.update(strike="150", current_price="140.25", premium_collected="320", contracts="2")
        restored = OptionPosition.from_dict(data)
        assert restored.strike == 150.0
        assert restored.current_price == 140.25
        assert restored.premium_collected == 320.0
        assert restored.contracts == 2

    def test_greeks_serialized(self):
        position = make_position(delta=-0.42, gamma=0.03, theta=-0.05, vega=0.12, rho=-0.02)
        data = position.to_dict()
        assert data["delta"] == -0.42
        assert OptionPosition.from_dict(data).rho == -0.02

    def test_unpriced_greeks_stay_none(self):
        restored = OptionPosition.from_dict(make_position().to_dict())
        assert restored.delta is None
        assert restored.vega is None

    def test_minimal_dict_uses_defaults(self):
        restored = OptionPosition.from_dict(
            {"symbol": "tsla", "side": "call", "strike": 300.0, "expiration": "2026-04-17"}
        )
        assert restored.symbol == "TSLA"
        assert restored.contracts == 1
        assert restored.strategy is None
        assert restored.current_price is None
        assert restored.is_in_the_money is False

    def test_strategy_serialized_by_label(self):
        data = make_position(strategy=OptionStrategy.COVERED_CALL).to_dict()
        assert data["strategy"] == "Covered Call"
        assert OptionPosition.from_dict(data).strategy is OptionStrategy.COVERED_CALL


class TestOptionPositionProperties:
    def test_is_expired(self):
        assert enrich_position(make_position(expiration=NOW - timedelta(days=1)), NOW).is_expired
        assert not enrich_position(make_position(), NOW).is_expired


class TestEnums:
    def test_side_parse(self):
        assert OptionSide.parse(" Call ") is OptionSide.CALL
        assert OptionSide.parse(OptionSide.PUT) is OptionSide.PUT

    def test_side_parse_rejects(self):
        with pytest.raises(InvalidParameter):
            OptionSide.parse("both")

    def test_greek_parse(self):
        assert GreekKind.parse("RHO") is GreekKind.RHO

    def test_greek_parse_rejects(self):
        with pytest.raises(InvalidParameter, match="delta, gamma, theta, vega, rho"):
            GreekKind.parse("charm")
