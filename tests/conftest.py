"""Shared fixtures and factory functions for optiontrack tests."""

import pytest
import pytz
from datetime import datetime, timedelta

from optiontrack.config import TrackerConfig
from optiontrack.positions.models import OptionPosition, OptionStrategy


# ─── Clock ──────────────────────────────────────────────────────────

NOW = datetime(2026, 3, 2, 15, 30, tzinfo=pytz.UTC)


@pytest.fixture
def now():
    return NOW


# ─── Configuration Fixtures ─────────────────────────────────────────


@pytest.fixture
def config():
    """Default TrackerConfig."""
    return TrackerConfig()


# ─── Market Inputs ──────────────────────────────────────────────────


@pytest.fixture
def atm_inputs():
    """S, K, T, r, sigma for the at-the-money regression case."""
    return dict(S=100.0, K=100.0, T=0.25, r=0.05, sigma=0.20)


# ─── Factory Functions ──────────────────────────────────────────────


def make_position(**overrides) -> OptionPosition:
    """Factory for OptionPosition with sensible defaults (short CSP, ITM put)."""
    defaults = dict(
        symbol="AAPL",
        side="put",
        strike=150.0,
        expiration=NOW + timedelta(days=5),
        contracts=1,
        strategy=OptionStrategy.CASH_SECURED_PUT,
        premium_collected=320.0,
        current_value=1050.0,
        current_price=140.0,
    )
    defaults.update(overrides)
    return OptionPosition(**defaults)
