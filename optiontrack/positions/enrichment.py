"""Position enrichment - lifecycle fields recomputed on every position write.

Derives days to expiration, unrealized P&L, moneyness and a bucketed
assignment probability. This is a display heuristic kept separate from the
Black-Scholes engine; it never raises, and missing optional inputs only
skip the fields that depend on them.
"""

from __future__ import annotations

import logging
import math
from dataclasses import fields, replace
from datetime import date
from typing import TYPE_CHECKING, Iterable, List, Optional

import numpy as np
import pandas as pd

from optiontrack.config import TrackerConfig
from optiontrack.positions.models import OptionPosition
from optiontrack.timeutil import DateLike, days_until, utc_now

if TYPE_CHECKING:
    from datetime import tzinfo

logger = logging.getLogger(__name__)


def _as_number(value) -> Optional[float]:
    """float(value), or None when the value is absent or not numeric."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if np.isfinite(number) else None


def days_to_expiration(expiration: DateLike, now: DateLike, tz: Optional["tzinfo"] = None) -> int:
    """Whole days left, rounded up. Negative once expired; no clamping."""
    return math.ceil(days_until(expiration, now, tz))


def is_in_the_money(side: str, strike: float, current_price: Optional[float], previous: bool = False) -> bool:
    """
    Call ITM iff price > strike, put ITM iff price < strike.
    Without a usable current price, strike or side the previous flag stands.
    """
    price = _as_number(current_price)
    strike = _as_number(strike)
    if not price or strike is None or not isinstance(side, str):
        return previous
    side = side.lower()
    if side == "call":
        return price > strike
    if side == "put":
        return price < strike
    return previous


def enrich_position(
    position: OptionPosition,
    now: Optional[DateLike] = None,
    config: Optional[TrackerConfig] = None,
) -> OptionPosition:
    """Return a copy of ``position`` with its derived fields recomputed."""
    config = config or TrackerConfig()
    now = now or utc_now()

    dte = position.days_to_expiration
    if isinstance(position.expiration, date):
        dte = days_to_expiration(position.expiration, now, config.tzinfo)
    else:
        logger.warning(
            "%s %s: expiration %r is not a date, keeping dte=%s",
            position.symbol, position.side, position.expiration, dte,
        )

    pnl = position.unrealized_pnl
    premium = _as_number(position.premium_collected)
    value = _as_number(position.current_value)
    if premium is not None and value is not None:
        pnl = premium - value

    itm = is_in_the_money(
        position.side, position.strike, position.current_price, position.is_in_the_money
    )
    probability = config.get_assignment_probability(dte, itm)

    logger.debug(
        "Enriched %s %s %s: dte=%s pnl=%s itm=%s assignment=%.2f",
        position.symbol, position.strike, position.side, dte, pnl, itm, probability,
    )

    return replace(
        position,
        days_to_expiration=dte,
        unrealized_pnl=pnl,
        is_in_the_money=itm,
        assignment_probability=probability,
    )


def enrich_positions(
    positions: Iterable[OptionPosition],
    now: Optional[DateLike] = None,
    config: Optional[TrackerConfig] = None,
) -> List[OptionPosition]:
    """Enrich a batch against one shared clock reading."""
    now = now or utc_now()
    return [enrich_position(p, now, config) for p in positions]


def positions_frame(positions: Iterable[OptionPosition]) -> pd.DataFrame:
    """Tabulate positions, nearest expiration first, likeliest assignment first on ties."""
    columns = [f.name for f in fields(OptionPosition)]
    rows = [p.to_dict() for p in positions]
    if not rows:
        return pd.DataFrame(columns=columns)

    df = pd.DataFrame(rows, columns=columns)
    df = df.sort_values(
        ["days_to_expiration", "assignment_probability"],
        ascending=[True, False],
        kind="mergesort",
    )
    return df.reset_index(drop=True)
