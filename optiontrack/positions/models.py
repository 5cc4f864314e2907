"""Position models - option strategy and a single option position snapshot."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Optional, Union


class OptionStrategy(Enum):
    """Strategy an option leg belongs to."""

    COVERED_CALL = "Covered Call"
    CASH_SECURED_PUT = "Cash-Secured Put"
    PROTECTIVE_PUT = "Protective Put"
    IRON_CONDOR = "Iron Condor"
    NAKED_PUT = "Naked Put"
    NAKED_CALL = "Naked Call"
    SPREAD = "Spread"


def _parse_expiration(value: str) -> Union[date, datetime]:
    # Bare 'YYYY-MM-DD' stays a date so it expires at midnight in the configured zone
    if len(value) == 10:
        return date.fromisoformat(value)
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


def _optional_float(value: Any) -> Optional[float]:
    return None if value is None else float(value)


GREEK_FIELDS = ("delta", "gamma", "theta", "vega", "rho")


@dataclass
class OptionPosition:
    """
    One option position at one point in time.

    The derived fields are recomputed by ``enrich_position`` on every write
    and should not be set by hand. Greeks are written separately by
    ``GreeksCalculator.apply_to_position`` when a volatility is known.
    """

    # Contract
    symbol: str
    side: str  # "call" or "put"
    strike: float
    expiration: Union[date, datetime]
    contracts: int = 1
    strategy: Optional[OptionStrategy] = None

    # Money
    premium_collected: float = 0.0
    current_value: float = 0.0
    current_price: Optional[float] = None  # underlying, when known

    # Derived
    days_to_expiration: int = 0
    unrealized_pnl: float = 0.0
    is_in_the_money: bool = False
    assignment_probability: float = 0.0

    # Greeks (Black-Scholes, None until priced)
    delta: Optional[float] = None
    gamma: Optional[float] = None
    theta: Optional[float] = None
    vega: Optional[float] = None
    rho: Optional[float] = None

    @property
    def is_expired(self) -> bool:
        return self.days_to_expiration <= 0

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary for persistence."""
        return {
            "symbol": self.symbol,
            "side": self.side,
            "strike": self.strike,
            "expiration": self.expiration.isoformat(),
            "contracts": self.contracts,
            "strategy": self.strategy.value if self.strategy else None,
            "premium_collected": self.premium_collected,
            "current_value": self.current_value,
            "current_price": self.current_price,
            "days_to_expiration": self.days_to_expiration,
            "unrealized_pnl": self.unrealized_pnl,
            "is_in_the_money": self.is_in_the_money,
            "assignment_probability": self.assignment_probability,
            **{name: getattr(self, name) for name in GREEK_FIELDS},
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OptionPosition":
        """Deserialize from dictionary. Numeric fields may arrive as strings."""
        expiration = data["expiration"]
        if isinstance(expiration, str):
            expiration = _parse_expiration(expiration)
        return cls(
            symbol=data["symbol"].upper(),
            side=data["side"],
            strike=_optional_float(data["strike"]),
            expiration=expiration,
            contracts=int(data.get("contracts", 1)),
            strategy=(
                OptionStrategy(data["strategy"]) if data.get("strategy") else None
            ),
            premium_collected=_optional_float(data.get("premium_collected", 0.0)),
            current_value=_optional_float(data.get("current_value", 0.0)),
            current_price=_optional_float(data.get("current_price")),
            days_to_expiration=int(data.get("days_to_expiration", 0)),
            unrealized_pnl=_optional_float(data.get("unrealized_pnl", 0.0)),
            is_in_the_money=bool(data.get("is_in_the_money", False)),
            assignment_probability=float(data.get("assignment_probability", 0.0)),
            **{name: _optional_float(data.get(name)) for name in GREEK_FIELDS},
        )
