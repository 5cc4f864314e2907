"""Pricing models - option side, greek kind, greeks result, parameter error."""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Dict, Optional, Union


class InvalidParameter(ValueError):
    """Raised when pricing inputs are outside the Black-Scholes domain.

    ``parameter`` names the offending input (``"S"``, ``"side"``, ...) so the
    calling layer can report which precondition failed.
    """

    def __init__(self, message: str, parameter: Optional[str] = None):
        super().__init__(message)
        self.parameter = parameter


class OptionSide(Enum):
    """Call or put."""

    CALL = "call"
    PUT = "put"

    @classmethod
    def parse(cls, value: Union["OptionSide", str]) -> "OptionSide":
        """Accept an OptionSide or a case-insensitive 'call'/'put' string."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass  # reported below
        raise InvalidParameter(
            f'Option type must be either "call" or "put", got {value!r}',
            parameter="side",
        )


class GreekKind(Enum):
    """The five sensitivities the engine computes."""

    DELTA = "delta"
    GAMMA = "gamma"
    THETA = "theta"
    VEGA = "vega"
    RHO = "rho"

    @classmethod
    def parse(cls, value: Union["GreekKind", str]) -> "GreekKind":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        names = ", ".join(k.value for k in cls)
        raise InvalidParameter(
            f"Unknown greek {value!r}, expected one of: {names}",
            parameter="kind",
        )


@dataclass(frozen=True)
class GreeksResult:
    """
    All five Greeks from one shared d1/d2 evaluation.

    theta is per calendar day, vega per 1% vol, rho per 1% rate.
    """

    delta: float
    gamma: float
    theta: float
    vega: float
    rho: float

    def __getitem__(self, kind: Union[GreekKind, str]) -> float:
        return getattr(self, GreekKind.parse(kind).value)

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)
