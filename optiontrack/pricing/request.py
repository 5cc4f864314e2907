"""Greeks request contract - what a request handler validates before pricing.

Mirrors the greeks endpoints: a body carrying S, K, T, r, sigma and
optionType is checked up front and any failure becomes a client error
naming the failed precondition. Routing and transport stay with the caller.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union

from optiontrack.pricing.greeks import compute_all_greeks, compute_greek, validate_inputs
from optiontrack.pricing.models import GreekKind, GreeksResult, InvalidParameter, OptionSide

REQUIRED_PARAMETERS = {
    "S": "S (current price)",
    "K": "K (strike price)",
    "T": "T (time to expiration)",
    "r": "r (risk-free rate)",
    "sigma": "sigma (volatility)",
    "optionType": "optionType",
}


@dataclass(frozen=True)
class GreeksRequest:
    """A validated greeks request. Build it with ``from_dict``."""

    S: float
    K: float
    T: float
    r: float
    sigma: float
    option_type: OptionSide

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "GreeksRequest":
        """
        Validate a raw request body.

        r=0 counts as present; only absent or empty values are missing.
        Numeric strings are accepted ("100.5").
        """
        missing = [
            key for key in REQUIRED_PARAMETERS
            if payload.get(key) is None or payload.get(key) == ""
        ]
        if missing:
            labels = ", ".join(REQUIRED_PARAMETERS[key] for key in missing)
            raise InvalidParameter(f"Missing required parameters: {labels}", parameter=missing[0])

        S, K, T, r, sigma, side = validate_inputs(
            payload["S"],
            payload["K"],
            payload["T"],
            payload["r"],
            payload["sigma"],
            payload["optionType"],
        )
        return cls(S=S, K=K, T=T, r=r, sigma=sigma, option_type=side)

    def compute(self, kind: Optional[Union[GreekKind, str]] = None) -> Union[float, GreeksResult]:
        """One greek when ``kind`` is given, otherwise all five."""
        if kind is None:
            return compute_all_greeks(self.S, self.K, self.T, self.r, self.sigma, self.option_type)
        return compute_greek(kind, self.S, self.K, self.T, self.r, self.sigma, self.option_type)

    def parameters(self) -> Dict[str, Any]:
        return {
            "S": self.S,
            "K": self.K,
            "T": self.T,
            "r": self.r,
            "sigma": self.sigma,
            "optionType": self.option_type.value,
        }

    def to_response(self, kind: Optional[Union[GreekKind, str]] = None) -> Dict[str, Any]:
        """Success envelope: the greek(s) plus the echoed parameters."""
        if kind is None:
            data = self.compute().to_dict()
        else:
            kind = GreekKind.parse(kind)
            data = {kind.value: self.compute(kind)}
        data["parameters"] = self.parameters()
        return {"success": True, "data": data}


def error_response(exc: InvalidParameter) -> Dict[str, Any]:
    """Client-error envelope for a rejected request."""
    return {"success": False, "error": str(exc)}
