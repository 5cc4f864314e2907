"""Black-Scholes Greeks engine.

Closed-form Delta, Gamma, Theta, Vega and Rho for European options.
Theta is per calendar day, vega per 1% volatility, rho per 1% rate.

Inputs are validated before any arithmetic: S, K, T and sigma must be
strictly positive, r any finite real, side 'call' or 'put'. Anything else
raises InvalidParameter. Results that come out non-finite (underflowing
sigma*sqrt(T), overflowing discount) also raise instead of returning NaN/inf.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Dict, Optional, Tuple, Union

import numpy as np
from py_vollib.black_scholes.implied_volatility import implied_volatility
from scipy.special import erf

from optiontrack.config import TrackerConfig
from optiontrack.pricing.models import GreekKind, GreeksResult, InvalidParameter, OptionSide
from optiontrack.timeutil import DateLike, days_until

logger = logging.getLogger(__name__)

DAYS_PER_YEAR = 365.0
PERCENT = 100.0

SideLike = Union[OptionSide, str]

_POSITIVE_MESSAGES = {
    "S": "S (current price) must be greater than 0",
    "K": "K (strike price) must be greater than 0",
    "T": "Time to expiration must be greater than 0",
    "sigma": "sigma (volatility) must be greater than 0",
}


# ── Normal distribution ─────────────────────────────────────────


def norm_cdf(x: float) -> float:
    """Standard normal CDF via the error function."""
    return float(0.5 * (1.0 + erf(x / np.sqrt(2.0))))


def norm_pdf(x: float) -> float:
    """Standard normal density."""
    return float(np.exp(-0.5 * x * x) / np.sqrt(2.0 * np.pi))


# ── Validation ──────────────────────────────────────────────────


def _as_finite(name: str, value) -> float:
    if isinstance(value, bool):
        raise InvalidParameter(f"{name} must be a number, got {value!r}", parameter=name)
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidParameter(f"{name} must be a number, got {value!r}", parameter=name) from None
    if not np.isfinite(number):
        raise InvalidParameter(f"{name} must be finite, got {value!r}", parameter=name)
    return number


def validate_inputs(
    S: float, K: float, T: float, r: float, sigma: float, side: SideLike
) -> Tuple[float, float, float, float, float, OptionSide]:
    """Check the Black-Scholes domain and return normalized inputs."""
    values = {}
    try:
        for name, raw in (("S", S), ("K", K), ("T", T), ("r", r), ("sigma", sigma)):
            values[name] = _as_finite(name, raw)
            if name in _POSITIVE_MESSAGES and values[name] <= 0:
                raise InvalidParameter(_POSITIVE_MESSAGES[name], parameter=name)
        option_side = OptionSide.parse(side)
    except InvalidParameter as e:
        logger.warning(
            "Rejected greeks inputs S=%r K=%r T=%r r=%r sigma=%r side=%r: %s",
            S, K, T, r, sigma, side, e,
        )
        raise

    return values["S"], values["K"], values["T"], values["r"], values["sigma"], option_side


# ── d1 / d2 ─────────────────────────────────────────────────────


def _d1_d2(S: float, K: float, T: float, r: float, sigma: float) -> Tuple[float, float]:
    vol_sqrt_t = sigma * np.sqrt(T)
    if vol_sqrt_t <= 0:
        raise InvalidParameter(
            f"sigma*sqrt(T) underflows to zero (T={T!r}, sigma={sigma!r})",
            parameter="T",
        )
    d1 = (np.log(S / K) + (r + 0.5 * sigma * sigma) * T) / vol_sqrt_t
    d2 = d1 - vol_sqrt_t
    return float(d1), float(d2)


def compute_d1_d2(S: float, K: float, T: float, r: float, sigma: float) -> Tuple[float, float]:
    """Shared Black-Scholes precursors d1 and d2."""
    S, K, T, r, sigma, _ = validate_inputs(S, K, T, r, sigma, OptionSide.CALL)
    return _d1_d2(S, K, T, r, sigma)


# ── Per-greek formulas (inputs already validated) ───────────────


def _delta(S, K, T, r, sigma, side, d1, d2):
    if side is OptionSide.CALL:
        return norm_cdf(d1)
    return norm_cdf(d1) - 1.0


def _gamma(S, K, T, r, sigma, side, d1, d2):
    return norm_pdf(d1) / (S * sigma * np.sqrt(T))


def _theta(S, K, T, r, sigma, side, d1, d2):
    decay = -S * norm_pdf(d1) * sigma / (2.0 * np.sqrt(T))
    carry = r * K * np.exp(-r * T)
    if side is OptionSide.CALL:
        return (decay - carry * norm_cdf(d2)) / DAYS_PER_YEAR
    return (decay + carry * norm_cdf(-d2)) / DAYS_PER_YEAR


def _vega(S, K, T, r, sigma, side, d1, d2):
    return S * norm_pdf(d1) * np.sqrt(T) / PERCENT


def _rho(S, K, T, r, sigma, side, d1, d2):
    discounted = K * T * np.exp(-r * T)
    if side is OptionSide.CALL:
        return discounted * norm_cdf(d2) / PERCENT
    return -discounted * norm_cdf(-d2) / PERCENT


_FORMULAS: Dict[GreekKind, Callable[..., float]] = {
    GreekKind.DELTA: _delta,
    GreekKind.GAMMA: _gamma,
    GreekKind.THETA: _theta,
    GreekKind.VEGA: _vega,
    GreekKind.RHO: _rho,
}


def _evaluate(kind: GreekKind, args) -> float:
    value = float(_FORMULAS[kind](*args))
    if not np.isfinite(value):
        T, r = args[2], args[3]
        # Blame r only when the discount factor itself overflows
        parameter = "r" if not np.isfinite(np.exp(-r * T)) else None
        raise InvalidParameter(
            f"inputs produce a non-finite {kind.value}"
            + (f" (exp(-r*T) overflows for r={r!r}, T={T!r})" if parameter == "r" else ""),
            parameter=parameter,
        )
    return value


# ── Public API ──────────────────────────────────────────────────


def compute_greek(
    kind: Union[GreekKind, str],
    S: float,
    K: float,
    T: float,
    r: float,
    sigma: float,
    side: SideLike,
) -> float:
    """Compute a single greek by name ('delta', 'gamma', 'theta', 'vega', 'rho')."""
    kind = GreekKind.parse(kind)
    S, K, T, r, sigma, side = validate_inputs(S, K, T, r, sigma, side)
    with np.errstate(all="ignore"):
        d1, d2 = _d1_d2(S, K, T, r, sigma)
        value = _evaluate(kind, (S, K, T, r, sigma, side, d1, d2))
    logger.debug(
        "%s for %s S=%s K=%s T=%s r=%s sigma=%s -> %s",
        kind.value, side.value, S, K, T, r, sigma, value,
    )
    return value


def calculate_delta(S, K, T, r, sigma, side) -> float:
    return compute_greek(GreekKind.DELTA, S, K, T, r, sigma, side)


def calculate_gamma(S, K, T, r, sigma, side) -> float:
    return compute_greek(GreekKind.GAMMA, S, K, T, r, sigma, side)


def calculate_theta(S, K, T, r, sigma, side) -> float:
    """Theta per calendar day."""
    return compute_greek(GreekKind.THETA, S, K, T, r, sigma, side)


def calculate_vega(S, K, T, r, sigma, side) -> float:
    """Vega per 1% change in volatility."""
    return compute_greek(GreekKind.VEGA, S, K, T, r, sigma, side)


def calculate_rho(S, K, T, r, sigma, side) -> float:
    """Rho per 1% change in the risk-free rate."""
    return compute_greek(GreekKind.RHO, S, K, T, r, sigma, side)


def compute_all_greeks(
    S: float, K: float, T: float, r: float, sigma: float, side: SideLike
) -> GreeksResult:
    """All five greeks from one validation pass and one d1/d2 evaluation."""
    S, K, T, r, sigma, side = validate_inputs(S, K, T, r, sigma, side)
    with np.errstate(all="ignore"):
        d1, d2 = _d1_d2(S, K, T, r, sigma)
        args = (S, K, T, r, sigma, side, d1, d2)
        result = GreeksResult(**{kind.value: _evaluate(kind, args) for kind in GreekKind})
    logger.debug(
        "greeks for %s S=%s K=%s T=%s r=%s sigma=%s -> %s",
        side.value, S, K, T, r, sigma, result,
    )
    return result


calculate_all_greeks = compute_all_greeks


def time_to_expiry(
    expiration: DateLike,
    now: Optional[DateLike] = None,
    days_per_year: float = DAYS_PER_YEAR,
    tz=None,
) -> float:
    """Years until expiration. Zero or negative once the contract has expired."""
    return days_until(expiration, now, tz) / days_per_year


class GreeksCalculator:
    """
    Greeks for a contract described by its expiration date instead of T.

    Holds the risk-free rate so position views only need price, strike,
    expiry and a volatility. Also backs out implied volatility from a
    market price via py_vollib.
    """

    def __init__(self, risk_free_rate: Optional[float] = None, config: Optional[TrackerConfig] = None):
        self.config = config or TrackerConfig()
        self.r = self.config.risk_free_rate if risk_free_rate is None else risk_free_rate

    def years_to_expiry(self, expiration: DateLike, now: Optional[DateLike] = None) -> float:
        return time_to_expiry(expiration, now, self.config.days_per_year, self.config.tzinfo)

    def compute_greek(
        self,
        kind: Union[GreekKind, str],
        stock_price: float,
        strike: float,
        expiration: DateLike,
        sigma: float,
        option_type: SideLike = 'put',
        now: Optional[DateLike] = None,
    ) -> float:
        """Single greek. Raises InvalidParameter once the contract has expired."""
        t = self.years_to_expiry(expiration, now)
        return compute_greek(kind, stock_price, strike, t, self.r, sigma, option_type)

    def compute_all_greeks(
        self,
        stock_price: float,
        strike: float,
        expiration: DateLike,
        sigma: float,
        option_type: SideLike = 'put',
        now: Optional[DateLike] = None,
    ) -> GreeksResult:
        """All greeks. Raises InvalidParameter once the contract has expired."""
        t = self.years_to_expiry(expiration, now)
        return compute_all_greeks(stock_price, strike, t, self.r, sigma, option_type)

    def apply_to_position(self, position, sigma: float, now: Optional[DateLike] = None):
        """
        Copy of an option position with its delta/gamma/theta/vega/rho filled in.

        Prices off the position's underlying ``current_price``, so a position
        without one (or already expired) raises InvalidParameter.
        """
        greeks = self.compute_all_greeks(
            position.current_price,
            position.strike,
            position.expiration,
            sigma,
            position.side,
            now=now,
        )
        return replace(position, **greeks.to_dict())

    def compute_iv(
        self,
        option_price: float,
        stock_price: float,
        strike: float,
        expiration: DateLike,
        option_type: SideLike = 'put',
        now: Optional[DateLike] = None,
    ) -> Optional[float]:
        """Compute implied volatility from option price. Returns None on failure."""
        flag = 'c' if OptionSide.parse(option_type) is OptionSide.CALL else 'p'
        t = self.years_to_expiry(expiration, now)

        if not all([
            np.isfinite(option_price),
            np.isfinite(stock_price),
            np.isfinite(strike),
            t > 0,
            option_price > 0,
            stock_price > 0,
            strike > 0,
        ]):
            return None

        try:
            iv = implied_volatility(option_price, stock_price, strike, t, self.r, flag)
        except Exception as e:
            logger.debug(
                "IV solve failed price=%s S=%s K=%s t=%.5f flag=%s: %s",
                option_price, stock_price, strike, t, flag, e,
            )
            return None
        return float(iv) if np.isfinite(iv) and iv > 0 else None
