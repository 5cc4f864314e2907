"""CLI entry point for one-off greeks calculations.

Usage:
    python -m optiontrack.main S K T r sigma side [greek]
    python -m optiontrack.main --dry-run      # prints config and exits

Pass "-" for r to use the configured risk-free rate. Without a greek all
five are printed.

Environment variables:
    RISK_FREE_RATE          Default risk-free rate (default: 0.04)
    DAYS_PER_YEAR           Day count for DTE -> years (default: 365)
    EXPIRATION_TZ           Timezone for plain expiration dates (default: UTC)
"""

import os
import sys
from typing import List, Optional

from optiontrack.config import TrackerConfig
from optiontrack.pricing.models import GreeksResult, InvalidParameter
from optiontrack.pricing.request import GreeksRequest

USAGE_ERROR = 2


def _env_float(key: str, default: float) -> float:
    return float(os.getenv(key, str(default)))


def build_config() -> TrackerConfig:
    """Build TrackerConfig from environment variables.

    Only overrides TrackerConfig defaults when the env var is explicitly set.
    All defaults live in config.py as the single source of truth.
    """
    overrides = {}

    if os.getenv("RISK_FREE_RATE"):
        overrides["risk_free_rate"] = _env_float("RISK_FREE_RATE", 0.04)
    if os.getenv("DAYS_PER_YEAR"):
        overrides["days_per_year"] = _env_float("DAYS_PER_YEAR", 365.0)
    if os.getenv("EXPIRATION_TZ"):
        overrides["expiration_timezone"] = os.getenv("EXPIRATION_TZ")

    return TrackerConfig(**overrides)


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    dry_run = "--dry-run" in argv
    args = [a for a in argv if a != "--dry-run"]

    config = build_config()

    if dry_run:
        print("=" * 60)
        print("optiontrack greeks")
        print("=" * 60)
        print(f"  Risk-free rate:   {config.risk_free_rate:.4f}")
        print(f"  Days per year:    {config.days_per_year:g}")
        print(f"  Expiration TZ:    {config.expiration_timezone}")
        print("\n--dry-run: config looks good, exiting.")
        return 0

    if len(args) not in (6, 7):
        print(__doc__, file=sys.stderr)
        return USAGE_ERROR

    S, K, T, r, sigma, side = args[:6]
    kind = args[6] if len(args) == 7 else None
    if r == "-":
        r = config.risk_free_rate

    try:
        request = GreeksRequest.from_dict(
            {"S": S, "K": K, "T": T, "r": r, "sigma": sigma, "optionType": side}
        )
        result = request.compute(kind)
    except InvalidParameter as e:
        print(f"error: {e}", file=sys.stderr)
        return USAGE_ERROR

    print(
        f"{request.option_type.value.upper()}  S={request.S:g}  K={request.K:g}  "
        f"T={request.T:g}  r={request.r:g}  sigma={request.sigma:g}"
    )
    if isinstance(result, GreeksResult):
        for name, value in result.to_dict().items():
            print(f"  {name:<6} {value: .6f}")
    else:
        print(f"  {kind.lower():<6} {result: .6f}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
