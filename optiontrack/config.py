"""Central configuration for the option tracker core."""

from dataclasses import dataclass

import pytz


@dataclass
class TrackerConfig:
    """Central configuration for pricing and position enrichment. All parameters in one place."""

    # ==================== GREEKS ENGINE ====================
    risk_free_rate: float = 0.04       # annualized, continuously compounded
    days_per_year: float = 365.0       # DTE -> T conversion

    # ==================== EXPIRATION CLOCK ====================
    expiration_timezone: str = "UTC"   # plain dates expire at midnight here

    # ==================== ASSIGNMENT HEURISTIC ====================
    near_expiry_days: int = 7
    far_expiry_days: int = 30

    # ITM and within near_expiry_days: base + (near_expiry_days - dte) * step, capped
    near_expiry_base: float = 0.1
    near_expiry_step: float = 0.1
    near_expiry_cap: float = 0.8

    # ITM further out
    itm_far_probability: float = 0.1   # dte > far_expiry_days
    itm_near_probability: float = 0.3
    itm_cap: float = 0.5

    # OTM
    otm_near_probability: float = 0.2  # dte <= near_expiry_days
    otm_far_probability: float = 0.1
    otm_floor: float = 0.05

    @property
    def tzinfo(self):
        """Resolved expiration timezone."""
        return pytz.timezone(self.expiration_timezone)

    def get_assignment_probability(self, days_to_expiration: int, in_the_money: bool) -> float:
        """Bucketed assignment estimate. Near-expiry ITM is checked first."""
        if days_to_expiration <= self.near_expiry_days and in_the_money:
            return min(
                self.near_expiry_cap,
                self.near_expiry_base
                + (self.near_expiry_days - days_to_expiration) * self.near_expiry_step,
            )
        if in_the_money:
            tier = (
                self.itm_far_probability
                if days_to_expiration > self.far_expiry_days
                else self.itm_near_probability
            )
            return min(self.itm_cap, tier)
        tier = (
            self.otm_near_probability
            if days_to_expiration <= self.near_expiry_days
            else self.otm_far_probability
        )
        return max(self.otm_floor, tier)
