from dataclasses import dataclass
from typing import Dict, List, Literal, Union

from journal.core.validation import require_non_negative, require_positive


@dataclass(frozen=True)
class FlatChargeProfile:
    """Fixed brokerage per executed order."""

    flat_fee: float
    kind: Literal["flat"] = "flat"

    def __post_init__(self) -> None:
        require_non_negative("flat_fee", self.flat_fee)

    def brokerage(self, turnover: float) -> float:
        return self.flat_fee * 2


@dataclass(frozen=True)
class PercentageChargeProfile:
    """Brokerage as a percentage of turnover, capped per order.

    ``percentage`` is expressed in percent points: 0.275 means 0.275%.
    """

    percentage: float
    max_brokerage: float
    kind: Literal["percentage"] = "percentage"

    def __post_init__(self) -> None:
        require_non_negative("percentage", self.percentage)
        require_positive("max_brokerage", self.max_brokerage)

    def brokerage(self, turnover: float) -> float:
        return min(turnover * self.percentage / 100, self.max_brokerage * 2)


BrokerChargeProfile = Union[FlatChargeProfile, PercentageChargeProfile]

DEFAULT_CHARGE_PROFILE: BrokerChargeProfile = FlatChargeProfile(flat_fee=20)

_BROKER_PROFILES: Dict[str, BrokerChargeProfile] = {
    "Zerodha": FlatChargeProfile(flat_fee=20),
    "Groww": FlatChargeProfile(flat_fee=20),
    "Angel One": FlatChargeProfile(flat_fee=20),
    "Upstox": FlatChargeProfile(flat_fee=20),
    "ICICI Direct": PercentageChargeProfile(percentage=0.275, max_brokerage=9999),
    "HDFC Securities": PercentageChargeProfile(percentage=0.5, max_brokerage=9999),
}
_PROFILES_BY_KEY = {name.casefold(): profile for name, profile in _BROKER_PROFILES.items()}


def get_charge_profile_for_broker(broker_name: str) -> BrokerChargeProfile:
    """Resolve a broker's fee schedule; unknown brokers get the default flat profile."""
    key = (broker_name or "").strip().casefold()
    return _PROFILES_BY_KEY.get(key, DEFAULT_CHARGE_PROFILE)


def list_supported_brokers() -> List[str]:
    return list(_BROKER_PROFILES)
