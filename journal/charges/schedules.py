"""Statutory fee schedules per trading segment.

Rates are in percent points unless the name says otherwise. Intraday and
delivery equity differ in STT base/rate and stamp duty; exchange, SEBI and
GST rules are shared.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping

from journal.charges.profiles import DEFAULT_CHARGE_PROFILE, BrokerChargeProfile


class Exchange(str, Enum):
    NSE = "NSE"
    BSE = "BSE"


class Segment(str, Enum):
    INTRADAY = "INTRADAY"
    DELIVERY = "DELIVERY"


class SttBase(str, Enum):
    SELL = "SELL"
    TURNOVER = "TURNOVER"


EXCHANGE_TXN_RATES: Mapping[Exchange, float] = {
    Exchange.NSE: 0.00297,
    Exchange.BSE: 0.00375,
}

SEBI_FEE_PER_CRORE = 10.0
CRORE = 10_000_000
GST_RATE = 18.0


@dataclass(frozen=True)
class SegmentSchedule:
    segment: Segment
    stt_rate: float
    stt_base: SttBase
    stamp_duty_rate: float
    default_profile: BrokerChargeProfile
    exchange_rates: Mapping[Exchange, float] = field(default_factory=lambda: dict(EXCHANGE_TXN_RATES))
    sebi_fee_per_crore: float = SEBI_FEE_PER_CRORE
    gst_rate: float = GST_RATE

    def exchange_rate(self, exchange: Exchange) -> float:
        return self.exchange_rates[exchange]


SEGMENT_SCHEDULES: Mapping[Segment, SegmentSchedule] = {
    Segment.INTRADAY: SegmentSchedule(
        segment=Segment.INTRADAY,
        stt_rate=0.025,
        stt_base=SttBase.SELL,
        stamp_duty_rate=0.003,
        default_profile=DEFAULT_CHARGE_PROFILE,
    ),
    Segment.DELIVERY: SegmentSchedule(
        segment=Segment.DELIVERY,
        stt_rate=0.1,
        stt_base=SttBase.TURNOVER,
        stamp_duty_rate=0.015,
        default_profile=DEFAULT_CHARGE_PROFILE,
    ),
}


def get_schedule(segment: Segment) -> SegmentSchedule:
    return SEGMENT_SCHEDULES[segment]
