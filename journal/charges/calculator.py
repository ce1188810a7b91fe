from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Optional, Type, TypeVar, Union

from journal.charges.profiles import BrokerChargeProfile
from journal.charges.schedules import Exchange, Segment, SttBase, CRORE, get_schedule
from journal.core.money import round_money
from journal.core.validation import InvalidInputError, require_positive, require_quantity


E = TypeVar("E", bound=Enum)


class Side(str, Enum):
    BUY = "BUY"
    SELL = "SELL"


@dataclass(frozen=True)
class ChargeBreakdown:
    brokerage: float
    stt: float
    exchange_charges: float
    gst: float
    sebi_charges: float
    stamp_duty: float
    total_charges: float

    def rounded(self) -> "ChargeBreakdown":
        """Two-decimal copy for display; totals are rounded from the exact sum."""
        return ChargeBreakdown(**{f.name: round_money(getattr(self, f.name)) for f in fields(self)})


@dataclass(frozen=True)
class NetPnlResult:
    gross_pnl: float
    net_pnl: float
    charges: ChargeBreakdown

    def rounded(self) -> "NetPnlResult":
        return replace(
            self,
            gross_pnl=round_money(self.gross_pnl),
            net_pnl=round_money(self.net_pnl),
            charges=self.charges.rounded(),
        )


@dataclass(frozen=True)
class TradeForCalculation:
    side: Side
    entry_price: float
    quantity: int
    exit_price: Optional[float] = None
    exchange: Exchange = Exchange.NSE
    segment: Segment = Segment.INTRADAY

    @property
    def is_open(self) -> bool:
        return self.exit_price is None


def _coerce_enum(enum_cls: Type[E], field: str, value: Union[str, E]) -> E:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().upper())
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise InvalidInputError(field, value, f"must be one of {allowed}") from None


def calculate_gross_pnl(
    side: Union[str, Side],
    entry_price: float,
    exit_price: float,
    quantity: int,
) -> float:
    """Raw P&L; SELL trades are shorts and profit when the price falls."""
    side = _coerce_enum(Side, "side", side)
    entry = require_positive("entry_price", entry_price)
    exit_ = require_positive("exit_price", exit_price)
    qty = require_quantity("quantity", quantity)
    if side is Side.BUY:
        return (exit_ - entry) * qty
    return (entry - exit_) * qty


def calculate_charges(
    entry_price: float,
    exit_price: float,
    quantity: int,
    exchange: Union[str, Exchange] = Exchange.NSE,
    charge_profile: Optional[BrokerChargeProfile] = None,
    segment: Union[str, Segment] = Segment.INTRADAY,
) -> ChargeBreakdown:
    """Brokerage plus statutory charges for one round trip (buy leg + sell leg).

    Components are left unrounded; call ``ChargeBreakdown.rounded`` for display.
    """
    entry = require_positive("entry_price", entry_price)
    exit_ = require_positive("exit_price", exit_price)
    qty = require_quantity("quantity", quantity)
    exchange = _coerce_enum(Exchange, "exchange", exchange)
    schedule = get_schedule(_coerce_enum(Segment, "segment", segment))
    profile = charge_profile or schedule.default_profile

    buy_value = entry * qty
    sell_value = exit_ * qty
    turnover = buy_value + sell_value

    brokerage = profile.brokerage(turnover)
    stt_base = sell_value if schedule.stt_base is SttBase.SELL else turnover
    stt = stt_base * schedule.stt_rate / 100
    exchange_charges = turnover * schedule.exchange_rate(exchange) / 100
    gst = (brokerage + exchange_charges) * schedule.gst_rate / 100
    sebi_charges = turnover * schedule.sebi_fee_per_crore / CRORE
    stamp_duty = buy_value * schedule.stamp_duty_rate / 100

    return ChargeBreakdown(
        brokerage=brokerage,
        stt=stt,
        exchange_charges=exchange_charges,
        gst=gst,
        sebi_charges=sebi_charges,
        stamp_duty=stamp_duty,
        total_charges=brokerage + stt + exchange_charges + gst + sebi_charges + stamp_duty,
    )


def calculate_net_pnl(
    side: Union[str, Side],
    entry_price: float,
    exit_price: float,
    quantity: int,
    exchange: Union[str, Exchange] = Exchange.NSE,
    charge_profile: Optional[BrokerChargeProfile] = None,
    segment: Union[str, Segment] = Segment.INTRADAY,
) -> NetPnlResult:
    gross_pnl = calculate_gross_pnl(side, entry_price, exit_price, quantity)
    charges = calculate_charges(entry_price, exit_price, quantity, exchange, charge_profile, segment)
    return NetPnlResult(
        gross_pnl=gross_pnl,
        net_pnl=gross_pnl - charges.total_charges,
        charges=charges,
    )


def calculate_delivery_charges(
    buy_price: float,
    sell_price: float,
    quantity: int,
    exchange: Union[str, Exchange] = Exchange.NSE,
    charge_profile: Optional[BrokerChargeProfile] = None,
) -> ChargeBreakdown:
    """Charges for a delivery (CNC) holding bought and later sold."""
    return calculate_charges(buy_price, sell_price, quantity, exchange, charge_profile, Segment.DELIVERY)


def pnl_for_trade(
    trade: TradeForCalculation,
    charge_profile: Optional[BrokerChargeProfile] = None,
) -> Optional[NetPnlResult]:
    """Net P&L for a closed trade; open trades have none."""
    if trade.is_open:
        return None
    return calculate_net_pnl(
        trade.side,
        trade.entry_price,
        trade.exit_price,
        trade.quantity,
        trade.exchange,
        charge_profile,
        trade.segment,
    )


def format_inr(amount: float) -> str:
    """Format as rupees with Indian digit grouping, e.g. ₹12,34,567.89."""
    magnitude = round_money(abs(amount))
    sign = "-" if amount < 0 and magnitude > 0 else ""
    whole, fraction = f"{magnitude:.2f}".split(".")
    if len(whole) > 3:
        head, tail = whole[:-3], whole[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        whole = ",".join(groups + [tail])
    return f"{sign}₹{whole}.{fraction}"
