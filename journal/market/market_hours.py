from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone
from typing import Optional


IST = timezone(timedelta(hours=5, minutes=30), name="IST")
MARKET_OPEN = time(9, 15)
MARKET_CLOSE = time(15, 30)

_OPENS_MONDAY = "Opens Monday 9:15 AM"
_OPENS_TOMORROW = "Opens tomorrow 9:15 AM"


@dataclass(frozen=True)
class MarketStatus:
    is_open: bool
    message: str
    next_event: str


def to_ist(at: Optional[datetime] = None) -> datetime:
    """Convert to IST; naive datetimes are taken as UTC."""
    if at is None:
        at = datetime.now(timezone.utc)
    elif at.tzinfo is None:
        at = at.replace(tzinfo=timezone.utc)
    return at.astimezone(IST)


def ist_midnight(at: Optional[datetime] = None) -> datetime:
    """Start of the IST trading day containing ``at``, expressed in UTC."""
    ist = to_ist(at)
    return ist.replace(hour=0, minute=0, second=0, microsecond=0).astimezone(timezone.utc)


def is_market_day(at: Optional[datetime] = None) -> bool:
    return to_ist(at).weekday() < 5


def _minutes(value: time) -> int:
    return value.hour * 60 + value.minute


def is_market_open(at: Optional[datetime] = None) -> bool:
    ist = to_ist(at)
    if ist.weekday() >= 5:
        return False
    now = _minutes(ist.time())
    return _minutes(MARKET_OPEN) <= now <= _minutes(MARKET_CLOSE)


def _countdown(minutes: int) -> str:
    hours, mins = divmod(minutes, 60)
    return f"{hours}h {mins}m" if hours > 0 else f"{mins}m"


def get_market_status(at: Optional[datetime] = None) -> MarketStatus:
    ist = to_ist(at)
    weekday = ist.weekday()
    now = _minutes(ist.time())
    open_at = _minutes(MARKET_OPEN)
    close_at = _minutes(MARKET_CLOSE)

    if weekday >= 5:
        next_event = _OPENS_MONDAY if weekday == 5 else _OPENS_TOMORROW
        return MarketStatus(False, "Market Closed", next_event)
    if now < open_at:
        return MarketStatus(False, "Market Closed", f"Opens in {_countdown(open_at - now)}")
    if now > close_at:
        next_event = _OPENS_MONDAY if weekday == 4 else _OPENS_TOMORROW
        return MarketStatus(False, "Market Closed", next_event)
    return MarketStatus(True, "Market Open", f"Closes in {_countdown(close_at - now)}")
