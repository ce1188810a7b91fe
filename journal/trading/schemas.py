from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator

from journal.charges.calculator import Side
from journal.charges.profiles import BrokerChargeProfile, FlatChargeProfile, PercentageChargeProfile
from journal.charges.schedules import Exchange, Segment
from journal.risk.risk_engine import RecommendationConstraint


def _upper(value):
    return value.strip().upper() if isinstance(value, str) else value


class FlatProfileInput(BaseModel):
    kind: Literal["flat"]
    flat_fee: float = Field(..., ge=0)

    def to_profile(self) -> BrokerChargeProfile:
        return FlatChargeProfile(flat_fee=self.flat_fee)


class PercentageProfileInput(BaseModel):
    kind: Literal["percentage"]
    percentage: float = Field(..., ge=0)
    max_brokerage: float = Field(..., gt=0)

    def to_profile(self) -> BrokerChargeProfile:
        return PercentageChargeProfile(percentage=self.percentage, max_brokerage=self.max_brokerage)


ChargeProfileInput = Annotated[Union[FlatProfileInput, PercentageProfileInput], Field(discriminator="kind")]


class NetPnlRequest(BaseModel):
    side: Side
    entry_price: float = Field(..., gt=0)
    exit_price: Optional[float] = Field(None, gt=0)
    quantity: int = Field(..., gt=0)
    exchange: Optional[Exchange] = None
    segment: Segment = Segment.INTRADAY
    broker: Optional[str] = None
    charge_profile: Optional[ChargeProfileInput] = None

    @field_validator("side", "exchange", "segment", mode="before")
    @classmethod
    def normalize_case(cls, value):
        return _upper(value)


class ChargeBreakdownResponse(BaseModel):
    brokerage: float
    stt: float
    exchange_charges: float
    gst: float
    sebi_charges: float
    stamp_duty: float
    total_charges: float


class NetPnlResponse(BaseModel):
    status: Literal["OPEN", "CLOSED"]
    gross_pnl: Optional[float] = None
    net_pnl: Optional[float] = None
    charges: Optional[ChargeBreakdownResponse] = None


class DeliveryChargesRequest(BaseModel):
    buy_price: float = Field(..., gt=0)
    sell_price: float = Field(..., gt=0)
    quantity: int = Field(..., gt=0)
    exchange: Optional[Exchange] = None
    broker: Optional[str] = None

    @field_validator("exchange", mode="before")
    @classmethod
    def normalize_case(cls, value):
        return _upper(value)


class BrokerProfileResponse(BaseModel):
    broker: str
    kind: Literal["flat", "percentage"]
    flat_fee: Optional[float] = None
    percentage: Optional[float] = None
    max_brokerage: Optional[float] = None


class PositionSizeRequest(BaseModel):
    capital: float = Field(..., ge=0)
    risk_percentage: float = Field(..., ge=0)
    entry_price: float = Field(..., gt=0)
    stop_loss_price: float = Field(..., gt=0)
    target_price: Optional[float] = Field(None, gt=0)


class RiskCalculationResponse(BaseModel):
    position_size: int
    capital_required: float
    max_loss: float
    potential_profit: float
    risk_reward_ratio: float
    capital_percentage: float
    risk_percentage: float
    degenerate: bool = False
    warnings: List[str] = []


class RiskRewardRequest(BaseModel):
    entry_price: float = Field(..., gt=0)
    target_price: float = Field(..., gt=0)
    stop_loss_price: float = Field(..., gt=0)
    quantity: int = Field(..., gt=0)


class RiskRewardResponse(BaseModel):
    risk_reward_ratio: float
    max_loss: float
    potential_profit: float
    risk_per_share: float
    reward_per_share: float


class RecommendationRequest(BaseModel):
    capital: float = Field(..., ge=0)
    daily_loss_limit: float = Field(..., ge=0)
    current_day_loss: float = 0.0
    entry_price: float = Field(..., gt=0)
    stop_loss_price: float = Field(..., gt=0)


class RecommendationResponse(BaseModel):
    recommended_qty: int
    max_qty: int
    constraint: RecommendationConstraint
    reason: str


class TradeStatsRequest(BaseModel):
    net_pnls: List[Optional[float]] = []


class TradeStatsResponse(BaseModel):
    total_trades: int
    winners: int
    losers: int
    win_rate: int
    total_net_pnl: float
    avg_win: float
    avg_loss: float
    biggest_win: float
    biggest_loss: float
    risk_reward_ratio: float


class ReturnRequest(BaseModel):
    current_value: float
    invested: float = Field(..., ge=0)


class ReturnResponse(BaseModel):
    return_pct: Optional[float] = None
    degenerate: bool = False
    reason: Optional[str] = None


class MarketStatusResponse(BaseModel):
    is_open: bool
    message: str
    next_event: str


class MutualFundSchemeResponse(BaseModel):
    scheme_code: str
    scheme_name: str


class NavResponse(BaseModel):
    scheme_code: str
    nav: float
    date: str
    source: Literal["api", "cache", "stale_cache"]


class ErrorResponse(BaseModel):
    error: str
    detail: str
    context: Optional[dict] = None
