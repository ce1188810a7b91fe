import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from journal.core.outcome import Degenerate, Ok, Outcome, unwrap_or
from journal.core.validation import require_finite, require_non_negative, require_positive, require_quantity


DEFAULT_MAX_CAPITAL_PER_TRADE_PCT = 10.0


@dataclass(frozen=True)
class RiskCalculation:
    position_size: int
    capital_required: float
    max_loss: float
    potential_profit: float
    risk_reward_ratio: float
    capital_percentage: float
    risk_percentage: float

    @classmethod
    def zero(cls) -> "RiskCalculation":
        return cls(0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0)


@dataclass(frozen=True)
class RiskReward:
    risk_reward_ratio: float
    max_loss: float
    potential_profit: float
    risk_per_share: float
    reward_per_share: float


class RecommendationConstraint(str, Enum):
    DAILY_LOSS_LIMIT_REACHED = "DAILY_LOSS_LIMIT_REACHED"
    NO_STOP_DISTANCE = "NO_STOP_DISTANCE"
    RISK_BUDGET = "RISK_BUDGET"
    CAPITAL_CAP = "CAPITAL_CAP"


@dataclass(frozen=True)
class PositionRecommendation:
    recommended_qty: int
    max_qty: int
    constraint: RecommendationConstraint
    reason: str

    @property
    def blocked(self) -> bool:
        return self.recommended_qty == 0


def evaluate_position_size(
    capital: float,
    risk_percentage: float,
    entry_price: float,
    stop_loss_price: float,
    target_price: Optional[float] = None,
) -> Outcome[RiskCalculation]:
    """Size a position so that hitting the stop loses at most ``risk_percentage`` of capital.

    Shares are whole units and the size is floored, so the realised max loss
    never exceeds the risk budget. Entry equal to stop has no risk boundary
    and yields ``Degenerate``.
    """
    capital = require_non_negative("capital", capital)
    risk_percentage = require_non_negative("risk_percentage", risk_percentage)
    entry_price = require_positive("entry_price", entry_price)
    stop_loss_price = require_positive("stop_loss_price", stop_loss_price)
    if target_price is not None:
        target_price = require_positive("target_price", target_price)

    risk_per_share = abs(entry_price - stop_loss_price)
    if risk_per_share <= 0:
        return Degenerate("entry price equals stop-loss price")

    max_risk_amount = capital * (risk_percentage / 100)
    position_size = math.floor(max_risk_amount / risk_per_share)
    capital_required = position_size * entry_price
    max_loss = position_size * risk_per_share

    potential_profit = 0.0
    risk_reward_ratio = 0.0
    if target_price is not None:
        reward_per_share = abs(target_price - entry_price)
        potential_profit = position_size * reward_per_share
        risk_reward_ratio = reward_per_share / risk_per_share

    return Ok(
        RiskCalculation(
            position_size=position_size,
            capital_required=capital_required,
            max_loss=max_loss,
            potential_profit=potential_profit,
            risk_reward_ratio=risk_reward_ratio,
            capital_percentage=(capital_required / capital) * 100 if capital > 0 else 0.0,
            risk_percentage=(max_loss / capital) * 100 if capital > 0 else 0.0,
        )
    )


def calculate_position_size(
    capital: float,
    risk_percentage: float,
    entry_price: float,
    stop_loss_price: float,
    target_price: Optional[float] = None,
) -> RiskCalculation:
    """Like ``evaluate_position_size`` but a degenerate input gives the all-zero result."""
    outcome = evaluate_position_size(capital, risk_percentage, entry_price, stop_loss_price, target_price)
    return unwrap_or(outcome, RiskCalculation.zero())


def calculate_risk_reward(
    entry_price: float,
    target_price: float,
    stop_loss_price: float,
    quantity: int,
) -> RiskReward:
    entry_price = require_positive("entry_price", entry_price)
    target_price = require_positive("target_price", target_price)
    stop_loss_price = require_positive("stop_loss_price", stop_loss_price)
    quantity = require_quantity("quantity", quantity)

    risk_per_share = abs(entry_price - stop_loss_price)
    reward_per_share = abs(target_price - entry_price)
    return RiskReward(
        risk_reward_ratio=reward_per_share / risk_per_share if risk_per_share > 0 else 0.0,
        max_loss=risk_per_share * quantity,
        potential_profit=reward_per_share * quantity,
        risk_per_share=risk_per_share,
        reward_per_share=reward_per_share,
    )


def get_position_size_recommendation(
    capital: float,
    daily_loss_limit: float,
    current_day_loss: float,
    entry_price: float,
    stop_loss_price: float,
    max_capital_pct: float = DEFAULT_MAX_CAPITAL_PER_TRADE_PCT,
) -> PositionRecommendation:
    """Quantity for the next trade given what is left of today's loss budget.

    Once the day's losses reach the limit nothing further is recommended.
    Otherwise the quantity is the smaller of the risk-budget size and the
    per-trade capital cap.
    """
    capital = require_non_negative("capital", capital)
    daily_loss_limit = require_non_negative("daily_loss_limit", daily_loss_limit)
    current_day_loss = require_finite("current_day_loss", current_day_loss)
    entry_price = require_positive("entry_price", entry_price)
    stop_loss_price = require_positive("stop_loss_price", stop_loss_price)
    max_capital_pct = require_positive("max_capital_pct", max_capital_pct)

    remaining_risk = daily_loss_limit - abs(current_day_loss)
    if remaining_risk <= 0:
        return PositionRecommendation(
            recommended_qty=0,
            max_qty=0,
            constraint=RecommendationConstraint.DAILY_LOSS_LIMIT_REACHED,
            reason="You have already hit your daily loss limit. No more trades recommended today.",
        )

    risk_per_share = abs(entry_price - stop_loss_price)
    if risk_per_share <= 0:
        return PositionRecommendation(
            recommended_qty=0,
            max_qty=0,
            constraint=RecommendationConstraint.NO_STOP_DISTANCE,
            reason="Entry and stop-loss prices must be different.",
        )

    max_qty = math.floor(remaining_risk / risk_per_share)
    max_by_capital = math.floor(capital * (max_capital_pct / 100) / entry_price)
    recommended_qty = min(max_qty, max_by_capital)

    reason = f"Based on Rs{remaining_risk:.0f} remaining risk today"
    if recommended_qty < max_qty:
        constraint = RecommendationConstraint.CAPITAL_CAP
        reason += f" (capped at {max_capital_pct:g}% of capital)"
    else:
        constraint = RecommendationConstraint.RISK_BUDGET
    return PositionRecommendation(
        recommended_qty=recommended_qty,
        max_qty=max_qty,
        constraint=constraint,
        reason=reason,
    )
