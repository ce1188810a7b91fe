import math
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from journal.core.outcome import Degenerate, Ok  # noqa: E402
from journal.core.validation import InvalidInputError  # noqa: E402
from journal.risk.risk_engine import (  # noqa: E402
    RecommendationConstraint,
    RiskCalculation,
    calculate_position_size,
    calculate_risk_reward,
    evaluate_position_size,
    get_position_size_recommendation,
)


def test_long_sizing_basic():
    result = calculate_position_size(capital=100000, risk_percentage=1, entry_price=100, stop_loss_price=95)
    assert isinstance(result, RiskCalculation)
    assert result.position_size == 200  # 1000 risk / 5 per share
    assert math.isclose(result.capital_required, 20000)
    assert math.isclose(result.max_loss, 1000)
    assert math.isclose(result.capital_percentage, 20)
    assert math.isclose(result.risk_percentage, 1)
    assert result.potential_profit == 0
    assert result.risk_reward_ratio == 0


def test_short_sizing_uses_absolute_distance():
    result = calculate_position_size(capital=100000, risk_percentage=1, entry_price=95, stop_loss_price=100)
    assert result.position_size == 200
    assert math.isclose(result.max_loss, 1000)


def test_size_rounds_down_within_budget():
    result = calculate_position_size(capital=10000, risk_percentage=1, entry_price=100, stop_loss_price=97)
    # 100 / 3 = 33.3 shares
    assert result.position_size == 33
    assert result.max_loss <= 100


def test_target_adds_reward_figures():
    result = calculate_position_size(
        capital=100000,
        risk_percentage=1,
        entry_price=100,
        stop_loss_price=95,
        target_price=115,
    )
    assert math.isclose(result.potential_profit, 3000)
    assert math.isclose(result.risk_reward_ratio, 3)


def test_stop_equals_entry_is_degenerate():
    outcome = evaluate_position_size(capital=100000, risk_percentage=1, entry_price=100, stop_loss_price=100)
    assert isinstance(outcome, Degenerate)
    assert calculate_position_size(100000, 1, 100, 100) == RiskCalculation.zero()


def test_evaluate_returns_ok():
    outcome = evaluate_position_size(50000, 2, 250, 240)
    assert isinstance(outcome, Ok)
    assert outcome.value.position_size == 100


def test_zero_capital_gives_zero_percentages():
    result = calculate_position_size(capital=0, risk_percentage=1, entry_price=100, stop_loss_price=95)
    assert result.position_size == 0
    assert result.capital_percentage == 0
    assert result.risk_percentage == 0


@pytest.mark.parametrize(
    "kwargs",
    [
        {"capital": -1},
        {"capital": float("nan")},
        {"risk_percentage": -0.5},
        {"entry_price": 0},
        {"stop_loss_price": float("inf")},
    ],
)
def test_position_size_rejects_malformed_input(kwargs):
    params = {"capital": 100000, "risk_percentage": 1, "entry_price": 100, "stop_loss_price": 95}
    params.update(kwargs)
    with pytest.raises(InvalidInputError):
        calculate_position_size(**params)


def test_risk_reward():
    result = calculate_risk_reward(entry_price=100, target_price=110, stop_loss_price=95, quantity=10)
    assert math.isclose(result.risk_reward_ratio, 2)
    assert math.isclose(result.max_loss, 50)
    assert math.isclose(result.potential_profit, 100)
    assert result.risk_per_share == 5
    assert result.reward_per_share == 10


def test_risk_reward_without_stop_distance():
    result = calculate_risk_reward(entry_price=100, target_price=110, stop_loss_price=100, quantity=10)
    assert result.risk_reward_ratio == 0
    assert result.max_loss == 0
    assert math.isclose(result.potential_profit, 100)


def test_recommendation_blocked_after_loss_limit():
    result = get_position_size_recommendation(
        capital=100000,
        daily_loss_limit=2000,
        current_day_loss=2500,
        entry_price=100,
        stop_loss_price=95,
    )
    assert result.recommended_qty == 0
    assert result.max_qty == 0
    assert result.blocked
    assert result.constraint is RecommendationConstraint.DAILY_LOSS_LIMIT_REACHED
    assert result.reason


def test_recommendation_treats_signed_loss_as_magnitude():
    result = get_position_size_recommendation(
        capital=100000,
        daily_loss_limit=2000,
        current_day_loss=-2000,
        entry_price=100,
        stop_loss_price=95,
    )
    assert result.constraint is RecommendationConstraint.DAILY_LOSS_LIMIT_REACHED


def test_recommendation_capped_by_capital():
    result = get_position_size_recommendation(
        capital=100000,
        daily_loss_limit=2000,
        current_day_loss=500,
        entry_price=100,
        stop_loss_price=95,
    )
    assert result.max_qty == 300  # 1500 remaining / 5 per share
    assert result.recommended_qty == 100  # 10% of capital at 100/share
    assert result.constraint is RecommendationConstraint.CAPITAL_CAP
    assert result.reason == "Based on Rs1500 remaining risk today (capped at 10% of capital)"


def test_recommendation_bound_by_risk_budget():
    result = get_position_size_recommendation(
        capital=1000000,
        daily_loss_limit=2000,
        current_day_loss=0,
        entry_price=100,
        stop_loss_price=95,
    )
    assert result.recommended_qty == result.max_qty == 400
    assert result.constraint is RecommendationConstraint.RISK_BUDGET
    assert "capped" not in result.reason


def test_recommendation_custom_capital_cap():
    result = get_position_size_recommendation(
        capital=100000,
        daily_loss_limit=2000,
        current_day_loss=0,
        entry_price=100,
        stop_loss_price=95,
        max_capital_pct=25,
    )
    assert result.recommended_qty == 250
    assert "25%" in result.reason


def test_recommendation_without_stop_distance():
    result = get_position_size_recommendation(
        capital=100000,
        daily_loss_limit=2000,
        current_day_loss=0,
        entry_price=100,
        stop_loss_price=100,
    )
    assert result.recommended_qty == 0
    assert result.constraint is RecommendationConstraint.NO_STOP_DISTANCE
