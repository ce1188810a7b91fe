from dataclasses import asdict

from fastapi import APIRouter

from journal.api.errors import error_response, validation_error_response
from journal.core.config import get_settings
from journal.core.logging import get_logger
from journal.core.money import round_money
from journal.core.outcome import Degenerate
from journal.risk.risk_engine import (
    RiskCalculation,
    calculate_risk_reward,
    evaluate_position_size,
    get_position_size_recommendation,
)
from journal.trading.schemas import (
    ErrorResponse,
    PositionSizeRequest,
    RecommendationRequest,
    RecommendationResponse,
    RiskCalculationResponse,
    RiskRewardRequest,
    RiskRewardResponse,
)

router = APIRouter(prefix="/api/risk", tags=["risk"])
logger = get_logger(__name__)


def _rounded_payload(calc: RiskCalculation) -> dict:
    payload = asdict(calc)
    for key in ("capital_required", "max_loss", "potential_profit", "risk_reward_ratio", "capital_percentage", "risk_percentage"):
        payload[key] = round_money(payload[key])
    return payload


@router.post(
    "/position-size",
    response_model=RiskCalculationResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def position_size(request: PositionSizeRequest):
    """Shares to buy so a stop-out loses at most risk_percentage of capital."""
    try:
        outcome = evaluate_position_size(
            request.capital,
            request.risk_percentage,
            request.entry_price,
            request.stop_loss_price,
            request.target_price,
        )
    except ValueError as exc:
        logger.warning("risk_validation_failed", extra={"event": "risk_validation_failed", "error": str(exc)})
        return validation_error_response(exc)
    except Exception:
        logger.exception("position_size_failed", extra={"event": "position_size_failed"})
        return error_response(status_code=500, code="unexpected_error", detail="Unexpected error. Check server logs.")

    if isinstance(outcome, Degenerate):
        return RiskCalculationResponse(
            **asdict(RiskCalculation.zero()),
            degenerate=True,
            warnings=[outcome.reason],
        )
    return RiskCalculationResponse(**_rounded_payload(outcome.value))


@router.post(
    "/risk-reward",
    response_model=RiskRewardResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def risk_reward(request: RiskRewardRequest):
    try:
        result = calculate_risk_reward(
            request.entry_price,
            request.target_price,
            request.stop_loss_price,
            request.quantity,
        )
    except ValueError as exc:
        logger.warning("risk_validation_failed", extra={"event": "risk_validation_failed", "error": str(exc)})
        return validation_error_response(exc)
    except Exception:
        logger.exception("risk_reward_failed", extra={"event": "risk_reward_failed"})
        return error_response(status_code=500, code="unexpected_error", detail="Unexpected error. Check server logs.")
    return RiskRewardResponse(**{key: round_money(value) for key, value in asdict(result).items()})


@router.post(
    "/recommendation",
    response_model=RecommendationResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def recommendation(request: RecommendationRequest):
    """Quantity for the next trade under today's loss limit and the per-trade capital cap."""
    settings = get_settings()
    try:
        result = get_position_size_recommendation(
            request.capital,
            request.daily_loss_limit,
            request.current_day_loss,
            request.entry_price,
            request.stop_loss_price,
            max_capital_pct=settings.max_capital_per_trade_pct,
        )
    except ValueError as exc:
        logger.warning("risk_validation_failed", extra={"event": "risk_validation_failed", "error": str(exc)})
        return validation_error_response(exc)
    except Exception:
        logger.exception("recommendation_failed", extra={"event": "recommendation_failed"})
        return error_response(status_code=500, code="unexpected_error", detail="Unexpected error. Check server logs.")

    if result.blocked:
        logger.info(
            "position_recommendation_blocked",
            extra={"event": "position_recommendation_blocked", "constraint": result.constraint.value},
        )
    return RecommendationResponse(**asdict(result))
