from dataclasses import asdict

from fastapi import APIRouter

from journal.analytics.trade_stats import return_percentage, summarize_trades
from journal.api.errors import validation_error_response
from journal.core.logging import get_logger
from journal.core.money import round_money
from journal.core.outcome import Degenerate
from journal.trading.schemas import ErrorResponse, ReturnRequest, ReturnResponse, TradeStatsRequest, TradeStatsResponse

router = APIRouter(prefix="/api/analytics", tags=["analytics"])
logger = get_logger(__name__)

_MONEY_FIELDS = ("total_net_pnl", "avg_win", "avg_loss", "biggest_win", "biggest_loss", "risk_reward_ratio")


@router.post(
    "/stats",
    response_model=TradeStatsResponse,
    responses={400: {"model": ErrorResponse}},
)
async def trade_stats(request: TradeStatsRequest):
    """Win rate and P&L aggregates over closed trades (null entries are open trades)."""
    try:
        stats = summarize_trades(request.net_pnls)
    except ValueError as exc:
        return validation_error_response(exc)
    payload = asdict(stats)
    for key in _MONEY_FIELDS:
        payload[key] = round_money(payload[key])
    return TradeStatsResponse(**payload)


@router.post(
    "/return",
    response_model=ReturnResponse,
    responses={400: {"model": ErrorResponse}},
)
async def holding_return(request: ReturnRequest):
    try:
        outcome = return_percentage(request.current_value, request.invested)
    except ValueError as exc:
        return validation_error_response(exc)
    if isinstance(outcome, Degenerate):
        return ReturnResponse(degenerate=True, reason=outcome.reason)
    return ReturnResponse(return_pct=outcome.value)
