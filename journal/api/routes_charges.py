from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter

from journal.api.errors import error_response, validation_error_response
from journal.charges.calculator import calculate_delivery_charges, calculate_net_pnl
from journal.charges.profiles import BrokerChargeProfile, get_charge_profile_for_broker, list_supported_brokers
from journal.core.config import get_settings
from journal.core.logging import get_logger
from journal.trading.schemas import (
    BrokerProfileResponse,
    ChargeBreakdownResponse,
    DeliveryChargesRequest,
    ErrorResponse,
    NetPnlRequest,
    NetPnlResponse,
)

router = APIRouter(prefix="/api/charges", tags=["charges"])
logger = get_logger(__name__)


def _resolve_profile(explicit, broker: Optional[str]) -> Optional[BrokerChargeProfile]:
    """Explicit profile wins, then the named broker, then the configured default broker."""
    if explicit is not None:
        return explicit.to_profile()
    broker_name = broker or get_settings().default_broker
    if broker_name:
        return get_charge_profile_for_broker(broker_name)
    return None


@router.get("/brokers", response_model=list[BrokerProfileResponse])
async def list_brokers():
    """Return the brokerage schedule for every known broker."""
    return [
        BrokerProfileResponse(broker=name, **asdict(get_charge_profile_for_broker(name)))
        for name in list_supported_brokers()
    ]


@router.post(
    "/net-pnl",
    response_model=NetPnlResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def net_pnl(request: NetPnlRequest):
    """Gross/net P&L and charge breakdown for a trade. Open trades return no P&L."""
    if request.exit_price is None:
        return NetPnlResponse(status="OPEN")
    exchange = request.exchange or get_settings().default_exchange
    try:
        profile = _resolve_profile(request.charge_profile, request.broker)
        result = calculate_net_pnl(
            request.side,
            request.entry_price,
            request.exit_price,
            request.quantity,
            exchange,
            profile,
            request.segment,
        ).rounded()
    except ValueError as exc:
        logger.warning(
            "charge_validation_failed",
            extra={"event": "charge_validation_failed", "error": str(exc)},
        )
        return validation_error_response(exc)
    except Exception:
        logger.exception("net_pnl_failed", extra={"event": "net_pnl_failed"})
        return error_response(status_code=500, code="unexpected_error", detail="Unexpected error. Check server logs.")
    return NetPnlResponse(
        status="CLOSED",
        gross_pnl=result.gross_pnl,
        net_pnl=result.net_pnl,
        charges=ChargeBreakdownResponse(**asdict(result.charges)),
    )


@router.post(
    "/delivery",
    response_model=ChargeBreakdownResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def delivery_charges(request: DeliveryChargesRequest):
    """Charge breakdown for selling a delivery holding."""
    exchange = request.exchange or get_settings().default_exchange
    try:
        profile = _resolve_profile(None, request.broker)
        charges = calculate_delivery_charges(
            request.buy_price,
            request.sell_price,
            request.quantity,
            exchange,
            profile,
        ).rounded()
    except ValueError as exc:
        logger.warning(
            "charge_validation_failed",
            extra={"event": "charge_validation_failed", "error": str(exc)},
        )
        return validation_error_response(exc)
    except Exception:
        logger.exception("delivery_charges_failed", extra={"event": "delivery_charges_failed"})
        return error_response(status_code=500, code="unexpected_error", detail="Unexpected error. Check server logs.")
    return ChargeBreakdownResponse(**asdict(charges))
