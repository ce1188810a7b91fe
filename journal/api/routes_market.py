from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, Query

from journal.api.errors import error_response, validation_error_response
from journal.core.logging import get_logger
from journal.market.market_hours import get_market_status
from journal.market.mf_directory import MutualFundDirectory
from journal.trading.schemas import ErrorResponse, MarketStatusResponse, MutualFundSchemeResponse, NavResponse

router = APIRouter(prefix="/api/market", tags=["market"])

_directory: MutualFundDirectory | None = None
logger = get_logger(__name__)


def configure_mf_directory(directory: MutualFundDirectory) -> None:
    global _directory
    _directory = directory


def get_mf_directory() -> MutualFundDirectory:
    if _directory is None:
        raise HTTPException(status_code=500, detail="Mutual fund directory not configured")
    return _directory


@router.get("/status", response_model=MarketStatusResponse)
async def market_status():
    """Whether the NSE/BSE equity session is open right now."""
    return MarketStatusResponse(**asdict(get_market_status()))


@router.get(
    "/mf/search",
    response_model=list[MutualFundSchemeResponse],
    responses={500: {"model": ErrorResponse}},
)
def search_mutual_funds(
    q: str = Query("", description="Scheme name fragment, at least 2 characters"),
    directory: MutualFundDirectory = Depends(get_mf_directory),
):
    # sync handler: the directory may block on its first HTTP fetch
    return [MutualFundSchemeResponse(**asdict(scheme)) for scheme in directory.search(q)]


@router.get(
    "/mf/nav/{scheme_code}",
    response_model=NavResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def latest_nav(scheme_code: str, directory: MutualFundDirectory = Depends(get_mf_directory)):
    """Latest NAV for a scheme; source tells whether it came from the API or the cache."""
    try:
        quote = directory.latest_nav(scheme_code)
    except ValueError as exc:
        return validation_error_response(exc)
    except Exception:
        logger.exception("mf_nav_failed", extra={"event": "mf_nav_failed", "scheme_code": scheme_code})
        return error_response(status_code=500, code="unexpected_error", detail="Failed to fetch NAV")
    if quote is None:
        return error_response(
            status_code=404,
            code="nav_not_found",
            detail="NAV not found",
            context={"scheme_code": scheme_code},
        )
    return NavResponse(**asdict(quote))
