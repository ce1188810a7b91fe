import math
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from journal.charges.calculator import (  # noqa: E402
    ChargeBreakdown,
    Side,
    TradeForCalculation,
    calculate_charges,
    calculate_delivery_charges,
    calculate_gross_pnl,
    calculate_net_pnl,
    format_inr,
    pnl_for_trade,
)
from journal.charges.profiles import (  # noqa: E402
    DEFAULT_CHARGE_PROFILE,
    FlatChargeProfile,
    PercentageChargeProfile,
    get_charge_profile_for_broker,
    list_supported_brokers,
)
from journal.charges.schedules import Exchange, Segment  # noqa: E402
from journal.core.validation import InvalidInputError  # noqa: E402


def test_intraday_buy_with_flat_profile():
    result = calculate_net_pnl("BUY", 100, 110, 10, "NSE", FlatChargeProfile(flat_fee=20))
    charges = result.charges

    assert result.gross_pnl == 100
    assert charges.brokerage == 40
    assert math.isclose(charges.stt, 0.275)  # 0.025% of 1100 sell value
    assert math.isclose(charges.exchange_charges, 0.06237)
    assert math.isclose(charges.gst, 7.2112266)  # 18% of 40.06237
    assert math.isclose(charges.sebi_charges, 0.0021)
    assert math.isclose(charges.stamp_duty, 0.03)
    assert math.isclose(charges.total_charges, 47.5806966)
    assert math.isclose(result.net_pnl, 52.4193034)


def test_net_pnl_is_gross_minus_total_charges():
    for side, entry, exit_, qty in [("BUY", 250.5, 231.75, 37), ("SELL", 1820, 1799.35, 4), ("BUY", 12.4, 12.45, 5000)]:
        result = calculate_net_pnl(side, entry, exit_, qty)
        assert result.net_pnl == result.gross_pnl - result.charges.total_charges


def test_total_is_sum_of_components():
    charges = calculate_charges(523.4, 530.1, 75, "BSE", PercentageChargeProfile(percentage=0.05, max_brokerage=20))
    parts = (
        charges.brokerage
        + charges.stt
        + charges.exchange_charges
        + charges.gst
        + charges.sebi_charges
        + charges.stamp_duty
    )
    assert math.isclose(charges.total_charges, parts)


def test_rounded_breakdown_for_display():
    result = calculate_net_pnl("BUY", 100, 110, 10).rounded()
    assert result.charges.total_charges == 47.58
    assert result.net_pnl == 52.42
    assert result.charges.sebi_charges == 0.0


def test_flat_brokerage_independent_of_size():
    profile = FlatChargeProfile(flat_fee=15)
    small = calculate_charges(10, 11, 1, charge_profile=profile)
    large = calculate_charges(4000, 3900, 2500, charge_profile=profile)
    assert small.brokerage == large.brokerage == 30


def test_percentage_brokerage_below_cap():
    charges = calculate_charges(100, 110, 10, charge_profile=PercentageChargeProfile(percentage=0.275, max_brokerage=9999))
    assert math.isclose(charges.brokerage, 5.775)


def test_percentage_brokerage_capped_at_two_orders():
    profile = PercentageChargeProfile(percentage=0.5, max_brokerage=20)
    charges = calculate_charges(1000, 1000, 100, charge_profile=profile)
    # 0.5% of 200000 turnover is 1000, capped at 20 per order
    assert charges.brokerage == 40


def test_missing_profile_uses_default_flat_fee():
    charges = calculate_charges(100, 110, 10)
    assert charges.brokerage == DEFAULT_CHARGE_PROFILE.flat_fee * 2 == 40


def test_bse_exchange_rate():
    charges = calculate_charges(100, 110, 10, Exchange.BSE)
    assert math.isclose(charges.exchange_charges, 0.07875)


def test_sell_side_gross_pnl_profits_when_price_falls():
    assert calculate_gross_pnl("SELL", 110, 100, 10) == 100
    assert calculate_gross_pnl(Side.SELL, 100, 110, 10) == -100


def test_gross_pnl_monotonic_in_exit_price():
    exits = [90, 95, 100, 105, 110]
    buys = [calculate_gross_pnl("BUY", 100, e, 3) for e in exits]
    sells = [calculate_gross_pnl("SELL", 100, e, 3) for e in exits]
    assert buys == sorted(buys)
    assert sells == sorted(sells, reverse=True)


def test_delivery_schedule():
    charges = calculate_delivery_charges(100, 110, 10)
    assert charges.brokerage == 40
    assert math.isclose(charges.stt, 2.1)  # 0.1% on buy + sell
    assert math.isclose(charges.stamp_duty, 0.15)  # 0.015% on buy
    assert math.isclose(charges.total_charges, 49.5256966)


def test_segment_accepts_strings():
    via_string = calculate_net_pnl("buy", 100, 110, 10, "nse", segment="delivery")
    via_enum = calculate_net_pnl(Side.BUY, 100, 110, 10, Exchange.NSE, segment=Segment.DELIVERY)
    assert via_string == via_enum


@pytest.mark.parametrize(
    "kwargs",
    [
        {"entry_price": float("nan")},
        {"entry_price": 0},
        {"exit_price": -5},
        {"exit_price": float("inf")},
        {"quantity": 0},
        {"quantity": -3},
        {"quantity": 2.5},
        {"side": "HOLD"},
        {"exchange": "NYSE"},
    ],
)
def test_malformed_inputs_rejected(kwargs):
    params = {"side": "BUY", "entry_price": 100, "exit_price": 110, "quantity": 10, "exchange": "NSE"}
    params.update(kwargs)
    with pytest.raises(InvalidInputError):
        calculate_net_pnl(**params)


def test_invalid_input_is_value_error():
    with pytest.raises(ValueError, match="quantity"):
        calculate_charges(100, 110, 0)


def test_open_trade_has_no_pnl():
    trade = TradeForCalculation(side=Side.BUY, entry_price=100, quantity=10)
    assert trade.is_open
    assert pnl_for_trade(trade) is None


def test_closed_trade_pnl():
    trade = TradeForCalculation(side=Side.SELL, entry_price=110, quantity=10, exit_price=100)
    result = pnl_for_trade(trade, FlatChargeProfile(flat_fee=0))
    assert result is not None
    assert result.gross_pnl == 100
    assert result.charges.brokerage == 0


def test_broker_lookup():
    assert get_charge_profile_for_broker("Zerodha") == FlatChargeProfile(flat_fee=20)
    icici = get_charge_profile_for_broker("icici direct")
    assert isinstance(icici, PercentageChargeProfile)
    assert icici.percentage == 0.275
    assert get_charge_profile_for_broker("Some New Broker") is DEFAULT_CHARGE_PROFILE
    assert "HDFC Securities" in list_supported_brokers()


def test_profiles_are_immutable():
    profile = get_charge_profile_for_broker("Groww")
    with pytest.raises(Exception):
        profile.flat_fee = 0  # type: ignore[misc]


def test_negative_profile_values_rejected():
    with pytest.raises(InvalidInputError):
        FlatChargeProfile(flat_fee=-1)
    with pytest.raises(InvalidInputError):
        PercentageChargeProfile(percentage=0.1, max_brokerage=0)


def test_breakdown_is_plain_value():
    charges = ChargeBreakdown(1, 2, 3, 4, 5, 6, 21)
    assert charges.rounded() == charges


def test_format_inr():
    assert format_inr(1234567.891) == "₹12,34,567.89"
    assert format_inr(999) == "₹999.00"
    assert format_inr(-47.58) == "-₹47.58"
    assert format_inr(-0.001) == "₹0.00"


def test_rounded_breaks_ties_upward():
    result = calculate_net_pnl("BUY", 100, 100.125, 1, charge_profile=FlatChargeProfile(flat_fee=0)).rounded()
    assert result.gross_pnl == 0.13
    assert format_inr(0.125) == "₹0.13"
