from dataclasses import dataclass
from typing import Iterable, Optional

from journal.core.money import round_half_up, round_money
from journal.core.outcome import Degenerate, Ok, Outcome
from journal.core.validation import require_finite, require_non_negative


@dataclass(frozen=True)
class TradeStats:
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


def win_rate(winners: int, total: int) -> int:
    """Integer percent of winning trades; 0 when nothing has closed."""
    if total <= 0:
        return 0
    return int(round_half_up(winners / total * 100))


def pnl_percentage(pnl: float, invested: float) -> Outcome[float]:
    """P&L as a 2-decimal percent of the amount invested."""
    pnl = require_finite("pnl", pnl)
    invested = require_non_negative("invested", invested)
    if invested == 0:
        return Degenerate("invested value is zero")
    return Ok(round_money(pnl / invested * 100))


def return_percentage(current_value: float, invested: float) -> Outcome[float]:
    current_value = require_finite("current_value", current_value)
    return pnl_percentage(current_value - invested, invested)


def summarize_trades(net_pnls: Iterable[Optional[float]]) -> TradeStats:
    """Aggregate closed-trade results. ``None`` entries are open trades and are skipped."""
    closed = [require_finite("net_pnl", pnl) for pnl in net_pnls if pnl is not None]
    wins = [pnl for pnl in closed if pnl > 0]
    losses = [pnl for pnl in closed if pnl < 0]

    avg_win = sum(wins) / len(wins) if wins else 0.0
    avg_loss = sum(losses) / len(losses) if losses else 0.0
    return TradeStats(
        total_trades=len(closed),
        winners=len(wins),
        losers=len(losses),
        win_rate=win_rate(len(wins), len(closed)),
        total_net_pnl=sum(closed),
        avg_win=avg_win,
        avg_loss=avg_loss,
        biggest_win=max(closed + [0.0]),
        biggest_loss=min(closed + [0.0]),
        risk_reward_ratio=abs(avg_win / avg_loss) if avg_loss != 0 else 0.0,
    )
