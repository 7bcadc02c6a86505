"""Portfolio statistics over a journal's trades.

Everything here is a pure function of the trades passed in: no caching, no
module state. Trades without a realized pnl are ignored, and so are trades
that only belong to the unassigned account sentinel.
"""

import math
from datetime import datetime
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from core.config import settings
from core.logging_utils import get_logger
from core.models import PortfolioStats, Trade

logger = get_logger(__name__)


def is_eligible(trade: Trade, unassigned_id: Optional[str] = None) -> bool:
    """False for trades whose only account association is the unassigned sentinel."""
    sentinel = settings.unassigned_account_id if unassigned_id is None else unassigned_id
    if not trade.account_ids:
        return True
    return any(acc.strip() != sentinel for acc in trade.account_ids)


def eligible_trades(trades: Iterable[Trade], unassigned_id: Optional[str] = None) -> List[Trade]:
    return [t for t in trades if is_eligible(t, unassigned_id)]


def chronological(trades: Iterable[Trade]) -> List[Trade]:
    """Sort by effective date (exit, falling back to entry); stable for ties."""
    return sorted(trades, key=lambda t: t.effective_date)


def qualifying_trades(trades: Iterable[Trade]) -> List[Trade]:
    """Eligible trades carrying a realized pnl, in chronological order."""
    return chronological(t for t in eligible_trades(trades) if t.has_pnl)


def filter_trades(
    trades: Iterable[Trade],
    account_id: Optional[str] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> List[Trade]:
    """Narrow by account (the ALL wildcard or None keeps every account) and effective date."""
    selected = []
    for trade in trades:
        if account_id and account_id != settings.all_accounts_id and not trade.belongs_to(account_id):
            continue
        when = trade.effective_date
        if start is not None and when < start:
            continue
        if end is not None and when > end:
            continue
        selected.append(trade)
    return selected


def max_drawdown_pct(pnls: Iterable[float]) -> float:
    """Largest peak-to-trough decline of cumulative pnl, as % of the peak.

    The curve starts at 0 and only points where the running peak is positive
    produce a drawdown, so losses before any profit do not count.
    """
    running = 0.0
    peak = 0.0
    worst = 0.0
    for pnl in pnls:
        running += pnl
        if running > peak:
            peak = running
        if peak > 0:
            drawdown = (peak - running) / peak * 100
            if drawdown > worst:
                worst = drawdown
    return worst


def longest_streaks(pnls: Iterable[float]) -> Tuple[int, int]:
    """Longest run of winners (pnl > 0) and of non-winners (pnl <= 0)."""
    best_wins = best_losses = 0
    wins = losses = 0
    for pnl in pnls:
        if pnl > 0:
            wins += 1
            losses = 0
            best_wins = max(best_wins, wins)
        else:
            losses += 1
            wins = 0
            best_losses = max(best_losses, losses)
    return best_wins, best_losses


def profit_factor(gross_profit: float, gross_loss: float) -> float:
    """gross_profit / gross_loss; inf with winners and no losers, 0 with neither."""
    if gross_loss > 0:
        return gross_profit / gross_loss
    if gross_profit > 0:
        return math.inf
    return 0.0


def win_rate(pnls: Sequence[float]) -> float:
    if not pnls:
        return 0.0
    return sum(1 for p in pnls if p > 0) / len(pnls) * 100


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def calculate_portfolio_stats(trades: Iterable[Trade]) -> PortfolioStats:
    """Aggregate a trade collection into a PortfolioStats snapshot."""
    closed = qualifying_trades(trades)
    if not closed:
        return PortfolioStats()

    pnls = [t.pnl for t in closed]
    winners = [p for p in pnls if p > 0]
    losers = [p for p in pnls if p < 0]

    gross_profit = sum(winners)
    gross_loss = abs(sum(losers))
    total_pnl = sum(pnls)

    rr_values = [
        t.risk_reward_ratio for t in closed
        if t.risk_reward_ratio is not None and math.isfinite(t.risk_reward_ratio) and t.risk_reward_ratio > 0
    ]
    consecutive_wins, consecutive_losses = longest_streaks(pnls)

    std = float(np.std(pnls))
    mean_pnl = total_pnl / len(pnls)

    holding = [t.holding_hours for t in closed if t.holding_hours is not None]

    stats = PortfolioStats(
        total_trades=len(closed),
        win_rate=win_rate(pnls),
        total_pnl=total_pnl,
        avg_win=_mean(winners),
        avg_loss=_mean(losers),
        profit_factor=profit_factor(gross_profit, gross_loss),
        max_drawdown=max_drawdown_pct(pnls),
        best_trade=max(pnls),
        worst_trade=min(pnls),
        avg_risk_reward=_mean(rr_values),
        consecutive_wins=consecutive_wins,
        consecutive_losses=consecutive_losses,
        wins=len(winners),
        losses=len(losers),
        breakeven=sum(1 for p in pnls if p == 0),
        gross_profit=gross_profit,
        gross_loss=gross_loss,
        expectancy=mean_pnl,
        sharpe_ratio=mean_pnl / std if std > 0 else 0.0,
        avg_holding_time=_mean(holding),
        total_volume=sum(t.size for t in closed),
    )
    logger.debug("[STATS] %d trades, win rate %.1f%%, pnl %.2f", stats.total_trades, stats.win_rate, total_pnl)
    return stats
