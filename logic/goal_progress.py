"""Goal progress per account and period, and broken-rule tallies."""

from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple

from core.config import settings
from core.logging_utils import get_logger
from core.models import AccountGoalProgress, Goal, GoalProgress, GoalTargets, GoalType, Trade, TradingRule
from core.periods import Period, current_period_range, resolve_range
from logic.portfolio_stats import chronological, eligible_trades, max_drawdown_pct, win_rate

logger = get_logger(__name__)


def _ratio_pct(current: float, target: float) -> float:
    return current / target * 100 if target > 0 else 0.0


def _progress(current: float, target: float, inverse: bool = False) -> GoalProgress:
    achieved = current <= target if inverse else current >= target
    return GoalProgress(
        current=current,
        target=target,
        progress=min(_ratio_pct(current, target), 100.0),
        achieved=achieved,
    )


def calculate_goal_progress(
    trades: Optional[Iterable[Trade]],
    account_id: str,
    period,
    targets: GoalTargets,
    custom_range: Optional[Tuple[datetime, datetime]] = None,
    now: Optional[datetime] = None,
) -> AccountGoalProgress:
    """Progress toward the four goals for one account (or ALL) in a period.

    A trade counts when it belongs to the account and its effective date
    lies inside the window. Profit, win rate and drawdown use only trades
    with a realized pnl; open trades still count toward the trade limit.
    """
    window = resolve_range(period, custom_range, now)
    wildcard = account_id == settings.all_accounts_id

    selected = [
        t for t in eligible_trades(trades or [])
        if (wildcard or t.belongs_to(account_id)) and window.contains(t.effective_date)
    ]
    selected = chronological(selected)
    pnls = [t.pnl for t in selected if t.has_pnl]

    total_profit = float(sum(pnls))
    current_win_rate = win_rate(pnls)
    drawdown = max_drawdown_pct(pnls)
    trade_count = len(selected)

    logger.debug(
        "[GOALS] account=%s window=%s..%s trades=%d",
        account_id, window.start.isoformat(), window.end.isoformat(), trade_count,
    )

    return AccountGoalProgress(
        account_id=account_id,
        profit=_progress(total_profit, targets.profit),
        win_rate=_progress(current_win_rate, targets.win_rate),
        max_drawdown=_progress(drawdown, targets.max_drawdown, inverse=True),
        trade_count=_progress(trade_count, targets.max_trades, inverse=True),
    )


def targets_from_goals(goals: Iterable[Goal], account_id: str, period) -> GoalTargets:
    """Resolve stored goals for an account and period into numeric targets.

    Goals recorded against the ALL wildcard apply when the account has none
    of its own for that goal type.
    """
    period = Period.parse(period)
    own: Dict[GoalType, float] = {}
    shared: Dict[GoalType, float] = {}
    for goal in goals:
        if goal.period is not period:
            continue
        if goal.account_id == account_id:
            own[goal.goal_type] = goal.target
        elif goal.account_id == settings.all_accounts_id:
            shared[goal.goal_type] = goal.target
    merged = {**shared, **own}
    return GoalTargets(
        profit=merged.get(GoalType.PROFIT, 0.0),
        win_rate=merged.get(GoalType.WIN_RATE, 0.0),
        max_drawdown=merged.get(GoalType.MAX_DRAWDOWN, 0.0),
        max_trades=merged.get(GoalType.MAX_TRADES, 0.0),
    )


def count_broken_rules(
    trades: Optional[Iterable[Trade]],
    period="weekly",
    custom_range: Optional[Tuple[datetime, datetime]] = None,
    now: Optional[datetime] = None,
) -> Dict[str, int]:
    """Occurrences of each broken-rule id among trades entered in the period.

    Rules nobody broke are absent from the result.
    """
    window = resolve_range(period, custom_range, now)
    counts: Dict[str, int] = {}
    for trade in eligible_trades(trades or []):
        if not window.contains(trade.entry_date):
            continue
        for rule_id in trade.broken_rule_ids:
            counts[rule_id] = counts.get(rule_id, 0) + 1
    return counts


def label_broken_rules(counts: Dict[str, int], rules: Iterable[TradingRule]) -> List[dict]:
    """Attach rule text to a tally, most broken first."""
    text = {r.rule_id: r.rule for r in rules}
    rows = [
        {"ruleId": rule_id, "rule": text.get(rule_id, rule_id), "count": count}
        for rule_id, count in counts.items()
    ]
    return sorted(rows, key=lambda r: -r["count"])


def has_current_period_data(trades: Iterable[Trade], period, now: Optional[datetime] = None) -> bool:
    window = current_period_range(period, now)
    return any(window.contains(t.effective_date) for t in trades)
