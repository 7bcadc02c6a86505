"""Dashboard breakdowns: equity curve, per-symbol, per-hour, durations and friends.

These mirror the chart views, so a missing pnl counts as 0 rather than
excluding the trade.
"""

from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

import numpy as np

from core.config import settings
from core.models import Trade
from logic.portfolio_stats import chronological

WEEKDAY_NAMES = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]

DURATION_RANGES = [
    ("< 1h", 0.0, 1.0),
    ("1-4h", 1.0, 4.0),
    ("4-8h", 4.0, 8.0),
    ("8-24h", 8.0, 24.0),
    ("> 24h", 24.0, float("inf")),
]


@dataclass
class TradeDuration:
    symbol: str
    duration: float  # hours
    pnl: float
    is_win: bool
    outcome: Optional[str]


def _pnl(trade: Trade) -> float:
    return trade.pnl or 0.0


def _local(ts):
    return ts.astimezone(settings.tz)


def _bucket(trades: List[Trade]) -> dict:
    total = len(trades)
    wins = sum(1 for t in trades if _pnl(t) > 0)
    return {
        "trades": total,
        "wins": wins,
        "losses": sum(1 for t in trades if _pnl(t) < 0),
        "pnl": sum(_pnl(t) for t in trades),
        "winRate": wins / total * 100 if total else 0.0,
    }


def _count_by(trades: Iterable[Trade], key) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for trade in trades:
        k = key(trade)
        counts[k] = counts.get(k, 0) + 1
    return counts


def symbol_distribution(trades: Iterable[Trade]) -> Dict[str, int]:
    return _count_by(trades, lambda t: t.symbol)


def strategy_distribution(trades: Iterable[Trade]) -> Dict[str, int]:
    return _count_by(trades, lambda t: t.strategy or "Unknown")


def _share(counts: Dict[str, int], label: str) -> List[dict]:
    total = sum(counts.values())
    return [
        {label: key, "count": count, "percentage": count / total * 100}
        for key, count in counts.items()
    ]


def outcome_distribution(trades: Iterable[Trade]) -> List[dict]:
    counts = _count_by(trades, lambda t: t.outcome.value if t.outcome else "UNKNOWN")
    return _share(counts, "outcome")


def session_distribution(trades: Iterable[Trade]) -> List[dict]:
    return _share(_count_by(trades, lambda t: t.session or "Unknown"), "session")


def grouped_performance(trades: Iterable[Trade], key) -> List[dict]:
    """Count, win rate, total and average pnl per group, busiest group first."""
    groups: Dict[str, List[Trade]] = defaultdict(list)
    for trade in trades:
        groups[key(trade)].append(trade)
    rows = []
    for name, members in groups.items():
        bucket = _bucket(members)
        rows.append({
            "name": name,
            "count": bucket["trades"],
            "winRate": bucket["winRate"],
            "totalPnl": bucket["pnl"],
            "avgPnl": bucket["pnl"] / bucket["trades"],
        })
    return sorted(rows, key=lambda r: (-r["count"], r["name"]))


def hourly_stats(trades: Iterable[Trade]) -> List[dict]:
    """24 buckets keyed by entry hour."""
    by_hour: Dict[int, List[Trade]] = defaultdict(list)
    for trade in trades:
        by_hour[_local(trade.entry_date).hour].append(trade)
    rows = []
    for hour in range(24):
        bucket = _bucket(by_hour[hour])
        rows.append({
            "hour": f"{hour:02d}",
            "winRate": bucket["winRate"],
            "trades": bucket["trades"],
            "pnl": bucket["pnl"],
        })
    return rows


def weekday_win_rate(trades: Iterable[Trade]) -> List[dict]:
    """Sun..Sat buckets keyed by entry weekday."""
    by_day: Dict[int, List[Trade]] = defaultdict(list)
    for trade in trades:
        # Python weekday is Mon=0; shift so Sunday leads
        by_day[(_local(trade.entry_date).weekday() + 1) % 7].append(trade)
    rows = []
    for index, name in enumerate(WEEKDAY_NAMES):
        bucket = _bucket(by_day[index])
        rows.append({
            "day": name,
            "winRate": bucket["winRate"],
            "trades": bucket["trades"],
            "pnl": bucket["pnl"],
        })
    return rows


def daily_stats(trades: Iterable[Trade]) -> List[dict]:
    """Per calendar date of the effective date, ascending."""
    by_date: Dict[str, List[Trade]] = defaultdict(list)
    for trade in trades:
        by_date[_local(trade.effective_date).date().isoformat()].append(trade)
    return [{"date": day, **_bucket(by_date[day])} for day in sorted(by_date)]


def trade_durations(trades: Iterable[Trade]) -> dict:
    durations = [
        TradeDuration(
            symbol=t.symbol,
            duration=t.holding_hours,
            pnl=_pnl(t),
            is_win=_pnl(t) > 0,
            outcome=t.outcome.value if t.outcome else None,
        )
        for t in trades
        if t.exit_date is not None
    ]
    if not durations:
        return {"durations": [], "maxDuration": 0.0, "minDuration": 0.0, "avgDuration": 0.0, "medianDuration": 0.0}

    hours = np.sort(np.array([d.duration for d in durations], dtype=float))
    return {
        "durations": durations,
        "maxDuration": float(hours[-1]),
        "minDuration": float(hours[0]),
        "avgDuration": float(hours.mean()),
        # upper median for even counts
        "medianDuration": float(hours[len(hours) // 2]),
    }


def duration_ranges(trades: Iterable[Trade]) -> List[dict]:
    """Duration buckets with wins, losses and average pnl; empty buckets dropped."""
    durations = trade_durations(trades)["durations"]
    rows = []
    for label, low, high in DURATION_RANGES:
        members = [d for d in durations if low <= d.duration < high]
        if not members:
            continue
        wins = sum(1 for d in members if d.is_win)
        rows.append({
            "range": label,
            "wins": wins,
            "losses": len(members) - wins,
            "total": len(members),
            "avgPnl": sum(d.pnl for d in members) / len(members),
        })
    return rows


def cumulative_pnl(trades: Iterable[Trade]) -> List[dict]:
    """Equity curve points in chronological order."""
    running = 0.0
    points = []
    for trade in chronological(trades):
        running += _pnl(trade)
        points.append({
            "date": trade.effective_date.isoformat(),
            "cumulativePnl": running,
            "tradePnl": _pnl(trade),
            "symbol": trade.symbol,
        })
    return points


def format_duration(hours: float) -> str:
    if hours < 1:
        return f"{round(hours * 60)}m"
    if hours < 24:
        return f"{hours:.1f}h"
    return f"{hours / 24:.1f}d"


def format_currency(value: float, decimals: int = 2) -> str:
    return f"{value:.{decimals}f}"


def format_percentage(value: float, decimals: int = 1) -> str:
    return f"{value:.{decimals}f}%"
