"""
FastAPI server exposing journal statistics to the web dashboard.
Read-only: every request reloads the journal and recomputes.
"""

from datetime import datetime, timezone
from typing import List, Optional

from fastapi import FastAPI, HTTPException, Query
import uvicorn

from core.config import settings
from core.helpers.validation import parse_datetime
from core.logging_utils import get_logger
from core.models import Trade
from core.periods import Period
from core.persistence import JournalStore
from logic.distributions import daily_stats, grouped_performance, hourly_stats, weekday_win_rate
from logic.goal_progress import calculate_goal_progress, count_broken_rules, label_broken_rules, targets_from_goals
from logic.portfolio_stats import calculate_portfolio_stats, filter_trades

logger = get_logger(__name__)

app = FastAPI(title="Trade Journal Stats API")

# Journal source (replaced in tests or by the launcher)
_store: Optional[JournalStore] = None


def set_journal_store(store: Optional[JournalStore]):
    global _store
    _store = store


def _get_store() -> JournalStore:
    return _store or JournalStore()


def _parse_bound(value: Optional[str], name: str, end_of_day: bool = False) -> Optional[datetime]:
    if value is None:
        return None
    parsed = parse_datetime(value, settings.tz)
    if parsed is None:
        raise HTTPException(status_code=400, detail=f"Invalid {name}: {value!r}")
    if end_of_day and len(value) <= 10:
        parsed = parsed.replace(hour=23, minute=59, second=59, microsecond=999999)
    return parsed


def _scoped_trades(account_id: Optional[str], start_date: Optional[str], end_date: Optional[str]) -> List[Trade]:
    journal = _get_store().load()
    start = _parse_bound(start_date, "startDate")
    end = _parse_bound(end_date, "endDate", end_of_day=True)
    return filter_trades(journal.trades, account_id, start, end)


def _period(value: str) -> Period:
    try:
        return Period.parse(value)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.get("/api/health")
def health_check():
    return {"status": "ok", "ts": datetime.now(timezone.utc).isoformat()}


@app.get("/api/stats")
def get_stats(
    account_id: Optional[str] = Query(None, alias="accountId"),
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
):
    trades = _scoped_trades(account_id, start_date, end_date)
    return {"stats": calculate_portfolio_stats(trades).to_dict()}


@app.get("/api/stats/daily")
def get_daily_stats(
    account_id: Optional[str] = Query(None, alias="accountId"),
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
):
    trades = _scoped_trades(account_id, start_date, end_date)
    return {"dailyStats": daily_stats(trades)}


@app.get("/api/analytics")
def get_analytics(
    type: str,
    account_id: Optional[str] = Query(None, alias="accountId"),
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
):
    trades = _scoped_trades(account_id, start_date, end_date)

    if type == "hourly":
        rows = hourly_stats(trades)
        active = [r for r in rows if r["trades"] > 0]
        data = {
            "hourlyStats": rows,
            "bestHour": max(active, key=lambda r: r["pnl"]) if active else None,
            "worstHour": min(active, key=lambda r: r["pnl"]) if active else None,
        }
    elif type == "daily-win-rate":
        rows = weekday_win_rate(trades)
        total = sum(r["trades"] for r in rows)
        wins = sum(1 for t in trades if (t.pnl or 0) > 0)
        data = {
            "dailyWinRate": rows,
            "totalDays": sum(1 for r in rows if r["trades"] > 0),
            "overallWinRate": wins / total * 100 if total else 0.0,
        }
    elif type in ("symbol-distribution", "strategy-distribution"):
        if type == "symbol-distribution":
            rows = grouped_performance(trades, lambda t: t.symbol)
            keys = ("symbols", "totalSymbols", "mostTraded")
        else:
            rows = grouped_performance(trades, lambda t: t.strategy or "Unknown")
            keys = ("strategies", "totalStrategies", "mostUsed")
        data = {
            keys[0]: rows,
            keys[1]: len(rows),
            keys[2]: rows[0] if rows else None,
            "mostProfitable": max(rows, key=lambda r: r["totalPnl"]) if rows else None,
        }
    else:
        raise HTTPException(status_code=400, detail=f"Unknown analytics type: {type!r}")

    return {"success": True, "data": data}


@app.get("/api/goals/progress")
def get_goal_progress(
    account_id: str = Query(settings.all_accounts_id, alias="accountId"),
    period: str = "weekly",
):
    resolved = _period(period)
    journal = _get_store().load()
    targets = targets_from_goals(journal.goals, account_id, resolved)
    progress = calculate_goal_progress(journal.trades, account_id, resolved, targets)
    return {"period": resolved.value, "progress": progress.to_dict()}


@app.get("/api/rules/broken")
def get_broken_rules(period: str = "weekly"):
    resolved = _period(period)
    journal = _get_store().load()
    counts = count_broken_rules(journal.trades, resolved)
    return {"period": resolved.value, "counts": counts, "rules": label_broken_rules(counts, journal.rules)}


def run_server(host: Optional[str] = None, port: Optional[int] = None):
    """Run the API server (blocking)."""
    host = host or settings.api_host
    port = port or settings.api_port
    logger.info("[API] Serving journal %s on %s:%d", settings.journal_file, host, port)
    uvicorn.run(app, host=host, port=port, log_level="warning")


if __name__ == "__main__":
    run_server()
