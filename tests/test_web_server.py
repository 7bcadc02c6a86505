"""API tests against a journal written to tmp_path."""

import inspect
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from core.config import settings
from core.models import Goal, GoalType, TradingRule
from core.periods import Period
from core.persistence import Journal, JournalStore
from ui.web_server import app, set_journal_store


@pytest.fixture(autouse=True)
def utc_journal(monkeypatch):
    monkeypatch.setattr(settings, "journal_timezone", "UTC")


@pytest.fixture
def journal(sample_trades):
    for trade in sample_trades:
        trade.account_ids = ["acc1"]
    sample_trades[1].account_ids = ["acc2"]
    return Journal(trades=sample_trades)


@pytest.fixture
def client(tmp_path, journal):
    store = JournalStore(tmp_path / "journal.json")
    store.save(journal)
    set_journal_store(store)
    yield TestClient(app)
    set_journal_store(None)


def _use_journal(tmp_path, journal):
    store = JournalStore(tmp_path / "other.json")
    store.save(journal)
    set_journal_store(store)


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_stats(client):
    stats = client.get("/api/stats").json()["stats"]
    assert stats["total_trades"] == 5
    assert stats["win_rate"] == pytest.approx(60.0)
    assert stats["profit_factor"] == pytest.approx(2.0)
    assert stats["profit_factor_infinite"] is False


def test_stats_filtered_by_account(client):
    stats = client.get("/api/stats", params={"accountId": "acc1"}).json()["stats"]
    assert stats["total_trades"] == 4
    assert stats["worst_trade"] == pytest.approx(-20.0)
    assert stats["profit_factor"] == pytest.approx(7.0)


def test_stats_filtered_by_dates(client):
    params = {"startDate": "2024-12-03", "endDate": "2024-12-04"}
    stats = client.get("/api/stats", params=params).json()["stats"]
    assert stats["total_trades"] == 2
    assert stats["total_pnl"] == pytest.approx(-20.0)


def test_invalid_date_rejected(client):
    response = client.get("/api/stats", params={"startDate": "yesterday"})
    assert response.status_code == 400


def test_infinite_profit_factor(client, tmp_path, trade_factory):
    _use_journal(tmp_path, Journal(trades=[trade_factory(10.0), trade_factory(5.0, day=1)]))
    stats = client.get("/api/stats").json()["stats"]
    assert stats["profit_factor"] is None
    assert stats["profit_factor_infinite"] is True


def test_daily_stats(client):
    rows = client.get("/api/stats/daily").json()["dailyStats"]
    assert [r["date"] for r in rows][:2] == ["2024-12-02", "2024-12-03"]
    assert rows[0]["pnl"] == pytest.approx(100.0)


def test_hourly_analytics(client):
    body = client.get("/api/analytics", params={"type": "hourly"}).json()
    assert body["success"] is True
    assert len(body["data"]["hourlyStats"]) == 24
    assert body["data"]["bestHour"]["hour"] == "09"


def test_distribution_analytics(client):
    data = client.get("/api/analytics", params={"type": "symbol-distribution"}).json()["data"]
    assert data["totalSymbols"] == 1
    assert data["mostTraded"]["name"] == "EUR/USD"

    data = client.get("/api/analytics", params={"type": "daily-win-rate"}).json()["data"]
    assert len(data["dailyWinRate"]) == 7
    assert data["overallWinRate"] == pytest.approx(60.0)


def test_unknown_analytics_type(client):
    response = client.get("/api/analytics", params={"type": "astrology"})
    assert response.status_code == 400


def test_goal_progress(client, tmp_path, trade_factory):
    now = datetime.now(timezone.utc)
    trades = [
        trade_factory(80.0, entry_date=now - timedelta(minutes=30), exit_date=now, account_ids=["acc1"]),
    ]
    goals = [Goal("g1", "ALL", GoalType.PROFIT, Period.MONTHLY, 100.0)]
    _use_journal(tmp_path, Journal(trades=trades, goals=goals))

    body = client.get("/api/goals/progress", params={"accountId": "acc1", "period": "monthly"}).json()
    assert body["period"] == "monthly"
    assert body["progress"]["accountId"] == "acc1"
    assert body["progress"]["profit"]["current"] == pytest.approx(80.0)
    assert body["progress"]["profit"]["progress"] == pytest.approx(80.0)
    assert body["progress"]["tradeCount"]["current"] == 1


def test_goal_progress_bad_period(client):
    response = client.get("/api/goals/progress", params={"period": "yearly"})
    assert response.status_code == 400


def test_broken_rules(client, tmp_path, trade_factory):
    now = datetime.now(timezone.utc)
    trades = [
        trade_factory(-5.0, entry_date=now, exit_date=None, broken_rule_ids=["r1", "r2"]),
        trade_factory(-5.0, entry_date=now, exit_date=None, broken_rule_ids=["r1"]),
    ]
    rules = [TradingRule("r1", "No revenge trades")]
    _use_journal(tmp_path, Journal(trades=trades, rules=rules))

    body = client.get("/api/rules/broken", params={"period": "weekly"}).json()
    assert body["counts"] == {"r1": 2, "r2": 1}
    assert body["rules"][0] == {"ruleId": "r1", "rule": "No revenge trades", "count": 2}


def test_handlers_run_in_threadpool():
    from ui import web_server

    handlers = [
        web_server.get_stats,
        web_server.get_daily_stats,
        web_server.get_analytics,
        web_server.get_goal_progress,
        web_server.get_broken_rules,
    ]
    assert not any(inspect.iscoroutinefunction(h) for h in handlers)
