"""Tests for journal record parsing."""

from datetime import datetime, timezone

import pytest

from core.models import (
    AccountStatus,
    AccountType,
    Direction,
    Goal,
    GoalType,
    Outcome,
    Trade,
    TradeStatus,
    TradingAccount,
    TradingRule,
)
from core.periods import Period


RECORD = {
    "id": "1",
    "symbol": "EUR/USD",
    "direction": "LONG",
    "entryPrice": 1.0850,
    "exitPrice": 1.0920,
    "stopLoss": 1.0800,
    "takeProfit": 1.0950,
    "size": 1.0,
    "entryDate": "2024-12-04T09:30:00Z",
    "exitDate": "2024-12-04T14:45:00Z",
    "outcome": "TP",
    "pnl": 700,
    "pnlPercent": 1.4,
    "riskRewardRatio": 2.0,
    "strategy": "Breakout",
    "tags": ["breakout", "news-driven"],
    "accountIds": ["acc1", "acc2"],
    "brokenRuleIds": ["r1"],
}


class TestTrade:
    def test_from_dict(self):
        trade = Trade.from_dict(RECORD)
        assert trade.direction is Direction.LONG
        assert trade.outcome is Outcome.TP
        assert trade.status is TradeStatus.CLOSED
        assert trade.pnl == 700.0
        assert trade.entry_date == datetime(2024, 12, 4, 9, 30, tzinfo=timezone.utc)
        assert trade.holding_hours == pytest.approx(5.25)
        assert trade.account_ids == ["acc1", "acc2"]
        assert trade.belongs_to("acc2")

    def test_round_trip(self):
        trade = Trade.from_dict(RECORD)
        assert Trade.from_dict(trade.to_dict()) == trade

    def test_to_dict_uses_journal_keys(self):
        data = Trade.from_dict(RECORD).to_dict()
        assert data["entryPrice"] == pytest.approx(1.085)
        assert data["direction"] == "LONG"
        assert data["brokenRuleIds"] == ["r1"]

    def test_missing_entry_date_rejected(self):
        with pytest.raises(ValueError):
            Trade.from_dict({"id": "x", "symbol": "EUR/USD", "pnl": 10})

    def test_open_trade_defaults(self):
        trade = Trade.from_dict({"symbol": "BTC", "entryDate": "2024-12-04T09:30:00"})
        assert trade.status is TradeStatus.OPEN
        assert trade.pnl is None
        assert trade.effective_date == trade.entry_date
        assert trade.holding_hours is None

    def test_bad_numbers_degrade(self):
        trade = Trade.from_dict({
            "symbol": "BTC",
            "direction": "sideways",
            "entryDate": "2024-12-04",
            "entryPrice": "abc",
            "pnl": "NaN",
            "riskRewardRatio": None,
            "outcome": "WHATEVER",
        })
        assert trade.direction is Direction.LONG
        assert trade.entry_price == 0.0
        assert trade.pnl is None
        assert trade.risk_reward_ratio is None
        assert trade.outcome is None

    def test_single_account_id(self):
        trade = Trade.from_dict({**RECORD, "accountIds": None, "accountId": "acc9"})
        assert trade.account_ids == ["acc9"]

    def test_naive_dates_use_given_timezone(self):
        from zoneinfo import ZoneInfo

        tz = ZoneInfo("Europe/London")
        trade = Trade.from_dict({"symbol": "X", "entryDate": "2024-07-01T09:00:00"}, tz)
        assert trade.entry_date.utcoffset().total_seconds() == 3600


class TestOtherRecords:
    def test_account(self):
        account = TradingAccount.from_dict({
            "accountId": "acc1",
            "name": "FTMO 100k",
            "type": "prop_challenge",
            "status": "breached",
            "balance": 95000,
            "initialBalance": 100000,
        })
        assert account.id == "acc1"
        assert account.type is AccountType.PROP_CHALLENGE
        assert account.status is AccountStatus.BREACHED
        assert account.pnl == pytest.approx(-5000.0)

    def test_account_without_id_rejected(self):
        with pytest.raises(ValueError):
            TradingAccount.from_dict({"name": "nameless"})

    def test_goal(self):
        goal = Goal.from_dict({
            "goalId": "g1", "accountId": "ALL", "goalType": "maxDrawdown", "period": "monthly", "target": 5,
        })
        assert goal.goal_type is GoalType.MAX_DRAWDOWN
        assert goal.period is Period.MONTHLY
        assert goal.is_inverse
        assert Goal.from_dict(goal.to_dict()) == goal

    def test_rule(self):
        rule = TradingRule.from_dict({"ruleId": "r1", "rule": "No trading during news"})
        assert rule.is_active
        assert TradingRule.from_dict(rule.to_dict()) == rule
