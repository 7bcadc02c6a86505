"""Typed data models for the trade journal."""

from core.models.account import AccountStatus, AccountType, TradingAccount
from core.models.goal import (
    AccountGoalProgress,
    Goal,
    GoalProgress,
    GoalTargets,
    GoalType,
    TradingRule,
)
from core.models.stats import PortfolioStats
from core.models.trade import Direction, Outcome, Trade, TradeStatus

__all__ = [
    "AccountGoalProgress",
    "AccountStatus",
    "AccountType",
    "Direction",
    "Goal",
    "GoalProgress",
    "GoalTargets",
    "GoalType",
    "Outcome",
    "PortfolioStats",
    "Trade",
    "TradeStatus",
    "TradingAccount",
    "TradingRule",
]
