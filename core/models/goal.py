"""Goals, trading rules and goal progress records."""

from dataclasses import dataclass, asdict
from enum import Enum

from core.helpers.validation import finite_float
from core.periods import Period


class GoalType(Enum):
    PROFIT = "profit"
    WIN_RATE = "winRate"
    MAX_DRAWDOWN = "maxDrawdown"
    MAX_TRADES = "maxTrades"

    @property
    def is_inverse(self) -> bool:
        """Lower is better for drawdown and trade-count limits."""
        return self in (GoalType.MAX_DRAWDOWN, GoalType.MAX_TRADES)


@dataclass
class Goal:
    goal_id: str
    account_id: str
    goal_type: GoalType
    period: Period
    target: float
    title: str = ""

    @property
    def is_inverse(self) -> bool:
        return self.goal_type.is_inverse

    def to_dict(self) -> dict:
        return {
            "goalId": self.goal_id,
            "accountId": self.account_id,
            "goalType": self.goal_type.value,
            "period": self.period.value,
            "target": self.target,
            "title": self.title,
            "isInverse": self.is_inverse,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Goal":
        return cls(
            goal_id=str(data.get("goalId") or data.get("id") or ""),
            account_id=str(data.get("accountId") or ""),
            goal_type=GoalType(data["goalType"]),
            period=Period.parse(data.get("period", "weekly")),
            target=finite_float(data.get("target")),
            title=data.get("title") or "",
        )


@dataclass
class TradingRule:
    rule_id: str
    rule: str
    is_active: bool = True

    def to_dict(self) -> dict:
        return {"ruleId": self.rule_id, "rule": self.rule, "isActive": self.is_active}

    @classmethod
    def from_dict(cls, data: dict) -> "TradingRule":
        rule_id = data.get("ruleId") or data.get("id")
        if not rule_id:
            raise ValueError("rule record has no id")
        return cls(
            rule_id=str(rule_id),
            rule=str(data.get("rule", "")),
            is_active=bool(data.get("isActive", True)),
        )


@dataclass(frozen=True)
class GoalTargets:
    """The four numeric targets a goal set resolves to."""
    profit: float = 0.0
    win_rate: float = 0.0
    max_drawdown: float = 0.0
    max_trades: float = 0.0


@dataclass
class GoalProgress:
    current: float
    target: float
    progress: float  # percent, capped at 100
    achieved: bool

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class AccountGoalProgress:
    account_id: str
    profit: GoalProgress
    win_rate: GoalProgress
    max_drawdown: GoalProgress
    trade_count: GoalProgress

    def to_dict(self) -> dict:
        return {
            "accountId": self.account_id,
            "profit": self.profit.to_dict(),
            "winRate": self.win_rate.to_dict(),
            "maxDrawdown": self.max_drawdown.to_dict(),
            "tradeCount": self.trade_count.to_dict(),
        }
