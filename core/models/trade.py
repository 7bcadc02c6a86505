"""Journal trade record."""

from dataclasses import dataclass, field, asdict
from datetime import datetime, tzinfo
from enum import Enum
from typing import Any, List, Optional

from core.config import settings
from core.helpers.validation import finite_float, optional_float, parse_datetime, string_list


class Direction(Enum):
    LONG = "LONG"
    SHORT = "SHORT"


class TradeStatus(Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"


class Outcome(Enum):
    TP = "TP"
    PARTIAL = "PARTIAL"
    SL = "SL"
    BREAKEVEN = "BREAKEVEN"


def _enum_or(enum_cls, value: Any, default):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).upper())
    except ValueError:
        return default


def _to_jsonable(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {str(k): _to_jsonable(v) for k, v in value.items()}
    return str(value)


# snake_case attribute -> camelCase journal key
_JOURNAL_KEYS = {
    "id": "id",
    "symbol": "symbol",
    "direction": "direction",
    "entry_price": "entryPrice",
    "exit_price": "exitPrice",
    "stop_loss": "stopLoss",
    "take_profit": "takeProfit",
    "size": "size",
    "entry_date": "entryDate",
    "exit_date": "exitDate",
    "status": "status",
    "outcome": "outcome",
    "pnl": "pnl",
    "pnl_percent": "pnlPercent",
    "risk_reward_ratio": "riskRewardRatio",
    "notes": "notes",
    "setup": "setup",
    "strategy": "strategy",
    "session": "session",
    "market_condition": "marketCondition",
    "key_lesson": "keyLesson",
    "emotions": "emotions",
    "tags": "tags",
    "mistakes": "mistakes",
    "news_events": "newsEvents",
    "account_ids": "accountIds",
    "broken_rule_ids": "brokenRuleIds",
}


@dataclass
class Trade:
    """A single journal entry.

    ``pnl`` is the realized profit-and-loss; it is None while the trade is
    open or when the trader never filled it in. Only trades carrying a pnl
    take part in aggregate statistics.
    """
    symbol: str
    direction: Direction
    entry_price: float
    entry_date: datetime
    id: str = ""
    exit_price: Optional[float] = None
    stop_loss: float = 0.0
    take_profit: float = 0.0
    size: float = 0.0
    exit_date: Optional[datetime] = None
    status: TradeStatus = TradeStatus.CLOSED
    outcome: Optional[Outcome] = None
    pnl: Optional[float] = None
    pnl_percent: Optional[float] = None
    risk_reward_ratio: Optional[float] = None

    # Free text
    notes: str = ""
    setup: str = ""
    strategy: str = ""
    session: str = ""
    market_condition: str = ""
    key_lesson: str = ""
    emotions: str = ""

    tags: List[str] = field(default_factory=list)
    mistakes: List[str] = field(default_factory=list)
    news_events: List[str] = field(default_factory=list)
    account_ids: List[str] = field(default_factory=list)  # A trade can belong to several accounts
    broken_rule_ids: List[str] = field(default_factory=list)

    def __post_init__(self):
        # Naive timestamps are read in the journal timezone
        tz = settings.tz
        if isinstance(self.entry_date, datetime) and self.entry_date.tzinfo is None:
            self.entry_date = self.entry_date.replace(tzinfo=tz)
        if isinstance(self.exit_date, datetime) and self.exit_date.tzinfo is None:
            self.exit_date = self.exit_date.replace(tzinfo=tz)

    @property
    def effective_date(self) -> datetime:
        """Exit date when closed, entry date otherwise."""
        return self.exit_date or self.entry_date

    @property
    def has_pnl(self) -> bool:
        return self.pnl is not None

    @property
    def is_win(self) -> bool:
        return (self.pnl or 0.0) > 0

    @property
    def holding_hours(self) -> Optional[float]:
        if self.exit_date is None:
            return None
        return (self.exit_date - self.entry_date).total_seconds() / 3600

    def belongs_to(self, account_id: str) -> bool:
        return account_id in self.account_ids

    def to_dict(self) -> dict:
        raw = asdict(self)
        return {_JOURNAL_KEYS[k]: _to_jsonable(v) for k, v in raw.items()}

    @classmethod
    def from_dict(cls, data: dict, tz: Optional[tzinfo] = None) -> "Trade":
        """Build a Trade from a journal record.

        Raises ValueError when the record has no usable entry date; every
        other field degrades to a default.
        """
        entry_date = parse_datetime(data.get("entryDate"), tz)
        if entry_date is None:
            raise ValueError(f"trade {data.get('id', '?')!r} has no valid entryDate")
        exit_date = parse_datetime(data.get("exitDate"), tz)
        pnl = optional_float(data.get("pnl"))

        status_raw = data.get("status")
        if status_raw is None:
            status = TradeStatus.CLOSED if (exit_date or pnl is not None) else TradeStatus.OPEN
        else:
            status = _enum_or(TradeStatus, status_raw, TradeStatus.CLOSED)

        outcome = data.get("outcome")
        if outcome is not None:
            outcome = _enum_or(Outcome, outcome, None)

        account_ids = string_list(data.get("accountIds"))
        if not account_ids and data.get("accountId") not in (None, ""):
            account_ids = string_list(data.get("accountId"))

        return cls(
            id=str(data.get("id", "")),
            symbol=str(data.get("symbol", "")),
            direction=_enum_or(Direction, data.get("direction", "LONG"), Direction.LONG),
            entry_price=finite_float(data.get("entryPrice")),
            exit_price=optional_float(data.get("exitPrice")),
            stop_loss=finite_float(data.get("stopLoss")),
            take_profit=finite_float(data.get("takeProfit")),
            size=finite_float(data.get("size")),
            entry_date=entry_date,
            exit_date=exit_date,
            status=status,
            outcome=outcome,
            pnl=pnl,
            pnl_percent=optional_float(data.get("pnlPercent")),
            risk_reward_ratio=optional_float(data.get("riskRewardRatio")),
            notes=data.get("notes") or "",
            setup=data.get("setup") or "",
            strategy=data.get("strategy") or "",
            session=data.get("session") or "",
            market_condition=data.get("marketCondition") or "",
            key_lesson=data.get("keyLesson") or "",
            emotions=data.get("emotions") or "",
            tags=string_list(data.get("tags")),
            mistakes=string_list(data.get("mistakes")),
            news_events=string_list(data.get("newsEvents")),
            account_ids=account_ids,
            broken_rule_ids=string_list(data.get("brokenRuleIds")),
        )
