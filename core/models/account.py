"""Trading account model."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from core.helpers.validation import finite_float, parse_datetime


class AccountType(Enum):
    PROP_CHALLENGE = "prop_challenge"
    PROP_FUNDED = "prop_funded"
    PERSONAL = "personal"
    DEMO = "demo"


class AccountStatus(Enum):
    ACTIVE = "active"
    BREACHED = "breached"
    PASSED = "passed"
    WITHDRAWN = "withdrawn"
    INACTIVE = "inactive"


@dataclass
class TradingAccount:
    id: str
    name: str
    broker: str = ""
    type: AccountType = AccountType.PERSONAL
    status: AccountStatus = AccountStatus.ACTIVE
    balance: float = 0.0
    initial_balance: float = 0.0
    currency: str = "USD"
    created_at: Optional[datetime] = None
    notes: str = ""

    @property
    def pnl(self) -> float:
        return self.balance - self.initial_balance

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "broker": self.broker,
            "type": self.type.value,
            "status": self.status.value,
            "balance": self.balance,
            "initialBalance": self.initial_balance,
            "currency": self.currency,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TradingAccount":
        account_id = data.get("id") or data.get("accountId")
        if not account_id:
            raise ValueError("account record has no id")
        try:
            acc_type = AccountType(data.get("type", "personal"))
        except ValueError:
            acc_type = AccountType.PERSONAL
        try:
            status = AccountStatus(data.get("status", "active"))
        except ValueError:
            status = AccountStatus.ACTIVE
        return cls(
            id=str(account_id),
            name=str(data.get("name", "")),
            broker=str(data.get("broker", "")),
            type=acc_type,
            status=status,
            balance=finite_float(data.get("balance")),
            initial_balance=finite_float(data.get("initialBalance")),
            currency=str(data.get("currency") or "USD"),
            created_at=parse_datetime(data.get("createdAt")),
            notes=data.get("notes") or "",
        )
