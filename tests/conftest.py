import os
import sys
from datetime import datetime, timedelta, timezone

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from core.models import Direction, Trade  # noqa: E402

BASE_TIME = datetime(2024, 12, 2, 9, 0, tzinfo=timezone.utc)  # a Monday


def make_trade(pnl=None, day=0, hours=1.0, **overrides) -> Trade:
    """Closed trade entered ``day`` days after BASE_TIME and held ``hours``."""
    entry = overrides.pop("entry_date", BASE_TIME + timedelta(days=day))
    exit_date = overrides.pop("exit_date", entry + timedelta(hours=hours) if hours is not None else None)
    fields = dict(
        id=f"t{day}",
        symbol="EUR/USD",
        direction=Direction.LONG,
        entry_price=1.0850,
        entry_date=entry,
        exit_date=exit_date,
        pnl=pnl,
        size=1.0,
    )
    fields.update(overrides)
    return Trade(**fields)


@pytest.fixture
def trade_factory():
    return make_trade


@pytest.fixture
def sample_trades():
    """The +100, -50, +30, -20, +10 sequence, one trade per day."""
    return [make_trade(p, day=i) for i, p in enumerate([100.0, -50.0, 30.0, -20.0, 10.0])]
