"""Portfolio statistics summary."""

import math
from dataclasses import dataclass, asdict


@dataclass
class PortfolioStats:
    """Snapshot of aggregate statistics over a trade collection.

    ``profit_factor`` is ``math.inf`` when there are winners and no losers.
    ``avg_loss`` keeps its sign (<= 0); ``gross_loss`` is an absolute value.
    """
    total_trades: int = 0
    win_rate: float = 0.0
    total_pnl: float = 0.0
    avg_win: float = 0.0
    avg_loss: float = 0.0
    profit_factor: float = 0.0
    max_drawdown: float = 0.0
    best_trade: float = 0.0
    worst_trade: float = 0.0
    avg_risk_reward: float = 0.0
    consecutive_wins: int = 0
    consecutive_losses: int = 0

    wins: int = 0
    losses: int = 0
    breakeven: int = 0
    gross_profit: float = 0.0
    gross_loss: float = 0.0
    expectancy: float = 0.0
    sharpe_ratio: float = 0.0
    avg_holding_time: float = 0.0  # hours
    total_volume: float = 0.0

    @property
    def profit_factor_infinite(self) -> bool:
        return math.isinf(self.profit_factor)

    def to_dict(self) -> dict:
        """Plain dict safe for strict JSON encoders."""
        data = asdict(self)
        data["profit_factor_infinite"] = self.profit_factor_infinite
        if self.profit_factor_infinite:
            data["profit_factor"] = None
        return data
