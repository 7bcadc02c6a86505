#!/usr/bin/env python3
"""
Journal Statistics Report

Summarises a trade journal in the terminal:
- Win rate, avg win/loss, profit factor, drawdown, streaks
- Goal progress for an account and period
- Broken trading rules for the period

Usage:
    python tools/report_stats.py [--journal data/journal.json] [--account ALL] [--period weekly]
    python tools/report_stats.py --start 2024-12-01 --end 2024-12-31
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

sys.path.insert(0, str(Path(__file__).parent.parent))

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from core.config import settings
from core.helpers.validation import parse_datetime
from core.models import AccountGoalProgress, GoalProgress, PortfolioStats
from core.periods import Period, resolve_range
from core.persistence import JournalStore
from logic.distributions import format_currency, format_percentage
from logic.goal_progress import calculate_goal_progress, count_broken_rules, label_broken_rules, targets_from_goals
from logic.portfolio_stats import calculate_portfolio_stats, filter_trades


def _pf_str(stats: PortfolioStats) -> str:
    if stats.profit_factor_infinite:
        return "∞"
    return f"{stats.profit_factor:.2f}"


def render_stats(stats: PortfolioStats, title: str = "Portfolio Statistics") -> Panel:
    table = Table(box=None, padding=(0, 1), show_header=False)
    table.add_column("Metric", style="dim")
    table.add_column("Value", justify="right")

    pnl_style = "green" if stats.total_pnl >= 0 else "red"
    pf = stats.profit_factor
    pf_style = "green" if pf >= 1.5 else "yellow" if pf >= 1.0 else "red"

    table.add_row("Total Trades", str(stats.total_trades))
    table.add_row("Wins/Losses", f"{stats.wins}W / {stats.losses}L / {stats.breakeven}BE")
    table.add_row("Win Rate", format_percentage(stats.win_rate))
    table.add_row("Total PnL", f"[{pnl_style}]{stats.total_pnl:+.2f}[/]")
    table.add_row("Avg Win", format_currency(stats.avg_win))
    table.add_row("Avg Loss", format_currency(stats.avg_loss))
    table.add_row("Best / Worst", f"{stats.best_trade:+.2f} / {stats.worst_trade:+.2f}")
    table.add_row("Profit Factor", f"[{pf_style}]{_pf_str(stats)}[/]")
    table.add_row("Max Drawdown", format_percentage(stats.max_drawdown))
    table.add_row("Avg R:R", f"{stats.avg_risk_reward:.2f}")
    table.add_row("Streaks", f"{stats.consecutive_wins}W / {stats.consecutive_losses}L")
    table.add_row("Expectancy", f"{stats.expectancy:+.2f}/trade")
    table.add_row("Sharpe", f"{stats.sharpe_ratio:.2f}")

    return Panel(table, title=f"[bold cyan]{title}[/]", border_style="cyan")


def render_goals(progress: AccountGoalProgress, period: Period) -> Panel:
    table = Table(box=None, padding=(0, 1), expand=True)
    table.add_column("Goal", style="cyan")
    table.add_column("Current", justify="right")
    table.add_column("Target", justify="right")
    table.add_column("Progress", justify="right")
    table.add_column("", justify="center")

    rows: List[tuple] = [
        ("Profit", progress.profit, "{:+.2f}"),
        ("Win Rate", progress.win_rate, "{:.1f}%"),
        ("Max Drawdown", progress.max_drawdown, "{:.1f}%"),
        ("Trades", progress.trade_count, "{:.0f}"),
    ]
    for name, goal, fmt in rows:
        table.add_row(
            name,
            fmt.format(goal.current),
            fmt.format(goal.target),
            format_percentage(goal.progress),
            _achieved_mark(goal),
        )

    title = f"[bold yellow]Goals · {progress.account_id} · {period.value}[/]"
    return Panel(table, title=title, border_style="yellow")


def _achieved_mark(goal: GoalProgress) -> str:
    return "[green]✓[/]" if goal.achieved else "[red]✗[/]"


def render_broken_rules(rows: List[dict]) -> Panel:
    table = Table(box=None, padding=(0, 1), expand=True)
    table.add_column("Rule", style="magenta")
    table.add_column("Count", justify="right")
    for row in rows:
        table.add_row(row["rule"], str(row["count"]))
    if not rows:
        table.add_row("[dim]No broken rules[/]", "")
    return Panel(table, title="[bold magenta]Broken Rules[/]", border_style="magenta")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Trade journal statistics report")
    parser.add_argument("--journal", type=str, default=settings.journal_file, help="Journal JSON file")
    parser.add_argument("--account", type=str, default=settings.all_accounts_id, help="Account id or ALL")
    parser.add_argument("--period", type=str, default="weekly", choices=[p.value for p in Period])
    parser.add_argument("--start", type=str, default=None, help="Custom range start (ISO date)")
    parser.add_argument("--end", type=str, default=None, help="Custom range end (ISO date)")
    return parser


def main(argv: Optional[List[str]] = None, console: Optional[Console] = None) -> int:
    args = build_parser().parse_args(argv)
    console = console or Console()

    journal_path = Path(args.journal)
    if not journal_path.exists():
        console.print(f"[red]Journal not found: {journal_path}[/]")
        return 1

    custom_range = None
    if args.start or args.end:
        start = parse_datetime(args.start, settings.tz)
        end = parse_datetime(args.end, settings.tz)
        if start is None or end is None:
            console.print("[red]--start and --end must both be valid ISO dates[/]")
            return 2
        if len(args.end) <= 10:
            end = end.replace(hour=23, minute=59, second=59, microsecond=999999)
        custom_range = (start, end)

    journal = JournalStore(journal_path).load()
    period = Period.parse(args.period)
    window = resolve_range(period, custom_range)

    account_trades = filter_trades(journal.trades, args.account)
    scoped = filter_trades(account_trades, None, window.start, window.end) if custom_range else account_trades
    stats = calculate_portfolio_stats(scoped)
    console.print(render_stats(stats, f"Portfolio Statistics · {args.account}"))

    targets = targets_from_goals(journal.goals, args.account, period)
    progress = calculate_goal_progress(journal.trades, args.account, period, targets, window.as_tuple())
    console.print(render_goals(progress, period))

    counts = count_broken_rules(account_trades, period, window.as_tuple())
    console.print(render_broken_rules(label_broken_rules(counts, journal.rules)))
    return 0


if __name__ == "__main__":
    sys.exit(main())
