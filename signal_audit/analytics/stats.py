"""Per-trader performance statistics."""
from __future__ import annotations

import logging
from collections import Counter, defaultdict
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from signal_audit.models import ReconciledTrade, TraderStats
from signal_audit.shared.text import simplify
from signal_audit.shared.time_utils import now_utc, to_epoch, try_parse_date

logger = logging.getLogger(__name__)


def successful_trades(trades: Iterable[ReconciledTrade]) -> List[ReconciledTrade]:
    """Executed trades with a known PnL, in input order."""
    return [t for t in trades if t.is_executed and t.pnl is not None]


def group_by_trader(trades: Iterable[ReconciledTrade]) -> Dict[str, List[ReconciledTrade]]:
    groups: Dict[str, List[ReconciledTrade]] = defaultdict(list)
    for t in trades:
        groups[t.trader_name].append(t)
    return dict(groups)


def profit_factor(pnls: List[float]) -> float:
    """Gross win / gross loss; gross win alone when nothing was lost."""
    gross_win = sum(p for p in pnls if p > 0)
    gross_loss = abs(sum(p for p in pnls if p <= 0))
    if gross_loss == 0:
        return gross_win
    return gross_win / gross_loss


def long_short_ratio(outcomes: List[str]) -> float:
    longs = sum(1 for o in outcomes if simplify(o) == "yes")
    shorts = sum(1 for o in outcomes if simplify(o) == "no")
    if shorts == 0:
        return float(longs)
    return longs / shorts


def avg_holding_hours(trades: List[ReconciledTrade], as_of: datetime) -> float:
    """Mean hours from signal to close (or ``as_of`` while still open).

    Non-positive durations and unreadable close dates are left out.
    """
    hours = []
    for t in trades:
        if t.closed_date:
            end = try_parse_date(t.closed_date)
            if end is None:
                continue
        else:
            end = as_of
        h = (to_epoch(end) - to_epoch(t.timestamp)) / 3600
        if h > 0:
            hours.append(h)
    return sum(hours) / len(hours) if hours else 0.0


def avg_trades_per_day(trades: List[ReconciledTrade]) -> float:
    if not trades:
        return 0.0
    epochs = [to_epoch(t.timestamp) for t in trades]
    days = max(1.0, (max(epochs) - min(epochs)) / 86400)
    return len(trades) / days


def favorite_category(trades: List[ReconciledTrade]) -> str:
    if not trades:
        return ""
    return Counter(t.category.value for t in trades).most_common(1)[0][0]


def trader_stats(
    name: str,
    executed: List[ReconciledTrade],
    attempted: List[ReconciledTrade],
    as_of: datetime,
) -> TraderStats:
    stats = TraderStats(
        name=name,
        total_attempts=len(attempted),
        favorite_category=favorite_category(executed or attempted),
    )
    if not executed:
        return stats

    pnls = [t.pnl for t in executed]
    wins = sum(1 for p in pnls if p > 0)

    stats.total_pnl = sum(pnls)
    stats.win_rate = wins / len(pnls) * 100
    stats.profit_factor = profit_factor(pnls)
    stats.long_short_ratio = long_short_ratio([t.outcome for t in executed])
    stats.avg_successful_bet = sum(t.matched_execution_amount or 0 for t in executed) / len(executed)
    stats.best_trade = max(pnls)
    stats.worst_trade = min(pnls)
    stats.avg_holding_time_hours = avg_holding_hours(executed, as_of)
    stats.avg_trades_per_day = avg_trades_per_day(executed)
    return stats


def compute_trader_stats(
    trades: List[ReconciledTrade],
    as_of: Optional[datetime] = None,
) -> List[TraderStats]:
    """One TraderStats per trader named in any signal, in first-seen order.

    Performance figures use executed trades only; ``total_attempts`` counts
    every signal.
    """
    as_of = as_of or now_utc()
    attempted = group_by_trader(trades)
    executed = group_by_trader(successful_trades(trades))

    return [
        trader_stats(name, executed.get(name, []), signals, as_of)
        for name, signals in attempted.items()
    ]
