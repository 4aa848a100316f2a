"""Entry point for analytics over reconciled trades."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional, Sequence

from signal_audit.analytics.series import cumulative_walk, daily_trade_counts, trader_series
from signal_audit.analytics.stats import compute_trader_stats, successful_trades
from signal_audit.config import AnalyticsConfig
from signal_audit.models import AnalyticsResult, PortfolioSummary, ReconciledTrade
from signal_audit.shared.time_utils import to_epoch

logger = logging.getLogger(__name__)


def portfolio_summary(trades: Sequence[ReconciledTrade]) -> PortfolioSummary:
    executed = [t for t in trades if t.is_executed]
    if not executed:
        return PortfolioSummary()
    wins = sum(1 for t in executed if (t.pnl or 0) > 0)
    return PortfolioSummary(
        total_trades=len(executed),
        total_volume=sum(t.matched_execution_amount or 0 for t in executed),
        total_pnl=sum(t.pnl or 0 for t in executed),
        win_rate=wins / len(executed) * 100,
    )


def filter_by_date(
    trades: Sequence[ReconciledTrade],
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> List[ReconciledTrade]:
    """Trades whose signal time falls in [start, end]; open bounds allowed."""
    lo = to_epoch(start) if start else None
    hi = to_epoch(end) if end else None
    kept = []
    for t in trades:
        ts = to_epoch(t.timestamp)
        if lo is not None and ts < lo:
            continue
        if hi is not None and ts > hi:
            continue
        kept.append(t)
    return kept


def calculate_analytics(
    trades: Sequence[ReconciledTrade],
    config: AnalyticsConfig | None = None,
    as_of: Optional[datetime] = None,
) -> AnalyticsResult:
    cfg = config or AnalyticsConfig()
    executed = successful_trades(trades)
    pnl_by_trader, win_rate_by_trader = trader_series(executed, cfg.timezone)

    result = AnalyticsResult(
        summary=portfolio_summary(trades),
        trader_stats=compute_trader_stats(list(trades), as_of=as_of),
        overall_time_series=cumulative_walk(executed, tz_name=cfg.timezone),
        pnl_over_time_by_trader=pnl_by_trader,
        win_rate_over_time_by_trader=win_rate_by_trader,
        daily_trade_counts=daily_trade_counts(executed, cfg.timezone),
    )
    logger.info(
        f"Analytics: {len(executed)}/{len(trades)} executed trades, "
        f"{len(result.trader_stats)} traders"
    )
    return result
