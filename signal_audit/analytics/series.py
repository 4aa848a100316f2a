"""Time series over executed trades: cumulative PnL/win rate and daily counts."""
from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

import pandas as pd

from signal_audit.analytics.stats import group_by_trader
from signal_audit.models import ReconciledTrade, TimeSeriesPoint
from signal_audit.shared.time_utils import (
    day_start_epoch,
    epoch_to_day_label,
    local_day,
    to_epoch,
)


def sort_by_time(trades: Sequence[ReconciledTrade]) -> List[ReconciledTrade]:
    # sorted() is stable: same-second trades keep log order
    return sorted(trades, key=lambda t: to_epoch(t.timestamp))


def cumulative_walk(
    trades: Sequence[ReconciledTrade],
    trader: Optional[str] = None,
    tz_name: str = "",
) -> List[TimeSeriesPoint]:
    """One point per trade: running PnL as ``value``, running win rate (%).

    Each point extends the previous one, nothing is recomputed.
    """
    points: List[TimeSeriesPoint] = []
    running_pnl = 0.0
    wins = 0

    for count, t in enumerate(sort_by_time(trades), start=1):
        pnl = t.pnl or 0.0
        running_pnl += pnl
        if pnl > 0:
            wins += 1
        ts = to_epoch(t.timestamp)
        points.append(TimeSeriesPoint(
            date=epoch_to_day_label(ts, tz_name),
            timestamp=ts,
            value=running_pnl,
            win_rate=wins / count * 100,
            trader=trader,
        ))
    return points


def align_trader_series(
    points: Sequence[TimeSeriesPoint],
    traders: Sequence[str],
    field: str = "value",
    tz_name: str = "",
) -> List[TimeSeriesPoint]:
    """Spread per-trader points over the union of all timestamps.

    A trader's value is carried forward from its own last point and is 0
    before its first trade.
    """
    if not points:
        return []

    df = pd.DataFrame(
        [{"timestamp": p.timestamp, "trader": p.trader, "value": getattr(p, field)} for p in points]
    )
    wide = (
        df.groupby(["timestamp", "trader"], sort=True)["value"].last()
        .unstack("trader")
        .reindex(columns=list(traders))
        .sort_index()
        .ffill()
        .fillna(0.0)
    )

    aligned: List[TimeSeriesPoint] = []
    for ts, row in wide.iterrows():
        label = epoch_to_day_label(float(ts), tz_name)
        for trader in traders:
            aligned.append(TimeSeriesPoint(
                date=label,
                timestamp=float(ts),
                value=float(row[trader]),
                trader=trader,
            ))
    return aligned


def trader_series(
    executed: Sequence[ReconciledTrade],
    tz_name: str = "",
) -> Tuple[List[TimeSeriesPoint], List[TimeSeriesPoint]]:
    """(cumulative PnL, cumulative win rate) per trader, aligned for charting."""
    by_trader = group_by_trader(executed)
    traders = list(by_trader)

    walks: List[TimeSeriesPoint] = []
    for trader, trades in by_trader.items():
        walks.extend(cumulative_walk(trades, trader=trader, tz_name=tz_name))

    pnl = align_trader_series(walks, traders, "value", tz_name)
    win_rate = align_trader_series(walks, traders, "win_rate", tz_name)
    return pnl, win_rate


def daily_trade_counts(
    executed: Sequence[ReconciledTrade],
    tz_name: str = "",
) -> List[TimeSeriesPoint]:
    """Executed trades per trader per calendar day.

    Every day from the first to the last trade day gets a point for every
    trader, zero included.
    """
    if not executed:
        return []

    traders = list(group_by_trader(executed))
    df = pd.DataFrame({
        "day": [local_day(t.timestamp, tz_name).date() for t in executed],
        "trader": [t.trader_name for t in executed],
    })
    days = [d.date() for d in pd.date_range(min(df["day"]), max(df["day"]), freq="D")]
    counts = (
        pd.crosstab(df["day"], df["trader"])
        .reindex(index=days, columns=traders, fill_value=0)
    )

    points: List[TimeSeriesPoint] = []
    for day, row in counts.iterrows():
        ts = day_start_epoch(day, tz_name)
        for trader in traders:
            points.append(TimeSeriesPoint(
                date=day.isoformat(),
                timestamp=ts,
                value=float(row[trader]),
                trader=trader,
            ))
    return points
