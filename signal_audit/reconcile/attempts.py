"""Total attempted amount per trader and market.

Runs after reconciliation: every signal for a (trader, market) pair counts,
whether it failed, was skipped or executed.
"""
from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, Tuple

from signal_audit.models import ReconciledTrade
from signal_audit.shared.text import simplify

AttemptKey = Tuple[str, str]


def attempt_key(trade: ReconciledTrade) -> AttemptKey:
    return trade.trader_name, simplify(trade.market_slug)


def attempted_amounts(trades: Iterable[ReconciledTrade]) -> Dict[AttemptKey, float]:
    totals: Dict[AttemptKey, float] = defaultdict(float)
    for t in trades:
        totals[attempt_key(t)] += t.amount
    return dict(totals)


def apply_attempted_amounts(
    trades: Iterable[ReconciledTrade],
    totals: Dict[AttemptKey, float],
) -> None:
    for t in trades:
        t.total_attempted_amount = totals.get(attempt_key(t))
