"""One full run: chat entries + portfolio partitions -> trades + analytics."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional

from signal_audit.analytics.summary import calculate_analytics, filter_by_date
from signal_audit.config import AppConfig
from signal_audit.ingest.chat import extract_signals
from signal_audit.models import AnalyticsResult, ChatEntry, PortfolioPartitions, ReconciledTrade
from signal_audit.reconcile.engine import reconcile_signals


@dataclass
class PipelineResult:
    trades: List[ReconciledTrade]
    analytics: AnalyticsResult


def run_pipeline(
    chat_entries: Iterable[ChatEntry],
    partitions: PortfolioPartitions,
    config: AppConfig | None = None,
    as_of: Optional[datetime] = None,
    since: Optional[datetime] = None,
    until: Optional[datetime] = None,
) -> PipelineResult:
    """Extract, reconcile and analyze.

    ``since``/``until`` narrow the reported trades after reconciliation, so
    the claim order over the full log is unaffected.

    Raises:
        MalformedInputError: if a chat entry cannot be read.
    """
    config = config or AppConfig()
    signals = extract_signals(chat_entries)
    trades = reconcile_signals(signals, partitions, config)
    if since or until:
        trades = filter_by_date(trades, since, until)
    analytics = calculate_analytics(trades, config.analytics, as_of=as_of)
    return PipelineResult(trades=trades, analytics=analytics)
