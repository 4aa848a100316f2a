"""Tabular and JSON export of reconciled trades and analytics.

The CSV column order and labels are consumed downstream; keep them stable.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from signal_audit.models import AnalyticsResult, ReconciledTrade

logger = logging.getLogger(__name__)

EXPORT_COLUMNS: List[str] = [
    "Date",
    "Trader",
    "Category",
    "Action",
    "Outcome",
    "Signal Amount",
    "Total Attempted",
    "Exec Amount",
    "Exec Price",
    "Shares",
    "Market",
    "Status",
    "Failure Reason",
    "Matched Status",
    "Result",
    "Match Type",
    "PnL",
    "Current Value",
    "Latency (s)",
    "Tx Hash",
    "Link",
]


def fmt_number(value: Optional[float]) -> str:
    return "" if value is None else f"{value:.2f}"


def fmt_text(value: Any) -> str:
    if value is None:
        return ""
    return str(getattr(value, "value", value))


def trade_row(t: ReconciledTrade) -> Dict[str, str]:
    return {
        "Date": t.date,
        "Trader": t.trader_name,
        "Category": fmt_text(t.category),
        "Action": fmt_text(t.action),
        "Outcome": t.outcome,
        "Signal Amount": fmt_number(t.amount),
        "Total Attempted": fmt_number(t.total_attempted_amount),
        "Exec Amount": fmt_number(t.matched_execution_amount),
        "Exec Price": fmt_number(t.matched_execution_price),
        "Shares": fmt_number(t.shares),
        "Market": t.market_title,
        "Status": fmt_text(t.status),
        "Failure Reason": fmt_text(t.failure_reason),
        "Matched Status": fmt_text(t.matched_position_status),
        "Result": fmt_text(t.result),
        "Match Type": fmt_text(t.match_confidence),
        "PnL": fmt_number(t.pnl),
        "Current Value": fmt_number(t.current_value),
        "Latency (s)": fmt_number(t.latency_seconds),
        "Tx Hash": fmt_text(t.matched_tx_hash),
        "Link": t.market_url,
    }


def trades_to_frame(trades: Sequence[ReconciledTrade]) -> pd.DataFrame:
    return pd.DataFrame([trade_row(t) for t in trades], columns=EXPORT_COLUMNS)


def write_trades_csv(trades: Sequence[ReconciledTrade], path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    trades_to_frame(trades).to_csv(path, index=False)
    logger.info(f"Saved {len(trades)} trades to {path}")
    return path


def write_analytics_json(result: AnalyticsResult, path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(result.model_dump(mode="json"), f, indent=2, ensure_ascii=False)
    logger.info(f"Saved analytics to {path}")
    return path
