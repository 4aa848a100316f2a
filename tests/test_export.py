"""Tests for CSV/JSON export."""
import json

import pandas as pd

from signal_audit.analytics.summary import calculate_analytics
from signal_audit.export import EXPORT_COLUMNS, fmt_number, trade_row, write_analytics_json, write_trades_csv
from signal_audit.models import MatchConfidence, PositionStatus, ReconciledTrade, TradeResult, TradeStatus


def executed_trade(make_signal):
    trade = ReconciledTrade.from_signal(make_signal())
    trade.matched_position_status = PositionStatus.ACTIVE
    trade.match_confidence = MatchConfidence.EXACT
    trade.result = TradeResult.OPEN
    trade.matched_execution_amount = 50
    trade.matched_execution_price = 0.4
    trade.shares = 125
    trade.pnl = 18.75
    trade.latency_seconds = 300
    trade.total_attempted_amount = 50
    return trade


def test_fmt_number():
    assert fmt_number(None) == ""
    assert fmt_number(0) == "0.00"
    assert fmt_number(18.756) == "18.76"
    assert fmt_number(-3) == "-3.00"


def test_trade_row_labels(make_signal):
    row = trade_row(executed_trade(make_signal))

    assert list(row) == EXPORT_COLUMNS
    assert row["Match Type"] == "Exact (Activity)"
    assert row["Matched Status"] == "Active"
    assert row["Result"] == "OPEN"
    assert row["PnL"] == "18.75"
    assert row["Exec Price"] == "0.40"
    assert row["Current Value"] == ""
    assert row["Failure Reason"] == ""


def test_unmatched_row_is_blank_not_zero(make_signal):
    trade = ReconciledTrade.from_signal(
        make_signal(status=TradeStatus.FAILED, failure_reason="Low Liquidity"),
    )
    row = trade_row(trade)
    assert row["Status"] == "Failed"
    assert row["Failure Reason"] == "Low Liquidity"
    assert row["PnL"] == ""
    assert row["Result"] == ""
    assert row["Match Type"] == "None"


def test_write_trades_csv(tmp_path, make_signal):
    path = write_trades_csv([executed_trade(make_signal)], tmp_path / "nested" / "trades.csv")
    df = pd.read_csv(path, dtype=str, keep_default_na=False)

    assert list(df.columns) == EXPORT_COLUMNS
    assert df.loc[0, "Trader"] == "Alice"
    assert df.loc[0, "Signal Amount"] == "50.00"
    assert df.loc[0, "Latency (s)"] == "300.00"


def test_write_analytics_json(tmp_path, make_signal):
    result = calculate_analytics([executed_trade(make_signal)])
    path = write_analytics_json(result, tmp_path / "analytics.json")
    data = json.loads(path.read_text())

    assert set(data) == {
        "summary", "trader_stats", "overall_time_series",
        "pnl_over_time_by_trader", "win_rate_over_time_by_trader", "daily_trade_counts",
    }
    assert data["summary"]["total_trades"] == 1
    assert data["trader_stats"][0]["name"] == "Alice"
