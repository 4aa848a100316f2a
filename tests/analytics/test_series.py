"""Tests for cumulative series and daily counts."""
import pytest

from signal_audit.analytics.series import (
    align_trader_series,
    cumulative_walk,
    daily_trade_counts,
    trader_series,
)
from signal_audit.models import PositionStatus, ReconciledTrade, TimeSeriesPoint

DAY = 86400


@pytest.fixture
def make_trade(make_signal):
    def _make(pnl, offset=0, trader="Alice"):
        trade = ReconciledTrade.from_signal(make_signal(offset=offset, trader=trader))
        trade.matched_position_status = PositionStatus.ACTIVE
        trade.pnl = pnl
        return trade
    return _make


def test_walk_accumulates_in_time_order(make_trade):
    trades = [make_trade(-5, offset=60), make_trade(10, offset=0), make_trade(3, offset=120)]
    points = cumulative_walk(trades, tz_name="UTC")

    assert [p.value for p in points] == [10, 5, 8]
    assert [p.win_rate for p in points] == pytest.approx([100, 50, 200 / 3])
    assert [p.timestamp for p in points] == sorted(p.timestamp for p in points)
    assert points[0].date == "2025-01-10"


def test_walk_of_winners_never_decreases(make_trade):
    points = cumulative_walk([make_trade(p, offset=i) for i, p in enumerate([1, 0, 2, 5])])
    values = [p.value for p in points]
    assert values == sorted(values)


def test_walk_empty():
    assert cumulative_walk([]) == []


def test_alignment_forward_fills_and_zero_fills():
    points = [
        TimeSeriesPoint(date="", timestamp=100, value=5, trader="Alice"),
        TimeSeriesPoint(date="", timestamp=200, value=-2, trader="Bob"),
        TimeSeriesPoint(date="", timestamp=300, value=9, trader="Alice"),
    ]
    aligned = align_trader_series(points, ["Alice", "Bob"], tz_name="UTC")
    table = {(p.timestamp, p.trader): p.value for p in aligned}

    assert table == {
        (100, "Alice"): 5, (100, "Bob"): 0,
        (200, "Alice"): 5, (200, "Bob"): -2,
        (300, "Alice"): 9, (300, "Bob"): -2,
    }


def test_trader_series_shares_timestamps(make_trade):
    trades = [make_trade(4, offset=0), make_trade(6, offset=30, trader="Bob"), make_trade(-1, offset=60)]
    pnl, win_rate = trader_series(trades, "UTC")

    assert len(pnl) == len(win_rate) == 6
    last = {p.trader: p.value for p in pnl if p.timestamp == pnl[-1].timestamp}
    assert last == {"Alice": 3, "Bob": 6}
    last_wr = {p.trader: p.value for p in win_rate if p.timestamp == win_rate[-1].timestamp}
    assert last_wr == {"Alice": 50, "Bob": 100}


def test_daily_counts_fill_empty_days(make_trade):
    trades = [
        make_trade(1, offset=0),
        make_trade(1, offset=60),
        make_trade(1, offset=3 * DAY, trader="Bob"),
    ]
    counts = daily_trade_counts(trades, "UTC")
    table = {(p.date, p.trader): p.value for p in counts}

    assert table == {
        ("2025-01-10", "Alice"): 2, ("2025-01-10", "Bob"): 0,
        ("2025-01-11", "Alice"): 0, ("2025-01-11", "Bob"): 0,
        ("2025-01-12", "Alice"): 0, ("2025-01-12", "Bob"): 0,
        ("2025-01-13", "Alice"): 0, ("2025-01-13", "Bob"): 1,
    }


def test_daily_counts_respect_zone(make_trade):
    # 12:00 UTC on the 10th is already the 11th in Auckland
    counts = daily_trade_counts([make_trade(1)], "Pacific/Auckland")
    assert [p.date for p in counts] == ["2025-01-11"]


def test_daily_counts_empty():
    assert daily_trade_counts([], "UTC") == []
