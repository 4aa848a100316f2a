"""Tests for CSV loading."""
import io

import pytest

from signal_audit.errors import MalformedInputError
from signal_audit.ingest.loaders import load_chat, load_portfolio


def test_load_portfolio_partitions(portfolio_csv):
    parts = load_portfolio(portfolio_csv)
    assert len(parts.activity) == 1
    assert len(parts.active) == 1
    assert len(parts.closed) == 1

    fill = parts.activity[0]
    assert fill.avg_price == 0.40
    assert fill.usdc_size == 50.0
    assert fill.timestamp == 1736510700
    assert fill.transaction_hash == "0xaaa"

    closed = parts.closed[0]
    assert closed.cur_price == 1.0
    assert closed.price is None
    assert closed.realized_pnl == 70.0


def test_load_chat(chat_csv):
    entries = load_chat(chat_csv)
    assert len(entries) == 4
    assert entries[0].sender_id == "bot"
    assert "**Alice**" in entries[0].content
    assert entries[0].content.count("\n") == 1


def test_load_chat_missing_columns():
    with pytest.raises(MalformedInputError, match="content"):
        load_chat(io.StringIO("date,sender_id\n2025-01-01,bot\n"))


def test_empty_csv_is_malformed():
    with pytest.raises(MalformedInputError):
        load_portfolio(io.StringIO(""))


def test_unterminated_quote_is_malformed():
    text = "date,sender_id,content\n2025-01-01,bot,\"never closed\n"
    with pytest.raises(MalformedInputError):
        load_chat(io.StringIO(text))


def test_header_only_chat_with_wrong_columns_is_malformed():
    with pytest.raises(MalformedInputError, match="sender_id, content"):
        load_chat(io.StringIO("date,who,what\n"))


def test_header_only_chat_is_empty():
    assert load_chat(io.StringIO("date,sender_id,content\n")) == []
