"""CSV decoding for the portfolio snapshot and the chat log."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import IO, Any, Dict, List, Union

import pandas as pd

from signal_audit.errors import MalformedInputError
from signal_audit.ingest.portfolio import normalize_portfolio
from signal_audit.models import ChatEntry, PortfolioPartitions

logger = logging.getLogger(__name__)

CsvSource = Union[str, Path, IO[str]]

CHAT_COLUMNS = ("date", "sender_id", "content")


def read_csv_frame(source: CsvSource, label: str) -> pd.DataFrame:
    """Read a CSV with every cell as a string.

    Raises:
        MalformedInputError: if the text cannot be tokenized.
    """
    try:
        df = pd.read_csv(
            source,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except pd.errors.EmptyDataError as e:
        raise MalformedInputError(f"{label} CSV is empty") from e
    except (pd.errors.ParserError, UnicodeDecodeError) as e:
        raise MalformedInputError(f"{label} CSV could not be parsed: {e}") from e

    logger.info(f"Loaded {len(df)} {label} rows")
    return df


def read_csv_records(source: CsvSource, label: str) -> List[Dict[str, Any]]:
    return read_csv_frame(source, label).to_dict(orient="records")


def load_portfolio(source: CsvSource) -> PortfolioPartitions:
    return normalize_portfolio(read_csv_records(source, "portfolio"))


def load_chat(source: CsvSource) -> List[ChatEntry]:
    """Chat entries in file order.

    Raises:
        MalformedInputError: if the text cannot be tokenized or a required
            column is missing, even when the file has no data rows.
    """
    df = read_csv_frame(source, "chat")

    columns = {str(c).strip().lower(): c for c in df.columns}
    missing = [c for c in CHAT_COLUMNS if c not in columns]
    if missing:
        raise MalformedInputError(f"chat CSV is missing required columns: {', '.join(missing)}")

    return [
        ChatEntry(
            date=str(r[columns["date"]]),
            sender_id=str(r[columns["sender_id"]]),
            content=str(r[columns["content"]]),
        )
        for r in df.to_dict(orient="records")
    ]
