"""Portfolio snapshot normalization.

Cleans currency text, maps loosely spelled headers onto canonical field
names and splits rows into open positions, closed positions and activity.
"""
from __future__ import annotations

import logging
import re
from typing import Any, Dict, Iterable, Optional

from signal_audit.models import PortfolioPartitions, PortfolioRow

logger = logging.getLogger(__name__)

_NUMERIC_JUNK = re.compile(r"[^0-9.\-]")

# Lower-cased, space-free header -> PortfolioRow field name
HEADER_ALIASES: Dict[str, str] = {
    "category": "category",
    "asset": "asset",
    "slug": "slug",
    "title": "title",
    "outcome": "outcome",
    "side": "side",
    "timestamp": "timestamp",
    "price": "price",
    "curprice": "cur_price",
    "size": "size",
    "usdcsize": "usdc_size",
    "avgprice": "avg_price",
    "currentvalue": "current_value",
    "cashpnl": "cash_pnl",
    "realizedpnl": "realized_pnl",
    "transactionhash": "transaction_hash",
    "date": "date",
    "url": "url",
}

NUMERIC_FIELDS = (
    "size", "avg_price", "price", "cur_price", "current_value",
    "cash_pnl", "realized_pnl", "usdc_size",
)

PARTITION_KEYWORDS = {
    "OPEN_POSITION": "active",
    "CLOSED_POSITION": "closed",
    "ACTIVITY_HISTORY": "activity",
}


def clean_float(val: Any) -> float:
    """Parse currency text such as "$1,234.56" or "($10.50)".

    Parenthesized values are negative whatever sign characters they hold.
    Returns 0 for blank or unparseable input.
    """
    if isinstance(val, bool):
        return float(val)
    if isinstance(val, (int, float)):
        return float(val)
    if val is None:
        return 0.0
    text = str(val).strip()
    if not text:
        return 0.0

    accounting_negative = text.startswith("(") and text.endswith(")")
    text = _NUMERIC_JUNK.sub("", text)

    m = re.match(r"-?\d*\.?\d+|-?\d+\.?", text)
    if not m:
        return 0.0
    try:
        num = float(m.group(0))
    except ValueError:
        return 0.0

    if accounting_negative:
        num = -abs(num)
    return num


def normalize_header(header: str) -> str:
    """Map a raw CSV header onto a PortfolioRow field name.

    Unknown headers are returned trimmed and otherwise untouched.
    """
    h = str(header).strip()
    key = h.lower().replace(" ", "").replace("_", "")
    return HEADER_ALIASES.get(key, h)


def _blank(val: Any) -> bool:
    return val is None or (isinstance(val, str) and not val.strip())


def _parse_timestamp(val: Any) -> Optional[int]:
    if _blank(val):
        return None
    m = re.match(r"\s*(-?\d+)", str(val))
    return int(m.group(1)) if m else None


def build_row(raw: Dict[str, Any]) -> PortfolioRow:
    """Build a PortfolioRow from one tokenized CSV record."""
    fields: Dict[str, Any] = {}
    for header, val in raw.items():
        name = normalize_header(header)
        if name in PortfolioRow.model_fields:
            fields[name] = val

    for name in NUMERIC_FIELDS:
        val = fields.get(name)
        fields[name] = None if _blank(val) else clean_float(val)

    fields["timestamp"] = _parse_timestamp(fields.get("timestamp"))

    for name in ("category", "slug", "title"):
        val = fields.get(name)
        fields[name] = "" if _blank(val) else str(val).strip()
    for name in ("asset", "outcome", "side", "transaction_hash", "date", "url"):
        val = fields.get(name)
        fields[name] = None if _blank(val) else str(val).strip()

    return PortfolioRow(**fields)


def classify_partition(category: Optional[str]) -> Optional[str]:
    """Return "active", "closed", "activity" or None for a category tag."""
    cat = (category or "").upper()
    for keyword, partition in PARTITION_KEYWORDS.items():
        if keyword in cat:
            return partition
    return None


def partition_rows(rows: Iterable[PortfolioRow]) -> PortfolioPartitions:
    """Split rows into the three partitions, preserving input order."""
    parts = PortfolioPartitions()
    dropped = 0
    for row in rows:
        partition = classify_partition(row.category)
        if partition is None:
            dropped += 1
            logger.debug(f"Dropping row with unknown category {row.category!r}: {row.slug}")
            continue
        getattr(parts, partition).append(row)

    logger.info(
        f"Portfolio: {len(parts.active)} open, {len(parts.closed)} closed, "
        f"{len(parts.activity)} activity ({dropped} dropped)"
    )
    return parts


def normalize_portfolio(records: Iterable[Dict[str, Any]]) -> PortfolioPartitions:
    """Tokenized portfolio records -> partitioned PortfolioRows."""
    return partition_rows(build_row(r) for r in records)
