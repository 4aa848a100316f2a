"""Trade-signal extraction from the bot's chat log.

A chat entry can announce several trades, one per line, e.g.::

    **Alice** copied a trade
    ✓ BUY "Yes" $50 on [Lakers vs Celtics](https://polymarket.com/event/nba-lal-bos)
    BUY "No" $20 https://polymarket.com/market/fed-cuts-rates-in-june
    ✗ Failed to buy: Insufficient USDC balance
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional

from signal_audit.errors import MalformedInputError
from signal_audit.ingest.portfolio import clean_float
from signal_audit.models import Action, ChatEntry, SignalEvent, TradeStatus
from signal_audit.shared.categories import categorize
from signal_audit.shared.text import humanize_slug
from signal_audit.shared.time_utils import parse_date

logger = logging.getLogger(__name__)

UNKNOWN_TRADER = "Unknown Trader"
PORTFOLIO_SUMMARY_MARKER = "Your Polymarket Portfolio"

SKIP_GLYPH = "\u23ed"  # ⏭️
FAIL_GLYPH = "\u2717"  # ✗

SKIPPED = "Skipped"
EXECUTION_FAILED = "Execution Failed"

# Checked in order, first hit wins.
FAILURE_RULES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("Insufficient USDC balance",), "Insufficient Balance"),
    (("Market odds too high", "Market odds too low"), "Odds Limit Exceeded"),
    (("Market liquidity too low",), "Low Liquidity"),
    (("Would exceed max spend limit",), "Max Spend Limit"),
    (("Balance too small to sell",), "Balance Too Small"),
    (("Order status: delayed",), "Delayed/Retrying"),
    (("Failed to buy",), "Generic Failure"),
)

_ACTION_WORD = re.compile(r"(BUY|SELL)", re.IGNORECASE)
_TRADE = re.compile(r"(BUY|SELL)[:\s]+(?:[\"']?([^\"'$]+)[\"']?)?\s+\$([0-9,.]+)", re.IGNORECASE)
_TRADE_LOOSE = re.compile(r"(BUY|SELL)\s+(.*?)\s+\$", re.IGNORECASE)
_MARKET_PATH = r"https?://(?:www\.)?polymarket\.com/(?:market|event)/"
_MARKDOWN_LINK = re.compile(r"\[([^\]]+)\]\((" + _MARKET_PATH + r"([^)\s]+))\)")
_BARE_URL = re.compile(r"(" + _MARKET_PATH + r"([^)\s\]]+))")
_TRADER_MARKER = re.compile(r"\*\*([^*]+)\*\*")


@dataclass
class TradeDetails:
    action: Action = Action.UNKNOWN
    outcome: str = ""
    amount: float = 0.0
    market_title: str = ""
    market_url: str = ""
    market_slug: str = ""
    status: TradeStatus = TradeStatus.SUCCESS
    failure_reason: Optional[str] = None


def extract_trader_name(content: str) -> str:
    m = _TRADER_MARKER.search(content or "")
    return m.group(1).strip() if m else UNKNOWN_TRADER


def failure_reason(line: Optional[str]) -> Optional[str]:
    """Map known failure phrasing onto a reason, or None."""
    if not line:
        return None
    for phrases, reason in FAILURE_RULES:
        if any(p in line for p in phrases):
            return reason
    return None


def _clean_slug(slug: str) -> str:
    return slug.split("?", 1)[0].split("#", 1)[0]


def _resolve_market(line: str, details: TradeDetails) -> None:
    link = _MARKDOWN_LINK.search(line)
    if link:
        details.market_title = link.group(1).strip()
        details.market_url = link.group(2)
        details.market_slug = _clean_slug(link.group(3))
        return

    bare = _BARE_URL.search(line)
    if bare:
        url = bare.group(1).rstrip(".,;:!")
        slug = _clean_slug(bare.group(2).rstrip(".,;:!"))
        details.market_url = url
        details.market_slug = slug
        details.market_title = humanize_slug(slug.rstrip("/").split("/")[-1])


def parse_trade_line(line: str, next_line: Optional[str] = None) -> TradeDetails:
    """Extract trade details from one chat line plus its successor."""
    details = TradeDetails()

    m = _TRADE.search(line)
    if m:
        details.action = Action(m.group(1).upper())
        details.outcome = (m.group(2) or "").strip()
        details.amount = clean_float(m.group(3))

    if not details.outcome:
        loose = _TRADE_LOOSE.search(line)
        if loose:
            details.outcome = loose.group(2).strip()

    _resolve_market(line, details)

    if SKIP_GLYPH in line or FAIL_GLYPH in line:
        details.status = TradeStatus.FAILED
        reason = failure_reason(line)
        if reason:
            details.failure_reason = reason
        elif SKIP_GLYPH in line:
            details.failure_reason = SKIPPED
        else:
            details.failure_reason = EXECUTION_FAILED

    # Failure notices usually land one line below the action line
    next_reason = failure_reason(next_line)
    if next_reason:
        details.status = TradeStatus.FAILED
        details.failure_reason = next_reason

    return details


def _is_candidate_entry(content: str) -> bool:
    if PORTFOLIO_SUMMARY_MARKER in content:
        return False
    return bool(_ACTION_WORD.search(content)) or "http" in content


def extract_signals(entries: Iterable[ChatEntry]) -> List[SignalEvent]:
    """Extract every trade signal from the chat log, in log order.

    Raises:
        MalformedInputError: if a trade-bearing entry has an unparseable date.
    """
    signals: List[SignalEvent] = []
    noise = 0

    for entry_index, entry in enumerate(entries):
        content = entry.content or ""
        if not _is_candidate_entry(content):
            continue

        try:
            timestamp = parse_date(entry.date)
        except ValueError as e:
            raise MalformedInputError(f"Chat entry {entry_index} has an invalid date: {e}") from e

        trader = extract_trader_name(content)
        lines = content.splitlines()

        for line_index, line in enumerate(lines):
            if not _ACTION_WORD.search(line):
                continue
            next_line = lines[line_index + 1] if line_index + 1 < len(lines) else None
            details = parse_trade_line(line, next_line)

            if not details.market_slug and not details.market_title:
                noise += 1
                logger.debug(f"No market reference, skipping line: {line[:80]}")
                continue

            signals.append(SignalEvent(
                entry_index=entry_index,
                line_index=line_index,
                date=entry.date,
                timestamp=timestamp,
                trader_name=trader,
                action=details.action,
                outcome=details.outcome,
                amount=details.amount,
                market_title=details.market_title,
                market_slug=details.market_slug,
                market_url=details.market_url,
                category=categorize(details.market_title, details.market_slug),
                status=details.status,
                failure_reason=details.failure_reason,
            ))

    logger.info(f"Extracted {len(signals)} signals ({noise} noise lines skipped)")
    return signals
