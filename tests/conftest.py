"""Shared test fixtures: row/signal factories and sample CSV text."""
from __future__ import annotations

from datetime import datetime, timezone

import pytest

from signal_audit.models import Action, Category, PortfolioRow, SignalEvent, TradeStatus

T0 = datetime(2025, 1, 10, 12, 0, 0, tzinfo=timezone.utc)
T0_EPOCH = int(T0.timestamp())


@pytest.fixture
def t0_epoch():
    return T0_EPOCH


@pytest.fixture
def make_row():
    """PortfolioRow factory; category defaults to an activity row."""
    def _make(category: str = "3_ACTIVITY_HISTORY", **fields) -> PortfolioRow:
        return PortfolioRow(category=category, **fields)
    return _make


@pytest.fixture
def make_signal():
    """SignalEvent factory anchored at 2025-01-10 12:00 UTC."""
    def _make(
        slug: str = "team-a-wins",
        outcome: str = "Yes",
        action: Action = Action.BUY,
        amount: float = 50.0,
        offset: float = 0,
        trader: str = "Alice",
        status: TradeStatus = TradeStatus.SUCCESS,
        failure_reason: str | None = None,
        index: int = 0,
        url: str = "",
    ) -> SignalEvent:
        when = datetime.fromtimestamp(T0_EPOCH + offset, tz=timezone.utc)
        return SignalEvent(
            entry_index=index,
            line_index=0,
            date=when.isoformat(),
            timestamp=when,
            trader_name=trader,
            action=action,
            outcome=outcome,
            amount=amount,
            market_title=slug.replace("-", " ").title(),
            market_slug=slug,
            market_url=url,
            category=Category.NON_SPORT,
            status=status,
            failure_reason=failure_reason,
        )
    return _make


PORTFOLIO_CSV = """Category,asset,slug,title,outcome,side,size,Avg Price,price,curPrice,Current Value,Cash PnL,Realized PnL,USDC Size,timestamp,transactionHash,date
3_ACTIVITY_HISTORY,tok-a,team-a-wins-game1,Team A wins,Yes,BUY,125,0.40,0.40,,,,,50,1736510700,0xaaa,
1_OPEN_POSITION,tok-a,team-a-wins-game1,Team A wins,Yes,,125,0.40,0.55,,68.75,18.75,,,,,
2_CLOSED_POSITION,tok-b,fed-cuts-in-march,Fed cuts in March,No,,100,0.30,,1,100,,70,,,,2025-01-20T00:00:00Z
4_SUMMARY,,,,,,,,,,,,,,,,
"""

CHAT_CSV = '''date,sender_id,content
2025-01-10T12:00:00Z,bot,"**Alice** copied a trade
BUY ""Yes"" $50 on [Team A wins](https://polymarket.com/event/team-a-wins)"
2025-01-11T09:00:00Z,bot,"**Bob** copied a trade
BUY ""No"" $30 https://polymarket.com/market/fed-cuts-in-march?tid=1"
2025-01-11T10:00:00Z,bot,"**Bob** copied a trade
BUY ""Yes"" $20 https://polymarket.com/market/aliens-land-2025
✗ Failed to buy: Insufficient USDC balance"
2025-01-11T11:00:00Z,bot,"Your Polymarket Portfolio: BUY more https://polymarket.com/market/x"
'''


@pytest.fixture
def portfolio_csv(tmp_path):
    path = tmp_path / "portfolio.csv"
    path.write_text(PORTFOLIO_CSV)
    return path


@pytest.fixture
def chat_csv(tmp_path):
    path = tmp_path / "chat.csv"
    path.write_text(CHAT_CSV, encoding="utf-8")
    return path
