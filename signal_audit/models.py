"""Pydantic models for portfolio rows, chat signals and reconciled trades."""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Action(str, Enum):
    BUY = "BUY"
    SELL = "SELL"
    UNKNOWN = "Unknown"


class TradeStatus(str, Enum):
    SUCCESS = "Success"
    FAILED = "Failed"
    PENDING = "Pending/Skipped"
    MISSING = "Not Executed"


class PositionStatus(str, Enum):
    ACTIVE = "Active"
    CLOSED = "Closed"
    NONE = "None"


class MatchConfidence(str, Enum):
    EXACT = "Exact (Activity)"
    INFERRED = "Inferred (Position)"
    NONE = "None"


class TradeResult(str, Enum):
    WIN = "WIN"
    LOSS = "LOSS"
    OPEN = "OPEN"


class Category(str, Enum):
    SPORT = "Sport"
    NON_SPORT = "Non-Sport"


class PortfolioRow(BaseModel):
    """One row of the consolidated portfolio snapshot.

    Numeric fields are None when the cell was blank, so "no settlement
    price" and "settlement price 0" stay distinguishable.
    """
    category: str = Field("", alias="Category")
    asset: Optional[str] = None
    slug: str = ""
    title: str = ""
    outcome: Optional[str] = None
    side: Optional[str] = None
    size: Optional[float] = None
    avg_price: Optional[float] = Field(None, alias="avgPrice")
    price: Optional[float] = None
    cur_price: Optional[float] = Field(None, alias="curPrice")
    current_value: Optional[float] = Field(None, alias="currentValue")
    cash_pnl: Optional[float] = Field(None, alias="cashPnl")
    realized_pnl: Optional[float] = Field(None, alias="realizedPnl")
    usdc_size: Optional[float] = Field(None, alias="usdcSize")
    timestamp: Optional[int] = None
    transaction_hash: Optional[str] = Field(None, alias="transactionHash")
    date: Optional[str] = None
    url: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class PortfolioPartitions(BaseModel):
    """The three disjoint partitions of a portfolio snapshot."""
    active: List[PortfolioRow] = Field(default_factory=list)
    closed: List[PortfolioRow] = Field(default_factory=list)
    activity: List[PortfolioRow] = Field(default_factory=list)


class ChatEntry(BaseModel):
    """One message of the bot's chat log."""
    date: str
    sender_id: str = ""
    content: str = ""


class SignalEvent(BaseModel):
    """A trade intent announced in the chat log, not yet confirmed."""
    entry_index: int
    line_index: int
    date: str
    timestamp: datetime
    trader_name: str
    action: Action
    outcome: str = ""
    amount: float = 0.0
    market_title: str = ""
    market_slug: str = ""
    market_url: str = ""
    category: Category = Category.NON_SPORT
    status: TradeStatus = TradeStatus.SUCCESS
    failure_reason: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class ReconciledTrade(BaseModel):
    """A signal enriched with whatever execution and position data matched it."""
    id: str
    date: str
    timestamp: datetime
    closed_date: Optional[str] = None
    trader_name: str
    action: Action
    outcome: str = ""
    amount: float = 0.0
    market_title: str = ""
    market_slug: str = ""
    market_url: str = ""
    category: Category = Category.NON_SPORT
    status: TradeStatus = TradeStatus.SUCCESS
    failure_reason: Optional[str] = None

    matched_position_status: PositionStatus = PositionStatus.NONE
    match_confidence: MatchConfidence = MatchConfidence.NONE
    matched_tx_hash: Optional[str] = None
    matched_execution_price: Optional[float] = None
    matched_execution_amount: Optional[float] = None
    shares: Optional[float] = None
    latency_seconds: Optional[float] = None

    pnl: Optional[float] = None
    current_value: Optional[float] = None
    result: Optional[TradeResult] = None

    total_attempted_amount: Optional[float] = None

    model_config = ConfigDict(validate_assignment=True)

    @classmethod
    def from_signal(cls, signal: SignalEvent) -> "ReconciledTrade":
        return cls(
            id=f"{signal.entry_index}-{signal.line_index}",
            date=signal.date,
            timestamp=signal.timestamp,
            trader_name=signal.trader_name,
            action=signal.action,
            outcome=signal.outcome,
            amount=signal.amount,
            market_title=signal.market_title,
            market_slug=signal.market_slug,
            market_url=signal.market_url,
            category=signal.category,
            status=signal.status,
            failure_reason=signal.failure_reason,
        )

    @property
    def is_executed(self) -> bool:
        return (
            self.status == TradeStatus.SUCCESS
            and self.matched_position_status in (PositionStatus.ACTIVE, PositionStatus.CLOSED)
        )


class TraderStats(BaseModel):
    name: str
    total_pnl: float = 0.0
    win_rate: float = 0.0
    profit_factor: float = 0.0
    long_short_ratio: float = 0.0
    avg_successful_bet: float = 0.0
    avg_holding_time_hours: float = 0.0
    avg_trades_per_day: float = 0.0
    total_attempts: int = 0
    best_trade: float = 0.0
    worst_trade: float = 0.0
    favorite_category: str = ""


class TimeSeriesPoint(BaseModel):
    date: str
    timestamp: float
    value: float
    win_rate: Optional[float] = None
    trader: Optional[str] = None


class PortfolioSummary(BaseModel):
    """Headline figures over executed trades."""
    total_trades: int = 0
    total_volume: float = 0.0
    total_pnl: float = 0.0
    win_rate: float = 0.0


class AnalyticsResult(BaseModel):
    summary: PortfolioSummary = Field(default_factory=PortfolioSummary)
    trader_stats: List[TraderStats] = Field(default_factory=list)
    overall_time_series: List[TimeSeriesPoint] = Field(default_factory=list)
    pnl_over_time_by_trader: List[TimeSeriesPoint] = Field(default_factory=list)
    win_rate_over_time_by_trader: List[TimeSeriesPoint] = Field(default_factory=list)
    daily_trade_counts: List[TimeSeriesPoint] = Field(default_factory=list)
