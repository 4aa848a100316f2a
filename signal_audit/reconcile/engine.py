"""Signal-to-execution reconciliation.

Each successful chat signal is matched, in log order, against the activity
history (confirmed fills), then against open and closed positions. An
activity row can be claimed by one signal only, so the claim set is owned
by a single ``Reconciler`` and lives exactly as long as one run.
"""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

from signal_audit.config import AppConfig
from signal_audit.models import (
    MatchConfidence,
    PortfolioPartitions,
    PortfolioRow,
    PositionStatus,
    ReconciledTrade,
    SignalEvent,
    TradeResult,
    TradeStatus,
)
from signal_audit.reconcile.attempts import apply_attempted_amounts, attempted_amounts
from signal_audit.reconcile.settlement import resolve_settlement
from signal_audit.shared.text import outcomes_conflict, outcomes_differ, simplify, slugs_match
from signal_audit.shared.time_utils import to_epoch

logger = logging.getLogger(__name__)

NO_EXECUTION_MATCHED = "No execution matched"


def position_matches(
    row: PortfolioRow,
    signal: SignalEvent,
    accept_missing_outcome: bool = True,
) -> bool:
    """Does a position row describe the market/outcome of ``signal``?

    The slugs must contain one another and, when both sides name an
    outcome, the outcomes must be the same. A row without an outcome
    matches only when ``accept_missing_outcome`` is set.
    """
    if not slugs_match(row.slug, signal.market_slug):
        return False
    if outcomes_differ(row.outcome, signal.outcome):
        return False
    if not simplify(row.outcome) and simplify(signal.outcome):
        return accept_missing_outcome
    return True


def find_position(
    rows: Sequence[PortfolioRow],
    signal: SignalEvent,
    asset_id: Optional[str] = None,
    accept_missing_outcome: bool = True,
) -> Optional[PortfolioRow]:
    """First position for ``signal``; a row holding ``asset_id`` beats any slug match."""
    if asset_id:
        for row in rows:
            if row.asset == asset_id:
                return row
    for row in rows:
        if position_matches(row, signal, accept_missing_outcome):
            return row
    return None


def _quoted_price(row: PortfolioRow) -> float:
    if row.price:
        return row.price
    if row.current_value and row.size:
        return row.current_value / row.size
    return 0.0


class Reconciler:
    """Reconciles signals against one portfolio snapshot.

    Not reusable across runs: ``claimed`` accumulates every activity index
    handed out so far.
    """

    def __init__(self, partitions: PortfolioPartitions, config: AppConfig | None = None):
        self.config = config or AppConfig()
        self.activity = partitions.activity
        self.active = partitions.active
        self.closed = partitions.closed
        self.claimed: set[int] = set()

        self.stats = {
            "exact": 0,
            "inferred": 0,
            "not_executed": 0,
            "not_attempted": 0,
        }

    # -- Step 1 -----------------------------------------------------------

    def find_activity(self, signal: SignalEvent) -> Optional[int]:
        """Index of the closest unclaimed fill for ``signal``, or None.

        Candidates must share the side and (fuzzily) the slug and must not
        contradict a yes/no outcome. The closest one inside the window wins;
        on a tie the earlier row is kept.
        """
        signal_ts = to_epoch(signal.timestamp)
        side = signal.action.value
        best_idx: Optional[int] = None
        best_diff = self.config.match.window_seconds

        for idx, row in enumerate(self.activity):
            if idx in self.claimed:
                continue
            if (row.side or "").upper() != side:
                continue
            if not slugs_match(row.slug, signal.market_slug):
                continue
            if outcomes_conflict(row.outcome, signal.outcome):
                continue
            if row.timestamp is None:
                continue
            diff = abs(row.timestamp - signal_ts)
            if diff < best_diff:
                best_diff = diff
                best_idx = idx

        return best_idx

    def _match_activity(self, signal: SignalEvent, trade: ReconciledTrade) -> bool:
        idx = self.find_activity(signal)
        if idx is None:
            return False

        self.claimed.add(idx)
        fill = self.activity[idx]
        entry_price = fill.avg_price or fill.price or 0.0
        shares = fill.size or 0.0

        trade.match_confidence = MatchConfidence.EXACT
        trade.matched_tx_hash = fill.transaction_hash
        trade.matched_execution_price = entry_price
        trade.matched_execution_amount = fill.usdc_size or entry_price * shares
        trade.shares = shares
        if fill.timestamp is not None:
            trade.latency_seconds = fill.timestamp - to_epoch(signal.timestamp)
        logger.debug(f"Signal {trade.id} claimed activity #{idx} ({fill.transaction_hash})")

        # Step 2: value the fill against the matching position
        active = self._find(self.active, signal, fill.asset)
        if active is not None:
            current_price = _quoted_price(active)
            trade.matched_position_status = PositionStatus.ACTIVE
            trade.result = TradeResult.OPEN
            trade.pnl = (current_price - entry_price) * shares
            trade.current_value = current_price * shares
            self._backfill_url(trade, active)
            return True

        closed = self._find(self.closed, signal, fill.asset)
        if closed is not None:
            settlement = resolve_settlement(closed, entry_price, shares, self.config.settlement)
            trade.matched_position_status = PositionStatus.CLOSED
            trade.closed_date = closed.date
            trade.result = settlement.result
            trade.pnl = settlement.pnl
            trade.current_value = settlement.current_value
            self._backfill_url(trade, closed)
        return True

    def _find(
        self,
        rows: Sequence[PortfolioRow],
        signal: SignalEvent,
        asset_id: Optional[str] = None,
    ) -> Optional[PortfolioRow]:
        return find_position(
            rows, signal, asset_id=asset_id,
            accept_missing_outcome=self.config.match.accept_missing_outcome,
        )

    # -- Step 3 -----------------------------------------------------------

    def _match_inferred_active(self, signal: SignalEvent, trade: ReconciledTrade) -> bool:
        pos = self._find(self.active, signal)
        if pos is None:
            return False

        trade.matched_position_status = PositionStatus.ACTIVE
        trade.match_confidence = MatchConfidence.INFERRED
        trade.result = TradeResult.OPEN

        # No fill known: approximate from the position's own book value
        if pos.avg_price and pos.size and pos.current_value is not None:
            cost = pos.avg_price * pos.size
            trade.matched_execution_price = pos.avg_price
            trade.matched_execution_amount = cost
            trade.shares = pos.size
            trade.current_value = pos.current_value
            trade.pnl = pos.current_value - cost

        self._backfill_url(trade, pos)
        return True

    def _match_inferred_closed(self, signal: SignalEvent, trade: ReconciledTrade) -> bool:
        pos = self._find(self.closed, signal)
        if pos is None:
            return False

        trade.matched_position_status = PositionStatus.CLOSED
        trade.match_confidence = MatchConfidence.INFERRED
        trade.closed_date = pos.date

        pnl = pos.realized_pnl if pos.realized_pnl is not None else pos.cash_pnl
        if pnl is not None:
            trade.pnl = pnl
            trade.result = TradeResult.WIN if pnl > 0 else TradeResult.LOSS
        if pos.current_value is not None:
            trade.current_value = pos.current_value
        if pos.avg_price and pos.size:
            trade.matched_execution_price = pos.avg_price
            trade.matched_execution_amount = pos.avg_price * pos.size
            trade.shares = pos.size

        self._backfill_url(trade, pos)
        return True

    # ---------------------------------------------------------------------

    @staticmethod
    def _backfill_url(trade: ReconciledTrade, row: PortfolioRow) -> None:
        if not trade.market_url and row.url:
            trade.market_url = row.url

    def reconcile(self, signal: SignalEvent) -> ReconciledTrade:
        """Build the ReconciledTrade for one signal.

        Steps are tried in order and the first one that finds a match wins.
        """
        trade = ReconciledTrade.from_signal(signal)
        if signal.status != TradeStatus.SUCCESS:
            self.stats["not_attempted"] += 1
            return trade

        steps = (
            ("exact", self._match_activity),
            ("inferred", self._match_inferred_active),
            ("inferred", self._match_inferred_closed),
        )
        for tally, step in steps:
            if step(signal, trade):
                self.stats[tally] += 1
                return trade

        trade.status = TradeStatus.MISSING
        trade.failure_reason = NO_EXECUTION_MATCHED
        self.stats["not_executed"] += 1
        return trade

    def reconcile_all(self, signals: Iterable[SignalEvent]) -> List[ReconciledTrade]:
        trades = [self.reconcile(s) for s in signals]
        logger.info(
            f"Reconciled {len(trades)} signals: {self.stats['exact']} exact, "
            f"{self.stats['inferred']} inferred, {self.stats['not_executed']} not executed, "
            f"{self.stats['not_attempted']} failed/skipped"
        )
        return trades


def reconcile_signals(
    signals: Iterable[SignalEvent],
    partitions: PortfolioPartitions,
    config: AppConfig | None = None,
) -> List[ReconciledTrade]:
    """Reconcile signals in log order, then attach total attempted amounts."""
    trades = Reconciler(partitions, config).reconcile_all(signals)
    apply_attempted_amounts(trades, attempted_amounts(trades))
    return trades
