"""Exit price and win/loss inference for closed positions.

Settlement data is often partial, so the resolver walks an ordered list
of rules and applies the first one whose predicate holds.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from signal_audit.config import SettlementConfig
from signal_audit.models import PortfolioRow, TradeResult

Resolution = Tuple[float, TradeResult]


@dataclass(frozen=True)
class SettlementRule:
    name: str
    applies: Callable[[PortfolioRow, SettlementConfig], bool]
    resolve: Callable[[PortfolioRow, SettlementConfig], Resolution]


@dataclass(frozen=True)
class Settlement:
    exit_price: float
    result: TradeResult
    pnl: float
    current_value: float
    rule: str


def _by_realized_pnl(row: PortfolioRow, cfg: SettlementConfig) -> Resolution:
    if (row.realized_pnl or 0) > 0:
        return 1.0, TradeResult.WIN
    return 0.0, TradeResult.LOSS


def _by_settlement_price(row: PortfolioRow, cfg: SettlementConfig) -> Resolution:
    exit_price = row.cur_price
    result = TradeResult.WIN if exit_price > cfg.win_threshold else TradeResult.LOSS
    return exit_price, result


def _is_extreme(price: Optional[float], cfg: SettlementConfig) -> bool:
    return price is not None and (price > cfg.extreme_high or price < cfg.extreme_low)


def _by_extreme_price(row: PortfolioRow, cfg: SettlementConfig) -> Resolution:
    if row.price > cfg.extreme_high:
        return 1.0, TradeResult.WIN
    return 0.0, TradeResult.LOSS


def _by_value_ratio(row: PortfolioRow, cfg: SettlementConfig) -> Resolution:
    ratio = row.current_value / abs(row.size)
    if ratio > cfg.extreme_high:
        return 1.0, TradeResult.WIN
    if ratio < cfg.extreme_low:
        return 0.0, TradeResult.LOSS
    return _by_realized_pnl(row, cfg)


SETTLEMENT_RULES: tuple[SettlementRule, ...] = (
    SettlementRule(
        "settlement_price",
        lambda row, cfg: row.cur_price is not None,
        _by_settlement_price,
    ),
    SettlementRule(
        "extreme_price",
        lambda row, cfg: _is_extreme(row.price, cfg),
        _by_extreme_price,
    ),
    SettlementRule(
        "value_ratio",
        lambda row, cfg: bool(row.size) and row.current_value is not None,
        _by_value_ratio,
    ),
    SettlementRule(
        "realized_pnl",
        lambda row, cfg: True,
        _by_realized_pnl,
    ),
)


def resolve_settlement(
    row: PortfolioRow,
    entry_price: float,
    shares: float,
    config: SettlementConfig | None = None,
) -> Settlement:
    """Value a closed position bought at ``entry_price`` for ``shares``.

    Returns:
        Settlement with pnl = (exit - entry) * shares and
        current_value = exit * shares.
    """
    cfg = config or SettlementConfig()
    for rule in SETTLEMENT_RULES:
        if rule.applies(row, cfg):
            exit_price, result = rule.resolve(row, cfg)
            return Settlement(
                exit_price=exit_price,
                result=result,
                pnl=(exit_price - entry_price) * shares,
                current_value=exit_price * shares,
                rule=rule.name,
            )
    raise AssertionError("realized_pnl rule always applies")
