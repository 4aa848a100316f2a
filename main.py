#!/usr/bin/env python3
"""
Trading Bot Signal Audit

Reconciles the bot's chat signals with a consolidated portfolio export and
reports per-trader performance.

Usage:
    python main.py analyze --portfolio ./data/portfolio.csv --chat ./data/chat.csv
    python main.py analyze --portfolio p.csv --chat c.csv --since 2025-01-01 --out ./out/jan
"""
import logging
import sys
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional

import click

from signal_audit import MalformedInputError, load_config
from signal_audit.export import write_analytics_json, write_trades_csv
from signal_audit.ingest.loaders import load_chat, load_portfolio
from signal_audit.pipeline import run_pipeline
from signal_audit.shared.time_utils import localize

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[
        logging.StreamHandler(sys.stdout),
    ],
)

logger = logging.getLogger(__name__)

DATE_FORMATS = ["%Y-%m-%d", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%d %H:%M:%S"]


def _end_of_day(value: Optional[datetime]) -> Optional[datetime]:
    # A bare date for --until means "through the end of that day"
    if value is not None and value.time() == datetime.min.time():
        return value + timedelta(days=1) - timedelta(microseconds=1)
    return value


def _in_zone(value: Optional[datetime], tz_name: str) -> Optional[datetime]:
    return localize(value, tz_name) if value is not None else None


@click.group()
@click.version_option(version="1.0.0")
def cli():
    """Trading Bot Signal Audit.

    Match chat trade signals to executions and positions, then summarize
    performance per trader.
    """
    pass


@cli.command()
@click.option(
    "--portfolio",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help="Consolidated portfolio CSV (OPEN_POSITION / CLOSED_POSITION / ACTIVITY_HISTORY rows)",
)
@click.option(
    "--chat",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help="Chat log CSV with date, sender_id, content columns",
)
@click.option(
    "--out",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Output directory (default: $OUTPUT_DIR or ./out)",
)
@click.option(
    "--since",
    type=click.DateTime(formats=DATE_FORMATS),
    default=None,
    help="Only report trades signalled on or after this date ($REPORT_TZ, else local time)",
)
@click.option(
    "--until",
    type=click.DateTime(formats=DATE_FORMATS),
    default=None,
    help="Only report trades signalled on or before this date",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose logging (DEBUG level)",
)
def analyze(
    portfolio: Path,
    chat: Path,
    out: Optional[Path],
    since: Optional[datetime],
    until: Optional[datetime],
    verbose: bool,
):
    """Reconcile signals and write processed_trades.csv + analytics.json.

    Examples:
        python main.py analyze --portfolio portfolio.csv --chat chat.csv
        python main.py analyze --portfolio portfolio.csv --chat chat.csv --until 2025-02-01 -v
    """
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    config = load_config()
    out = out or config.output_dir

    try:
        partitions = load_portfolio(portfolio)
        entries = load_chat(chat)
        result = run_pipeline(
            entries,
            partitions,
            config,
            since=_in_zone(since, config.analytics.timezone),
            until=_in_zone(_end_of_day(until), config.analytics.timezone),
        )
    except MalformedInputError as e:
        click.echo(f"\n❌ Error: {e}", err=True)
        if verbose:
            logger.exception("Analysis failed")
        sys.exit(1)

    trades_path = write_trades_csv(result.trades, out / "processed_trades.csv")
    analytics_path = write_analytics_json(result.analytics, out / "analytics.json")

    summary = result.analytics.summary
    click.echo(f"\n📊 Summary:")
    click.echo(f"  - Signals: {len(result.trades):,}")
    click.echo(f"  - Executed trades: {summary.total_trades:,}")
    click.echo(f"  - Volume: ${summary.total_volume:,.2f}")
    click.echo(f"  - Total PnL: ${summary.total_pnl:,.2f}")
    click.echo(f"  - Win rate: {summary.win_rate:.1f}%")

    if result.analytics.trader_stats:
        click.echo(f"\n👤 Traders:")
        click.echo(
            f"  {'Trader':20s} {'PnL':>12s} {'Win%':>7s} {'PF':>6s} "
            f"{'Attempts':>9s} {'Avg bet':>10s} {'Favorite':>10s}"
        )
        for s in result.analytics.trader_stats:
            click.echo(
                f"  {s.name[:20]:20s} {s.total_pnl:>12,.2f} {s.win_rate:>6.1f}% "
                f"{s.profit_factor:>6.2f} {s.total_attempts:>9d} "
                f"{s.avg_successful_bet:>10,.2f} {s.favorite_category:>10s}"
            )

    click.echo(f"\n💾 Trades saved to: {trades_path}")
    click.echo(f"💾 Analytics saved to: {analytics_path}")


if __name__ == "__main__":
    cli()
