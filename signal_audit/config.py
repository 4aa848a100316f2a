"""Central configuration for the signal audit pipeline.

Matching windows, settlement thresholds and reporting options live in
frozen dataclasses with environment variable overrides.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv


@dataclass(frozen=True)
class MatchConfig:
    window_seconds: float = 3600.0
    accept_missing_outcome: bool = True


@dataclass(frozen=True)
class SettlementConfig:
    win_threshold: float = 0.5
    extreme_high: float = 0.9
    extreme_low: float = 0.1


@dataclass(frozen=True)
class AnalyticsConfig:
    # Empty string means the machine's local zone.
    timezone: str = ""


@dataclass
class AppConfig:
    match: MatchConfig = field(default_factory=MatchConfig)
    settlement: SettlementConfig = field(default_factory=SettlementConfig)
    analytics: AnalyticsConfig = field(default_factory=AnalyticsConfig)
    output_dir: Path = Path("out")


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def load_config(env_file: Path | None = None) -> AppConfig:
    """Load configuration from environment variables + defaults.

    Args:
        env_file: Path to .env file. If None, searches project root.
    """
    if env_file and env_file.exists():
        load_dotenv(env_file)
    else:
        for candidate in [Path(".env"), Path(__file__).parent.parent / ".env"]:
            if candidate.exists():
                load_dotenv(candidate)
                break

    window = float(os.environ.get("MATCH_WINDOW_SECONDS", MatchConfig.window_seconds))
    accept_missing = _env_bool("ACCEPT_MISSING_OUTCOME", MatchConfig.accept_missing_outcome)
    tz_name = os.environ.get("REPORT_TZ", "")
    output_dir = Path(os.environ.get("OUTPUT_DIR", "out"))

    return AppConfig(
        match=MatchConfig(window_seconds=window, accept_missing_outcome=accept_missing),
        analytics=AnalyticsConfig(timezone=tz_name),
        output_dir=output_dir,
    )
