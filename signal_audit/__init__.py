"""Reconcile trading-bot chat signals with portfolio snapshots."""

__version__ = "1.0.0"

from .config import AppConfig, load_config
from .errors import MalformedInputError, SignalAuditError
from .pipeline import run_pipeline

__all__ = [
    "AppConfig",
    "load_config",
    "MalformedInputError",
    "SignalAuditError",
    "run_pipeline",
]
