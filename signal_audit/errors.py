"""Exceptions raised by the signal audit pipeline."""
from __future__ import annotations


class SignalAuditError(Exception):
    """Base class for pipeline errors."""


class MalformedInputError(SignalAuditError, ValueError):
    """Top-level input could not be tokenized into rows or chat entries.

    This is the only failure that aborts a run. Unrecognized lines and
    rows are skipped, and unmatched signals are a normal outcome.
    """
