"""Key normalization shared by every fuzzy comparison in the pipeline.

Slugs and outcomes come from three independently authored sources, so all
matching goes through ``simplify`` and the predicates below.
"""
from __future__ import annotations

import re
from typing import Optional

_NON_ALNUM = re.compile(r"[^a-z0-9]")

BINARY_OUTCOMES = ("yes", "no")


def simplify(text: Optional[str]) -> str:
    """Case-fold and keep only ASCII letters and digits."""
    if not text:
        return ""
    return _NON_ALNUM.sub("", str(text).lower())


def slugs_match(a: Optional[str], b: Optional[str]) -> bool:
    """Mutual substring containment of simplified slugs.

    An empty key never matches, otherwise it would be contained in
    every other slug.
    """
    ka, kb = simplify(a), simplify(b)
    if not ka or not kb:
        return False
    return ka in kb or kb in ka


def outcomes_conflict(a: Optional[str], b: Optional[str]) -> bool:
    """True when both outcomes are binary yes/no labels and differ."""
    ka, kb = simplify(a), simplify(b)
    if ka in BINARY_OUTCOMES and kb in BINARY_OUTCOMES:
        return ka != kb
    return False


def outcomes_differ(a: Optional[str], b: Optional[str]) -> bool:
    """True when both outcomes are named and not the same label."""
    ka, kb = simplify(a), simplify(b)
    return bool(ka and kb) and ka != kb


def humanize_slug(slug: str) -> str:
    """"will-bitcoin-hit-100k" -> "Will Bitcoin Hit 100k"."""
    words = [w for w in slug.replace("_", "-").split("-") if w]
    return " ".join(w[:1].upper() + w[1:] for w in words)
