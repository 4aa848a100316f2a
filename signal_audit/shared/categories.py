"""Market classification into sport / non-sport from title and slug."""
from __future__ import annotations

import re

from signal_audit.models import Category

# Abbreviations hide inside ordinary words ("conflict", "inflation"), so
# they only count as whole tokens. A trailing number is allowed ("ufc300").
LEAGUE_CODES: tuple[str, ...] = (
    "nba", "wnba", "nfl", "mlb", "nhl", "mls", "ufc", "pga",
    "ncaa", "ncaab", "ncaaf",
)

SPORT_KEYWORDS: tuple[str, ...] = (
    # Leagues
    "nascar",
    "premier league", "la liga", "laliga", "serie a", "bundesliga", "ligue 1",
    "eredivisie", "champions league", "europa league", "copa america",
    # Competitions
    "super bowl", "stanley cup", "world series", "world cup", "nba finals",
    "march madness", "wimbledon", "roland garros", "australian open",
    "grand prix", "olympics", "ryder cup", "masters tournament",
    # Sports
    "football", "soccer", "basketball", "baseball", "hockey", "tennis",
    "cricket", "boxing", "golf", "rugby", "formula 1", "esports",
    # Stat markets
    "o/u", "over/under", "moneyline", "spread", "points o/u", "rebounds",
    "assists", "touchdowns", "passing yards", "rushing yards", "home runs",
    "strikeouts", "goalscorer", "both teams to score",
)

_LEAGUE_TOKEN = re.compile(r"\b(?:" + "|".join(LEAGUE_CODES) + r")\d*\b")
_VERSUS_TITLE = re.compile(r"\w\s+(?:vs\.?|v\.)\s+\w", re.IGNORECASE)
_VERSUS_SLUG = re.compile(r"-(?:vs|v)-")
_WIN_ON = re.compile(r"\bwill\b.+\bwin on\b", re.IGNORECASE)


def is_sport_market(title: str, slug: str) -> bool:
    t = (title or "").lower()
    s = (slug or "").lower()
    slug_words = s.replace("-", " ").replace("_", " ")

    if _LEAGUE_TOKEN.search(t) or _LEAGUE_TOKEN.search(slug_words):
        return True
    if any(kw in t or kw in slug_words for kw in SPORT_KEYWORDS):
        return True
    if _VERSUS_TITLE.search(t):
        return True
    if _VERSUS_SLUG.search(s):
        return True
    if _WIN_ON.search(t):
        return True
    return False


def categorize(title: str, slug: str) -> Category:
    """Classify a market as Sport or Non-Sport."""
    return Category.SPORT if is_sport_market(title, slug) else Category.NON_SPORT
