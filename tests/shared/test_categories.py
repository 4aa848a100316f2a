"""Tests for sport / non-sport market classification."""
from signal_audit.models import Category
from signal_audit.shared.categories import categorize, is_sport_market


def test_league_keyword_in_slug():
    assert categorize("Who wins tonight?", "nba-lal-bos-2025-01-10") == Category.SPORT


def test_competition_keyword_in_title():
    assert categorize("Super Bowl champion 2025", "sb-champ") == Category.SPORT


def test_versus_title():
    assert is_sport_market("Lakers vs. Celtics", "game-123")
    assert is_sport_market("Arsenal v. Chelsea", "match-7")


def test_versus_slug_infix():
    assert is_sport_market("Tonight's game", "lakers-vs-celtics")
    assert is_sport_market("Tonight's game", "arsenal-v-chelsea")


def test_will_win_on_phrase():
    assert is_sport_market("Will Real Madrid win on 2025-03-01?", "rm-2025-03-01")


def test_non_sport():
    assert categorize("Fed cuts rates in March?", "fed-cuts-in-march") == Category.NON_SPORT
    assert categorize("Will Bitcoin hit $100k?", "will-bitcoin-hit-100k") == Category.NON_SPORT


def test_empty_inputs():
    assert categorize("", "") == Category.NON_SPORT


def test_league_code_inside_a_word_is_not_sport():
    assert categorize(
        "Israel x Hamas conflict ends in 2025?", "israel-hamas-conflict-ends-2025",
    ) == Category.NON_SPORT
    assert categorize("US inflation above 3% in March?", "us-inflation-above-3-march") == Category.NON_SPORT


def test_league_code_as_token():
    assert is_sport_market("NFL: Chiefs cover?", "chiefs-cover")
    assert is_sport_market("Main event winner", "ufc300_main_event")
    assert is_sport_market("Who wins the title?", "ncaab-final-four")


def test_phrase_keyword_in_hyphenated_slug():
    assert is_sport_market("Who wins?", "super-bowl-lix-winner")
