"""
Keyword grammar that turns a spoken transcript into a single Command.

Rules are tried in a fixed order and the first match wins, so a phrase like
"set timer and go to the next step" is a timer command, never navigation.
"""

import re
from typing import Callable, List, Tuple

from ..models.commands import (
    AddFavorite,
    Command,
    NextStep,
    PreviousStep,
    RemoveFavorite,
    RepeatStep,
    SearchQuery,
    ShowIngredients,
    StartTimer,
    Unknown,
)

TIMER_TRIGGERS = ("start timer", "set timer")

DURATION_PATTERN = re.compile(r"(\d+)\s*(minutes|minute|mins|min|seconds|second|secs|sec)\b")

UNIT_SECONDS = {
    "minutes": 60,
    "minute": 60,
    "mins": 60,
    "min": 60,
    "seconds": 1,
    "second": 1,
    "secs": 1,
    "sec": 1,
}

# (phrases, factory) in priority order; any phrase contained in the text matches.
PHRASE_RULES: List[Tuple[Tuple[str, ...], Callable[[], Command]]] = [
    (("next step", "continue"), NextStep),
    (("previous step", "go back"), PreviousStep),
    (("repeat", "say again"), RepeatStep),
    (("ingredients", "what do i need"), ShowIngredients),
    # "unfavorite this" contains "favorite this"
    (("remove from favorites", "unfavorite"), RemoveFavorite),
    (("add to favorites", "favorite this"), AddFavorite),
]

SEARCH_LEAD_INS = (
    "search for",
    "find recipe for",
    "find",
    "how to cook",
    "how do i cook",
    "how to make",
    "show me how to make",
    "show me",
    "recipe for",
    "cook",
)

# A lead-in that is a prefix of another must be tried after it.
_SEARCH_LEAD_INS_BY_LENGTH = sorted(SEARCH_LEAD_INS, key=len, reverse=True)


def parse_duration(text: str) -> int:
    """Return the first '<digits> <unit>' in text as seconds, or 0 if none."""
    match = DURATION_PATTERN.search(text)
    if not match:
        return 0
    return int(match.group(1)) * UNIT_SECONDS[match.group(2)]


def _timer_command(text: str, raw: str) -> Command:
    seconds = parse_duration(text)
    if seconds <= 0:
        return Unknown(raw_text=raw)
    return StartTimer(seconds=seconds)


def _search_command(text: str):
    for lead_in in _SEARCH_LEAD_INS_BY_LENGTH:
        if text == lead_in or text.startswith(lead_in + " "):
            query = text[len(lead_in):].strip()
            return SearchQuery(text=query) if query else None
    return None


def interpret(transcript: str) -> Command:
    """Map a final transcript to exactly one Command."""
    raw = transcript or ""
    text = raw.lower().strip()
    if not text:
        return Unknown(raw_text=raw)

    if any(trigger in text for trigger in TIMER_TRIGGERS):
        return _timer_command(text, raw)

    for phrases, factory in PHRASE_RULES:
        if any(phrase in text for phrase in phrases):
            return factory()

    search = _search_command(text)
    if search is not None:
        return search

    return Unknown(raw_text=raw)
