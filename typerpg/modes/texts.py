"""Passages to type: daily quotes by difficulty and the endless word pool."""

from __future__ import annotations

import random

from ..gamification.xp import Mode
from .daily_progress import Difficulty

DAILY_QUOTES: dict[Difficulty, list[str]] = {
    Difficulty.EASY: [
        "The best way out is always through.",
        "Well done is better than well said.",
        "Stay hungry and stay foolish.",
        "Little by little one travels far.",
        "Action is the foundational key to all success.",
    ],
    Difficulty.MEDIUM: [
        "It does not matter how slowly you go as long as you do not stop.",
        "The secret of getting ahead is getting started, so start today.",
        "Quality is not an act, it is a habit built one day at a time.",
        "You miss one hundred percent of the shots you never take.",
        "What we think, we become; what we feel, we attract.",
    ],
    Difficulty.HARD: [
        "In the middle of every difficulty lies opportunity; the trick is "
        "noticing it before somebody else does.",
        "Success is not final, failure is not fatal: it is the courage to "
        "continue that counts.",
        "Twenty years from now you will be more disappointed by the things "
        "you didn't do than by the ones you did.",
        "The only limit to our realization of tomorrow will be our doubts "
        "of today; let us move forward with strong and active faith.",
    ],
}

ENDLESS_WORDS: list[str] = (
    "the be of and a to in he have it that for they with as not on she at "
    "by this we you do but from or which one would all will there say who "
    "make when can more if no man out other so what time up go about than "
    "into could state only new year some take come these know see use get "
    "like then first any work now may such give over think most even find "
    "day also after way many must look before great back through long "
    "where much should well people down own just because good each those "
    "feel seem how high too place little world very still nation hand old "
    "life tell write become here show house both between need mean call "
    "develop under last right move thing general school never same another "
    "begin while number part turn real leave might want point form off "
    "child few small since against ask late home interest large person end "
    "open public follow during present without again hold govern around "
    "possible head consider word program problem however lead system set "
    "order eye plan run keep face fact group play stand increase early "
    "course change help line"
).split()

DEFAULT_WORD_COUNT = 25


def generate_text(
    mode: Mode | str,
    difficulty: Difficulty = Difficulty.EASY,
    *,
    word_count: int = DEFAULT_WORD_COUNT,
    rng: random.Random | None = None,
) -> str:
    """A daily quote for *difficulty*, or *word_count* random endless words."""
    rng = rng or random.Random()
    if Mode(mode) is Mode.DAILY:
        return rng.choice(DAILY_QUOTES[Difficulty(difficulty)])
    return " ".join(rng.choice(ENDLESS_WORDS) for _ in range(word_count))
