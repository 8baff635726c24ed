from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from studydeck.models.flashcard import Flashcard

CATCH_UP_BATCH_SIZE = 10


def select_due(cards: Iterable[Flashcard], now: datetime) -> list[Flashcard]:
    """Cards with next_review <= now, in the order given."""
    return [card for card in cards if card.next_review <= now]


def resolve_study_set(
    cards: Iterable[Flashcard],
    now: datetime,
    catch_up_size: int = CATCH_UP_BATCH_SIZE,
) -> list[Flashcard]:
    """
    The due set, or when nothing is due, the first catch_up_size cards.

    An empty collection gives an empty list.
    """
    cards = list(cards)
    due = select_due(cards, now)
    if due:
        return due
    return cards[:catch_up_size]
