from __future__ import annotations

from collections.abc import Iterable

from cardsort.models import Card


def card(color: str, shape: str, number: int, size: str, card_id: str = "t") -> Card:
    return Card(id=card_id, color=color, shape=shape, number=number, size=size)  # type: ignore[arg-type]


class ScriptedTargets:
    """Target source that replays fixed cards, repeating the last one when exhausted."""

    def __init__(self, cards: Iterable[Card]) -> None:
        self.cards = list(cards)
        self.drawn = 0

    def generate(self) -> Card:
        index = min(self.drawn, len(self.cards) - 1)
        self.drawn += 1
        return self.cards[index]
