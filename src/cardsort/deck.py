"""Reference card loading/validation and random target card generation."""

from __future__ import annotations

import json
import logging
import random
import uuid
from collections.abc import Iterator, Sequence
from importlib import resources
from pathlib import Path
from typing import Any, cast

from .models import COLORS, DOMAINS, NUMBERS, REFERENCE_CARD_COUNT, SHAPES, SIZES, Card

CONTENT_PACKAGE = "cardsort.content"
REFERENCE_CARDS_RESOURCE = "reference_cards.json"

logger = logging.getLogger(__name__)


class ReferenceCardError(ValueError):
    """Reference card configuration is malformed; a session cannot start."""


def _card_from_dict(raw: dict[str, Any]) -> Card:
    """Build a reference card from raw JSON content."""
    missing = [name for name in ("id", *DOMAINS) if name not in raw]
    if missing:
        raise ReferenceCardError(f"Reference card '{raw.get('id', '<unknown>')}' is missing: {', '.join(missing)}.")

    number_raw = raw["number"]
    if isinstance(number_raw, bool) or not isinstance(number_raw, int):
        raise ReferenceCardError(f"Reference card '{raw['id']}' has non-integer number: {number_raw!r}.")

    return Card(
        id=str(raw["id"]).strip(),
        color=str(raw["color"]).strip().lower(),  # type: ignore[arg-type]
        shape=str(raw["shape"]).strip().lower(),  # type: ignore[arg-type]
        number=number_raw,
        size=str(raw["size"]).strip().lower(),  # type: ignore[arg-type]
    )


def _cards_from_payload(payload: object) -> tuple[Card, ...]:
    """Accept either a bare list of cards or an object with a ``cards`` list."""
    if isinstance(payload, dict):
        payload = cast(dict[str, object], payload).get("cards")
    if not isinstance(payload, list):
        raise ReferenceCardError("Reference card file must contain a list of cards.")
    cards: list[Card] = []
    for item in cast(list[object], payload):
        if not isinstance(item, dict):
            raise ReferenceCardError("Each reference card must be a JSON object.")
        cards.append(_card_from_dict(cast(dict[str, Any], item)))
    result = tuple(cards)
    validate_reference_cards(result)
    return result


def load_reference_cards() -> tuple[Card, ...]:
    """Load the bundled reference card set."""
    entry = resources.files(CONTENT_PACKAGE).joinpath(REFERENCE_CARDS_RESOURCE)
    return _cards_from_payload(json.loads(entry.read_text(encoding="utf-8-sig")))


def load_reference_cards_from_file(path: Path | str) -> tuple[Card, ...]:
    """Load a reference card set from a JSON file."""
    file_path = Path(path)
    try:
        raw = json.loads(file_path.read_text(encoding="utf-8-sig"))
    except json.JSONDecodeError as exc:
        raise ReferenceCardError(f"Reference card file {file_path} is not valid JSON: {exc}") from exc
    return _cards_from_payload(raw)


def validate_reference_cards(cards: Sequence[Card]) -> None:
    """Validate count, ids, and attribute domains of a reference set."""
    if len(cards) != REFERENCE_CARD_COUNT:
        raise ReferenceCardError(f"Expected exactly {REFERENCE_CARD_COUNT} reference cards, got {len(cards)}.")

    seen: set[str] = set()
    for card in cards:
        if not isinstance(card, Card):
            raise ReferenceCardError(f"Reference cards must be Card instances, got {type(card).__name__}.")
        if not card.id:
            raise ReferenceCardError("Reference card id must not be empty.")
        if card.id in seen:
            raise ReferenceCardError(f"Duplicate reference card id: {card.id}")
        seen.add(card.id)
        for rule, domain in DOMAINS.items():
            value = card.attribute(rule)  # type: ignore[arg-type]
            if value not in domain or isinstance(value, bool):
                raise ReferenceCardError(f"Reference card '{card.id}' has invalid {rule}: {value!r}.")


class CardGenerator:
    """Unbounded source of random target cards."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng if rng is not None else random.Random()

    def generate(self) -> Card:
        """Draw every attribute independently and uniformly from its domain."""
        card_id = str(uuid.UUID(int=self._rng.getrandbits(128), version=4))
        return Card(
            id=card_id,
            color=self._rng.choice(COLORS),
            shape=self._rng.choice(SHAPES),
            number=self._rng.choice(NUMBERS),
            size=self._rng.choice(SIZES),
        )

    def __iter__(self) -> Iterator[Card]:
        while True:
            yield self.generate()
