import json
import random
from itertools import islice
from pathlib import Path

import pytest

from cardsort.deck import (
    CardGenerator,
    ReferenceCardError,
    load_reference_cards,
    load_reference_cards_from_file,
    validate_reference_cards,
)
from cardsort.models import COLORS, NUMBERS, SHAPES, SIZES, Card
from helpers import card

VALID_CARDS = [
    {"id": "a", "color": "red", "shape": "circle", "number": 1, "size": "small"},
    {"id": "b", "color": "green", "shape": "triangle", "number": 2, "size": "medium"},
    {"id": "c", "color": "blue", "shape": "star", "number": 3, "size": "large"},
    {"id": "d", "color": "yellow", "shape": "square", "number": 4, "size": "small"},
]


def _write(root: Path, payload: object) -> Path:
    path = root / "refs.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_bundled_reference_cards() -> None:
    cards = load_reference_cards()
    assert cards == (
        Card(id="1", color="red", shape="circle", number=1, size="small"),
        Card(id="2", color="green", shape="triangle", number=2, size="medium"),
        Card(id="3", color="blue", shape="star", number=3, size="large"),
        Card(id="4", color="yellow", shape="square", number=4, size="medium"),
    )


def test_load_from_file_accepts_bare_list_and_cards_object(tmp_path: Path) -> None:
    from_list = load_reference_cards_from_file(_write(tmp_path, VALID_CARDS))
    from_object = load_reference_cards_from_file(_write(tmp_path, {"cards": VALID_CARDS}))
    assert from_list == from_object
    assert [item.id for item in from_list] == ["a", "b", "c", "d"]


def test_load_from_file_normalizes_case_and_whitespace(tmp_path: Path) -> None:
    payload = [dict(item) for item in VALID_CARDS]
    payload[0]["color"] = " Red "
    cards = load_reference_cards_from_file(_write(tmp_path, payload))
    assert cards[0].color == "red"


@pytest.mark.parametrize(
    ("mutate", "message"),
    [
        (lambda cards: cards[:3], "exactly 4"),
        (lambda cards: cards + [dict(cards[0], id="e")], "exactly 4"),
        (lambda cards: [dict(cards[0], color="purple")] + cards[1:], "invalid color"),
        (lambda cards: [dict(cards[0], shape="hexagon")] + cards[1:], "invalid shape"),
        (lambda cards: [dict(cards[0], number=5)] + cards[1:], "invalid number"),
        (lambda cards: [dict(cards[0], number="1")] + cards[1:], "non-integer number"),
        (lambda cards: [dict(cards[0], number=True)] + cards[1:], "non-integer number"),
        (lambda cards: [dict(cards[0], size="huge")] + cards[1:], "invalid size"),
        (lambda cards: [dict(cards[0], id="b")] + cards[1:], "Duplicate reference card id"),
        (lambda cards: [dict(cards[0], id=" ")] + cards[1:], "must not be empty"),
        (lambda cards: [{k: v for k, v in cards[0].items() if k != "shape"}] + cards[1:], "missing: shape"),
        (lambda cards: ["not-an-object"] + cards[1:], "JSON object"),
    ],
)
def test_load_from_file_rejects_malformed_sets(tmp_path: Path, mutate, message: str) -> None:
    payload = mutate([dict(item) for item in VALID_CARDS])
    with pytest.raises(ReferenceCardError) as exc_info:
        load_reference_cards_from_file(_write(tmp_path, payload))
    assert message in str(exc_info.value)


def test_load_from_file_rejects_non_list_root(tmp_path: Path) -> None:
    with pytest.raises(ReferenceCardError, match="list of cards"):
        load_reference_cards_from_file(_write(tmp_path, {"deck": VALID_CARDS}))


def test_load_from_file_rejects_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ReferenceCardError, match="not valid JSON"):
        load_reference_cards_from_file(path)


def test_reference_card_error_is_value_error() -> None:
    assert issubclass(ReferenceCardError, ValueError)


def test_validate_rejects_non_card_items() -> None:
    cards = list(load_reference_cards())
    cards[2] = {"id": "3"}  # type: ignore[call-overload]
    with pytest.raises(ReferenceCardError, match="Card instances"):
        validate_reference_cards(cards)


def test_validate_rejects_out_of_domain_card_object() -> None:
    cards = list(load_reference_cards())
    cards[0] = card("orange", "circle", 1, "small", card_id="1")
    with pytest.raises(ReferenceCardError, match="invalid color"):
        validate_reference_cards(cards)


def test_generator_draws_values_inside_domains() -> None:
    generator = CardGenerator(random.Random(7))
    for target in islice(generator, 200):
        assert target.color in COLORS
        assert target.shape in SHAPES
        assert target.number in NUMBERS
        assert target.size in SIZES


def test_generator_covers_every_domain_value() -> None:
    cards = list(islice(CardGenerator(random.Random(11)), 500))
    assert {item.color for item in cards} == set(COLORS)
    assert {item.shape for item in cards} == set(SHAPES)
    assert {item.number for item in cards} == set(NUMBERS)
    assert {item.size for item in cards} == set(SIZES)


def test_seeded_generators_are_reproducible() -> None:
    left = list(islice(CardGenerator(random.Random(3)), 20))
    right = list(islice(CardGenerator(random.Random(3)), 20))
    assert left == right


def test_generated_ids_are_unique() -> None:
    cards = list(islice(CardGenerator(random.Random(5)), 100))
    assert len({item.id for item in cards}) == 100
