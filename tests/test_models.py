import pytest

from cardsort.deck import ReferenceCardError
from cardsort.models import RULES, GameStats, SessionConfig
from helpers import card


def test_card_attribute_reads_each_rule_dimension() -> None:
    target = card("red", "star", 3, "large")
    assert target.attribute("color") == "red"
    assert target.attribute("shape") == "star"
    assert target.attribute("number") == 3
    assert target.attribute("size") == "large"


def test_card_attribute_rejects_unknown_rule() -> None:
    with pytest.raises(KeyError):
        card("red", "star", 3, "large").attribute("id")  # type: ignore[arg-type]


def test_card_describe_pluralizes_shapes() -> None:
    assert card("red", "circle", 1, "small").describe() == "1 small red circle"
    assert card("blue", "star", 3, "large").describe() == "3 large blue stars"


def test_game_stats_derived_values() -> None:
    assert GameStats().accuracy == 0.0
    stats = GameStats(attempts=8, correct=6, perseverative_errors=1, rule_changes=1, streak=0)
    assert stats.errors == 2
    assert stats.accuracy == pytest.approx(0.75)


def test_session_config_defaults_use_bundled_reference_cards() -> None:
    config = SessionConfig()
    assert config.cards_per_rule_change == 5
    assert config.feedback_delay_ms == 1000
    assert config.starting_rule == "color"
    assert [item.id for item in config.reference_cards] == ["1", "2", "3", "4"]


def test_session_config_normalizes_reference_list_to_tuple() -> None:
    references = list(SessionConfig().reference_cards)
    config = SessionConfig(reference_cards=references)  # type: ignore[arg-type]
    assert isinstance(config.reference_cards, tuple)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"cards_per_rule_change": 0},
        {"cards_per_rule_change": -3},
        {"cards_per_rule_change": True},
        {"cards_per_rule_change": 2.5},
        {"feedback_delay_ms": -1},
        {"feedback_delay_ms": "1000"},
        {"starting_rule": "texture"},
    ],
)
def test_session_config_rejects_invalid_values(kwargs: dict[str, object]) -> None:
    with pytest.raises(ValueError):
        SessionConfig(**kwargs)  # type: ignore[arg-type]


def test_session_config_rejects_short_reference_set() -> None:
    references = SessionConfig().reference_cards[:3]
    with pytest.raises(ReferenceCardError):
        SessionConfig(reference_cards=references)


def test_session_config_accepts_every_starting_rule() -> None:
    for rule in RULES:
        assert SessionConfig(starting_rule=rule).starting_rule == rule
