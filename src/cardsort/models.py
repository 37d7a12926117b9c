"""Core domain models for the adaptive card sorting task."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

Color = Literal["red", "blue", "green", "yellow"]
Shape = Literal["circle", "square", "triangle", "star"]
Size = Literal["small", "medium", "large"]
Rule = Literal["color", "shape", "number", "size"]
Feedback = Literal["correct", "incorrect"]

COLORS: tuple[Color, ...] = ("red", "blue", "green", "yellow")
SHAPES: tuple[Shape, ...] = ("circle", "square", "triangle", "star")
NUMBERS: tuple[int, ...] = (1, 2, 3, 4)
SIZES: tuple[Size, ...] = ("small", "medium", "large")
RULES: tuple[Rule, ...] = ("color", "shape", "number", "size")

DOMAINS: dict[str, tuple[object, ...]] = {
    "color": COLORS,
    "shape": SHAPES,
    "number": NUMBERS,
    "size": SIZES,
}

REFERENCE_CARD_COUNT = 4
DEFAULT_CARDS_PER_RULE_CHANGE = 5
DEFAULT_FEEDBACK_DELAY_MS = 1000
DEFAULT_STARTING_RULE: Rule = "color"


@dataclass(frozen=True)
class Card:
    """One card with its four classifiable attributes."""

    id: str
    color: Color
    shape: Shape
    number: int
    size: Size

    def attribute(self, rule: Rule) -> object:
        """Return the value of one rule dimension."""
        if rule not in DOMAINS:
            raise KeyError(rule)
        return getattr(self, rule)

    def describe(self) -> str:
        return f"{self.number} {self.size} {self.color} {self.shape}{'s' if self.number > 1 else ''}"


@dataclass(frozen=True)
class GameStats:
    """Session-wide counters."""

    attempts: int = 0
    correct: int = 0
    perseverative_errors: int = 0
    rule_changes: int = 0
    streak: int = 0

    @property
    def errors(self) -> int:
        return self.attempts - self.correct

    @property
    def accuracy(self) -> float:
        """Fraction of attempts classified correctly (0.0 before any attempt)."""
        if self.attempts == 0:
            return 0.0
        return self.correct / self.attempts


def _default_reference_cards() -> tuple[Card, ...]:
    from .deck import load_reference_cards

    return load_reference_cards()


@dataclass(frozen=True)
class SessionConfig:
    """Construction-time settings for one sorting session."""

    cards_per_rule_change: int = DEFAULT_CARDS_PER_RULE_CHANGE
    feedback_delay_ms: int = DEFAULT_FEEDBACK_DELAY_MS
    starting_rule: Rule = DEFAULT_STARTING_RULE
    reference_cards: tuple[Card, ...] = field(default_factory=_default_reference_cards)

    def __post_init__(self) -> None:
        from .deck import validate_reference_cards

        if isinstance(self.cards_per_rule_change, bool) or not isinstance(self.cards_per_rule_change, int):
            raise ValueError("cards_per_rule_change must be an integer.")
        if self.cards_per_rule_change <= 0:
            raise ValueError(f"cards_per_rule_change must be positive, got {self.cards_per_rule_change}.")
        if isinstance(self.feedback_delay_ms, bool) or not isinstance(self.feedback_delay_ms, int):
            raise ValueError("feedback_delay_ms must be an integer.")
        if self.feedback_delay_ms < 0:
            raise ValueError(f"feedback_delay_ms must not be negative, got {self.feedback_delay_ms}.")
        if self.starting_rule not in RULES:
            raise ValueError(f"Unknown starting rule: {self.starting_rule!r}.")
        # Accept any sequence of cards.
        object.__setattr__(self, "reference_cards", tuple(self.reference_cards))
        validate_reference_cards(self.reference_cards)


@dataclass(frozen=True)
class RoundResult:
    """Outcome of one evaluated selection."""

    target: Card
    selected: Card
    rule: Rule
    correct: bool
    perseverative: bool
    rule_changed: bool
    current_rule: Rule
    previous_rule: Rule | None
    stats: GameStats

    @property
    def feedback(self) -> Feedback:
        return "correct" if self.correct else "incorrect"
