"""Rule matching and the streak-driven rule switching controller."""

from __future__ import annotations

import logging
import random
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass

from .models import RULES, Card, Rule

logger = logging.getLogger(__name__)


def matches(a: Card, b: Card, rule: Rule) -> bool:
    """Return whether two cards agree on one rule dimension."""
    return a.attribute(rule) == b.attribute(rule)


def matching_cards(target: Card, cards: Sequence[Card], rule: Rule) -> list[Card]:
    """Return every card that matches the target under a rule, in order."""
    return [card for card in cards if matches(target, card, rule)]


def ambiguous_rules(cards: Sequence[Card]) -> list[Rule]:
    """Return rules under which two or more cards share a value."""
    ambiguous: list[Rule] = []
    for rule in RULES:
        counts = Counter(card.attribute(rule) for card in cards)
        if any(count > 1 for count in counts.values()):
            ambiguous.append(rule)
    return ambiguous


@dataclass(frozen=True)
class AdaptiveState:
    """Hidden rule state for one session."""

    current_rule: Rule
    previous_rule: Rule | None = None
    streak: int = 0


@dataclass(frozen=True)
class RuleChanged:
    """Emitted when the hidden rule switches."""

    previous_rule: Rule
    current_rule: Rule


def advance(
    state: AdaptiveState,
    is_correct: bool,
    threshold: int,
    rng: random.Random,
) -> tuple[AdaptiveState, list[RuleChanged]]:
    """Apply one evaluated answer and return the new state with emitted events.

    A correct answer extends the streak; when the streak reaches a multiple of
    ``threshold`` the rule switches to one of the other three rules chosen
    uniformly at random and the streak resets. An incorrect answer only resets
    the streak. At most one switch happens per call.
    """
    if threshold <= 0:
        raise ValueError(f"threshold must be positive, got {threshold}.")

    if not is_correct:
        return AdaptiveState(state.current_rule, state.previous_rule, 0), []

    streak = state.streak + 1
    if streak % threshold != 0:
        return AdaptiveState(state.current_rule, state.previous_rule, streak), []

    candidates = [rule for rule in RULES if rule != state.current_rule]
    new_rule = rng.choice(candidates)
    logger.info("Rule changed from %s to %s after %d correct answers.", state.current_rule, new_rule, streak)
    return (
        AdaptiveState(current_rule=new_rule, previous_rule=state.current_rule, streak=0),
        [RuleChanged(previous_rule=state.current_rule, current_rule=new_rule)],
    )
