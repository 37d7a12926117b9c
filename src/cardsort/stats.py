"""Session statistics accumulation."""

from __future__ import annotations

from .models import Card, GameStats, Rule
from .rules import matches


def is_perseverative(target: Card, selected: Card, current_rule: Rule, previous_rule: Rule | None) -> bool:
    """Return whether a selection is wrong now but right under the abandoned rule."""
    if previous_rule is None:
        return False
    return not matches(target, selected, current_rule) and matches(target, selected, previous_rule)


class StatisticsTracker:
    """Accumulates counters for one session."""

    def __init__(self) -> None:
        self._stats = GameStats()

    def snapshot(self) -> GameStats:
        """Return current counters."""
        return self._stats

    def record(self, *, correct: bool, perseverative: bool, rule_changed: bool, streak: int) -> GameStats:
        """Record one evaluated attempt and return the updated counters."""
        current = self._stats
        self._stats = GameStats(
            attempts=current.attempts + 1,
            correct=current.correct + (1 if correct else 0),
            perseverative_errors=current.perseverative_errors + (1 if perseverative else 0),
            rule_changes=current.rule_changes + (1 if rule_changed else 0),
            streak=streak,
        )
        return self._stats
