"""Session controller: one target at a time, one evaluation per target."""

from __future__ import annotations

import functools
import logging
import random
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from .deck import CardGenerator
from .models import Card, Feedback, GameStats, RoundResult, Rule, SessionConfig
from .rules import AdaptiveState, RuleChanged, advance, ambiguous_rules, matches
from .scheduler import ScheduledCall, Scheduler
from .stats import StatisticsTracker, is_perseverative

logger = logging.getLogger(__name__)

TargetCardFn = Callable[[Card], None]
FeedbackFn = Callable[[Feedback | None], None]
StatsFn = Callable[[GameStats], None]
RuleChangedFn = Callable[[RuleChanged], None]
InvalidSelectionFn = Callable[["InvalidSelection"], None]


class TargetSource(Protocol):
    def generate(self) -> Card: ...


class SessionState(Enum):
    """Round state machine positions."""

    IDLE = "idle"
    AWAITING_SELECTION = "awaiting_selection"
    LOCKED = "locked"
    CLOSED = "closed"


@dataclass(frozen=True)
class InvalidSelection:
    """Non-fatal signal for a selection that names no reference card."""

    reference_card_id: str
    valid_ids: tuple[str, ...]

    def __str__(self) -> str:
        return f"Unknown reference card id {self.reference_card_id!r}; expected one of {', '.join(self.valid_ids)}."


def _ignore(*_: object) -> None:
    return None


class SortingSession:
    """Coordinates target generation, evaluation, rule switching, and statistics."""

    def __init__(
        self,
        config: SessionConfig | None = None,
        *,
        scheduler: Scheduler | None = None,
        generator: TargetSource | None = None,
        rng: random.Random | None = None,
        on_target_card_changed: TargetCardFn | None = None,
        on_feedback: FeedbackFn | None = None,
        on_stats_changed: StatsFn | None = None,
        on_rule_changed: RuleChangedFn | None = None,
        on_invalid_selection: InvalidSelectionFn | None = None,
    ) -> None:
        """Initialize session state; no target is drawn until ``start_round``."""
        self.config = config if config is not None else SessionConfig()
        self.scheduler = scheduler if scheduler is not None else Scheduler()
        self._rng = rng if rng is not None else random.Random()
        self._generator: TargetSource = generator if generator is not None else CardGenerator(self._rng)
        self._references = {card.id: card for card in self.config.reference_cards}
        self._adaptive = AdaptiveState(current_rule=self.config.starting_rule)
        self._tracker = StatisticsTracker()
        self._state = SessionState.IDLE
        self._target: Card | None = None
        self._feedback: Feedback | None = None
        self._pending: ScheduledCall | None = None
        self._lockout_id = 0

        shared = ambiguous_rules(self.config.reference_cards)
        if shared:
            logger.info(
                "Reference cards share values under %s; any matching card counts as correct.",
                ", ".join(shared),
            )

        self._on_target_card_changed: TargetCardFn = on_target_card_changed or _ignore
        self._on_feedback: FeedbackFn = on_feedback or _ignore
        self._on_stats_changed: StatsFn = on_stats_changed or _ignore
        self._on_rule_changed: RuleChangedFn = on_rule_changed or _ignore
        self._on_invalid_selection: InvalidSelectionFn = on_invalid_selection or _ignore

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def target(self) -> Card | None:
        return self._target

    @property
    def feedback(self) -> Feedback | None:
        return self._feedback

    @property
    def stats(self) -> GameStats:
        return self._tracker.snapshot()

    @property
    def current_rule(self) -> Rule:
        return self._adaptive.current_rule

    @property
    def previous_rule(self) -> Rule | None:
        return self._adaptive.previous_rule

    @property
    def reference_cards(self) -> tuple[Card, ...]:
        return self.config.reference_cards

    def start_round(self) -> Card | None:
        """Draw a new target card and accept one selection for it.

        Does nothing while the session is closed or locked; a locked session
        starts its next round itself when the feedback delay ends.
        """
        if self._state in (SessionState.CLOSED, SessionState.LOCKED):
            logger.debug("Not starting a round while %s.", self._state.value)
            return None
        return self._next_round()

    def _next_round(self) -> Card:
        self._target = self._generator.generate()
        self._state = SessionState.AWAITING_SELECTION
        logger.debug("New target card: %s", self._target)
        self._on_target_card_changed(self._target)
        return self._target

    def submit_selection(self, reference_card_id: str) -> RoundResult | None:
        """Evaluate the selected reference card against the live target.

        Returns ``None`` without touching any state when the session is locked,
        has no target, or the id names no reference card.
        """
        if self._state is not SessionState.AWAITING_SELECTION or self._target is None:
            logger.debug("Ignoring selection %r while %s.", reference_card_id, self._state.value)
            return None

        selected = self._references.get(str(reference_card_id))
        if selected is None:
            signal = InvalidSelection(str(reference_card_id), tuple(self._references))
            logger.warning("%s", signal)
            self._on_invalid_selection(signal)
            return None

        target = self._target
        rule = self._adaptive.current_rule
        correct = matches(target, selected, rule)
        perseverative = is_perseverative(target, selected, rule, self._adaptive.previous_rule)
        new_adaptive, events = advance(self._adaptive, correct, self.config.cards_per_rule_change, self._rng)

        # Commit the whole round before any callback can observe the session.
        self._adaptive = new_adaptive
        stats = self._tracker.record(
            correct=correct,
            perseverative=perseverative,
            rule_changed=bool(events),
            streak=new_adaptive.streak,
        )
        self._feedback = "correct" if correct else "incorrect"
        self._state = SessionState.LOCKED
        self._lockout_id += 1
        self._pending = self.scheduler.call_later(
            self.config.feedback_delay_ms, functools.partial(self._end_lockout, self._lockout_id)
        )

        result = RoundResult(
            target=target,
            selected=selected,
            rule=rule,
            correct=correct,
            perseverative=perseverative,
            rule_changed=bool(events),
            current_rule=new_adaptive.current_rule,
            previous_rule=new_adaptive.previous_rule,
            stats=stats,
        )
        self._on_feedback(self._feedback)
        for event in events:
            self._on_rule_changed(event)
        self._on_stats_changed(stats)
        return result

    def close(self) -> None:
        """Stop the session and drop any pending round."""
        if self._pending is not None:
            self.scheduler.cancel(self._pending)
            self._pending = None
        self._state = SessionState.CLOSED

    def _end_lockout(self, lockout_id: int) -> None:
        # A stale timer from an earlier lockout must not end the current one.
        if lockout_id != self._lockout_id or self._state is not SessionState.LOCKED:
            return
        self._pending = None
        self._feedback = None
        self._on_feedback(None)
        self._next_round()
