"""CLI entrypoint for the adaptive card sorting task."""

from __future__ import annotations

import argparse
import logging
import random
import time
from collections.abc import Callable

from .deck import ReferenceCardError, load_reference_cards, load_reference_cards_from_file
from .models import (
    DEFAULT_CARDS_PER_RULE_CHANGE,
    DEFAULT_FEEDBACK_DELAY_MS,
    DEFAULT_STARTING_RULE,
    RULES,
    Card,
    Feedback,
    GameStats,
    SessionConfig,
)
from .rules import RuleChanged
from .scheduler import Scheduler, SleepFn
from .session import InvalidSelection, SortingSession

InputFn = Callable[[str], str]
PrintFn = Callable[[str], None]
QUIT_COMMANDS = {"q", ":q", ":quit", "quit"}
STATS_COMMANDS = {"s", ":s", "stats"}

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cardsort", description="Adaptive card sorting task")
    parser.add_argument("command", nargs="?", default="play", choices=["play"])
    parser.add_argument(
        "--rule-change-after",
        type=int,
        default=DEFAULT_CARDS_PER_RULE_CHANGE,
        metavar="N",
        help="consecutive correct answers before the hidden rule changes",
    )
    parser.add_argument(
        "--feedback-delay-ms",
        type=int,
        default=DEFAULT_FEEDBACK_DELAY_MS,
        metavar="MS",
        help="pause after each answer before the next card",
    )
    parser.add_argument("--starting-rule", choices=RULES, default=DEFAULT_STARTING_RULE)
    parser.add_argument("--reference-cards", metavar="PATH", help="JSON file with four reference cards")
    parser.add_argument("--rounds", type=int, default=None, metavar="N", help="stop after N answers")
    parser.add_argument("--seed", type=int, default=None, help="random seed for reproducible sessions")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    return parser


def run(
    argv: list[str] | None = None,
    input_fn: InputFn = input,
    print_fn: PrintFn = print,
    sleep_fn: SleepFn | None = time.sleep,
) -> int:
    """Run the CLI application."""
    args = _build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format="%(levelname)s %(message)s")

    try:
        if args.reference_cards:
            references = load_reference_cards_from_file(args.reference_cards)
        else:
            references = load_reference_cards()
        config = SessionConfig(
            cards_per_rule_change=args.rule_change_after,
            feedback_delay_ms=args.feedback_delay_ms,
            starting_rule=args.starting_rule,
            reference_cards=references,
        )
    except (OSError, ValueError) as exc:
        print_fn(f"Configuration error: {exc}")
        return 2

    if args.rounds is not None and args.rounds <= 0:
        print_fn("Configuration error: --rounds must be positive.")
        return 2

    rng = random.Random(args.seed)
    return play_shell(config, input_fn, print_fn, sleep_fn=sleep_fn, rounds=args.rounds, rng=rng)


def play_shell(
    config: SessionConfig,
    input_fn: InputFn = input,
    print_fn: PrintFn = print,
    *,
    sleep_fn: SleepFn | None = None,
    rounds: int | None = None,
    rng: random.Random | None = None,
) -> int:
    """Run the interactive sorting loop until the subject quits or the round limit is hit."""

    def show_target(card: Card) -> None:
        print_fn(f"\nTarget: {card.describe()}")
        _print_reference_cards(config.reference_cards, print_fn)

    def show_feedback(result: Feedback | None) -> None:
        if result == "correct":
            print_fn("Correct.")
        elif result == "incorrect":
            print_fn("Incorrect.")

    def show_invalid(signal: InvalidSelection) -> None:
        print_fn("Invalid choice.")

    def note_rule_change(event: RuleChanged) -> None:
        logger.debug("Hidden rule is now %s (was %s).", event.current_rule, event.previous_rule)

    scheduler = Scheduler(sleep_fn=sleep_fn)
    session = SortingSession(
        config,
        scheduler=scheduler,
        rng=rng,
        on_target_card_changed=show_target,
        on_feedback=show_feedback,
        on_rule_changed=note_rule_change,
        on_invalid_selection=show_invalid,
    )

    print_fn("=== Card Sorting ===")
    print_fn("Match the target card to one of the reference cards. The rule is hidden and may change.")
    print_fn("Type 1-4 to choose, s for stats, q to quit.")
    try:
        session.start_round()
        while True:
            choice = input_fn("Choose card: ").strip().lower()
            if choice in QUIT_COMMANDS:
                break
            if choice in STATS_COMMANDS:
                _print_stats(session.stats, print_fn)
                continue
            result = session.submit_selection(_resolve_choice(choice, config.reference_cards))
            if result is None:
                continue
            if rounds is not None and result.stats.attempts >= rounds:
                break
            scheduler.run_pending()
    finally:
        session.close()

    _print_summary(session.stats, print_fn)
    return 0


def _resolve_choice(choice: str, references: tuple[Card, ...]) -> str:
    """Map a 1-based position to a reference card id; anything else is passed through as an id."""
    if choice.isdigit():
        index = int(choice) - 1
        if 0 <= index < len(references):
            return references[index].id
    return choice


def _print_reference_cards(references: tuple[Card, ...], print_fn: PrintFn) -> None:
    for idx, card in enumerate(references, start=1):
        print_fn(f"{idx}) {card.describe()}")


def _print_stats(stats: GameStats, print_fn: PrintFn) -> None:
    print_fn(f"Attempts: {stats.attempts}")
    print_fn(f"Correct: {stats.correct}")
    print_fn(f"Perseverative errors: {stats.perseverative_errors}")
    print_fn(f"Rule changes: {stats.rule_changes}")
    print_fn(f"Streak: {stats.streak}")


def _print_summary(stats: GameStats, print_fn: PrintFn) -> None:
    percent = 100.0 * stats.accuracy
    print_fn("\n=== Session Summary ===")
    print_fn(f"- Cards sorted: {stats.attempts}")
    print_fn(f"- Correct: {stats.correct}/{stats.attempts} ({percent:.1f}%)")
    print_fn(f"- Errors: {stats.errors}")
    print_fn(f"- Perseverative errors: {stats.perseverative_errors}")
    print_fn(f"- Rule changes: {stats.rule_changes}")


def main_entry() -> None:
    """Console script entrypoint."""
    raise SystemExit(run())


if __name__ == "__main__":  # pragma: no cover
    main_entry()
