"""cardsort: adaptive card sorting task engine and terminal front end."""

from __future__ import annotations

import re
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path


def _version_from_pyproject() -> str | None:
    """Read [project].version from a source checkout, if there is one."""
    for base in Path(__file__).resolve().parents:
        pyproject = base / "pyproject.toml"
        if not pyproject.exists():
            continue
        in_project = False
        for line in pyproject.read_text(encoding="utf-8").splitlines():
            stripped = line.strip()
            if stripped.startswith("[") and stripped.endswith("]"):
                in_project = stripped == "[project]"
            elif in_project:
                match = re.match(r'^version\s*=\s*"([^"]+)"\s*$', stripped)
                if match:
                    return match.group(1)
    return None


def _resolve_version() -> str:
    found = _version_from_pyproject()
    if found is not None:
        return found
    try:
        return version("cardsort")
    except PackageNotFoundError:
        return "0+unknown"


__version__ = _resolve_version()

from .deck import CardGenerator, ReferenceCardError, load_reference_cards  # noqa: E402
from .models import Card, GameStats, RoundResult, SessionConfig  # noqa: E402
from .rules import matches  # noqa: E402
from .session import InvalidSelection, SessionState, SortingSession  # noqa: E402

__all__ = [
    "Card",
    "CardGenerator",
    "GameStats",
    "InvalidSelection",
    "ReferenceCardError",
    "RoundResult",
    "SessionConfig",
    "SessionState",
    "SortingSession",
    "__version__",
    "load_reference_cards",
    "matches",
]
