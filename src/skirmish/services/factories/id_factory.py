"""Utilities for creating deterministic instance identifiers."""
from __future__ import annotations

from skirmish.core.types import RandomSource, Team


def make_instance_id(prefix: str, rng: RandomSource) -> str:
    """Generate a deterministic identifier using the provided RNG."""
    suffix = rng.randint(100000, 999999)
    return f"{prefix}_{suffix}"


def make_roster_id(team: Team, position: int) -> str:
    """Return the roster slot id (``p1``, ``e2``...) for a 1-based position."""
    prefix = "p" if team == "player" else "e"
    return f"{prefix}{position}"
