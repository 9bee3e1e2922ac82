"""Shared type aliases for the core and domain layers."""
from __future__ import annotations

from typing import Literal, Protocol, Sequence, TypeVar

Team = Literal["player", "enemy"]
DamageType = Literal["physical", "magic", "pure"]
ActionType = Literal["attack", "skill", "item"]

TEAMS: tuple[str, ...] = ("player", "enemy")
DAMAGE_TYPES: tuple[str, ...] = ("physical", "magic", "pure")

T_co = TypeVar("T_co")


class RandomSource(Protocol):
    """Anything that can feed dice rolls into a battle."""

    def randint(self, a: int, b: int) -> int: ...

    def random(self) -> float: ...

    def choice(self, seq: Sequence[T_co]) -> T_co: ...


def opposing_team(team: Team) -> Team:
    return "enemy" if team == "player" else "player"


__all__ = [
    "ActionType",
    "DAMAGE_TYPES",
    "DamageType",
    "RandomSource",
    "TEAMS",
    "Team",
    "opposing_team",
]
