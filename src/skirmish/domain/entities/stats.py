"""Stat models for runtime entities."""
from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(slots=True)
class StatBlock:
    """Stores base combat stats.

    A block loaded from definitions acts as a template; every character gets
    its own ``clone`` so mutating HP or MP in battle never leaks back.
    """

    max_hp: int
    hp: int
    max_mp: int
    mp: int
    attack: int
    defense: int
    magic: int
    resist: int
    speed: int
    crit_rate: float = 0.0
    crit_mult: float = 1.0

    def clone(self) -> StatBlock:
        return replace(self)

    def fresh(self) -> StatBlock:
        """Return a copy with HP and MP refilled to their maximums."""
        return replace(self, hp=self.max_hp, mp=self.max_mp)
