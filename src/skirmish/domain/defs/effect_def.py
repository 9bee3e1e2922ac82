"""Effect definition primitives."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class EffectDef:
    """Timed stat modifier and/or damage-over-time template."""

    id: str
    name: str
    duration: int
    attack_mod: int = 0
    defense_mod: int = 0
    speed_mod: int = 0
    dot_hp: int = 0
