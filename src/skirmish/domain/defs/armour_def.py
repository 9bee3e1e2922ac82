"""Armour definition structures."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ArmourDef:
    """Minimal armour definition."""

    id: str
    name: str
    defense_bonus: int = 0
    resist_bonus: int = 0
    hp_bonus: int = 0
