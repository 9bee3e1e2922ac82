"""Weapon definition structures."""
from __future__ import annotations

from dataclasses import dataclass

from skirmish.core.types import DamageType


@dataclass(frozen=True, slots=True)
class WeaponDef:
    """Weapon template: a damage range plus flat stat bonuses."""

    id: str
    name: str
    damage_min: int
    damage_max: int
    damage_type: DamageType = "physical"
    attack_bonus: int = 0
    magic_bonus: int = 0
