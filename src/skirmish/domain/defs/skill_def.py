"""Skill definition structures."""
from __future__ import annotations

from dataclasses import dataclass

from skirmish.core.types import DamageType

from .effect_def import EffectDef


@dataclass(frozen=True, slots=True)
class SkillDef:
    """Describes an MP-costed combat skill.

    ``damage_multiplier`` and ``heal_hp`` are mutually exclusive; a skill with
    neither only applies its ``effect``.
    """

    id: str
    name: str
    description: str
    mp_cost: int
    damage_multiplier: float = 0.0
    damage_type: DamageType = "physical"
    heal_hp: int = 0
    target_all: bool = False
    effect: EffectDef | None = None

    @property
    def is_offensive(self) -> bool:
        return self.damage_multiplier > 0

    @property
    def is_heal(self) -> bool:
        return self.heal_hp > 0
