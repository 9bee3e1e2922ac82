"""Equipment runtime models."""
from __future__ import annotations

from dataclasses import dataclass

from skirmish.core.types import DamageType
from skirmish.domain.defs.armour_def import ArmourDef
from skirmish.domain.defs.weapon_def import WeaponDef


@dataclass(slots=True)
class Weapon:
    """A single weapon instance; held by at most one character."""

    definition: WeaponDef
    owner_id: str | None = None

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def damage_min(self) -> int:
        return self.definition.damage_min

    @property
    def damage_max(self) -> int:
        return self.definition.damage_max

    @property
    def damage_type(self) -> DamageType:
        return self.definition.damage_type

    @property
    def attack_bonus(self) -> int:
        return self.definition.attack_bonus

    @property
    def magic_bonus(self) -> int:
        return self.definition.magic_bonus


@dataclass(slots=True)
class Armour:
    """A single armour instance; held by at most one character."""

    definition: ArmourDef
    owner_id: str | None = None

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def defense_bonus(self) -> int:
        return self.definition.defense_bonus

    @property
    def resist_bonus(self) -> int:
        return self.definition.resist_bonus

    @property
    def hp_bonus(self) -> int:
        return self.definition.hp_bonus
