"""Battle domain models."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal

from skirmish.core.types import RandomSource, Team, opposing_team
from skirmish.domain.battle_log import BattleLog
from skirmish.domain.defs import ItemDef, SkillDef
from skirmish.domain.effects import ActiveEffect, sum_modifier
from skirmish.domain.entities import Armour, StatBlock, Weapon
from skirmish.domain.errors import EquipmentError

OutcomeReason = Literal["defeat", "round_cap"]


@dataclass(slots=True)
class Character:
    """Represents an individual participant in battle.

    Dead characters stay in their roster; the scheduler skips them.
    """

    instance_id: str
    name: str
    team: Team
    stats: StatBlock
    weapon: Weapon | None = None
    armour: Armour | None = None
    skills: List[SkillDef] = field(default_factory=list)
    items: List[ItemDef] = field(default_factory=list)
    effects: List[ActiveEffect] = field(default_factory=list)
    alive: bool = True

    @property
    def is_alive(self) -> bool:
        return self.alive

    # -----------------------
    # Effective stats
    # -----------------------
    @property
    def effective_attack(self) -> int:
        bonus = self.weapon.attack_bonus if self.weapon else 0
        return self.stats.attack + bonus + sum_modifier(self.effects, "attack_mod")

    @property
    def effective_defense(self) -> int:
        bonus = self.armour.defense_bonus if self.armour else 0
        return self.stats.defense + bonus + sum_modifier(self.effects, "defense_mod")

    @property
    def effective_speed(self) -> int:
        return self.stats.speed + sum_modifier(self.effects, "speed_mod")

    @property
    def effective_magic(self) -> int:
        bonus = self.weapon.magic_bonus if self.weapon else 0
        return self.stats.magic + bonus

    @property
    def effective_resist(self) -> int:
        bonus = self.armour.resist_bonus if self.armour else 0
        return self.stats.resist + bonus

    # -----------------------
    # Equipment
    # -----------------------
    def equip_weapon(self, weapon: Weapon) -> None:
        if weapon.owner_id is not None and weapon.owner_id != self.instance_id:
            raise EquipmentError(f"Weapon '{weapon.name}' is already held by '{weapon.owner_id}'.")
        if self.weapon is not None and self.weapon is not weapon:
            self.unequip_weapon()
        weapon.owner_id = self.instance_id
        self.weapon = weapon

    def unequip_weapon(self) -> Weapon | None:
        weapon = self.weapon
        if weapon is not None:
            weapon.owner_id = None
        self.weapon = None
        return weapon

    def equip_armour(self, armour: Armour) -> None:
        if armour.owner_id is not None and armour.owner_id != self.instance_id:
            raise EquipmentError(f"Armour '{armour.name}' is already held by '{armour.owner_id}'.")
        if self.armour is armour:
            return
        if self.armour is not None:
            self.unequip_armour()
        armour.owner_id = self.instance_id
        self.armour = armour
        if armour.hp_bonus:
            self.stats.max_hp += armour.hp_bonus
            if self.alive:
                self.stats.hp = max(0, min(self.stats.max_hp, self.stats.hp + armour.hp_bonus))

    def unequip_armour(self) -> Armour | None:
        armour = self.armour
        if armour is None:
            return None
        if armour.hp_bonus:
            self.stats.max_hp -= armour.hp_bonus
            self.stats.hp = max(0, min(self.stats.hp, self.stats.max_hp))
        armour.owner_id = None
        self.armour = None
        return armour

    # -----------------------
    # Resource changes
    # -----------------------
    def take_damage(self, amount: int) -> bool:
        """Lose ``amount`` HP. Returns True only on the hit that kills."""
        if not self.alive:
            return False
        self.stats.hp = max(0, self.stats.hp - max(0, amount))
        if self.stats.hp == 0:
            self.alive = False
            return True
        return False

    def heal(self, amount: int) -> int:
        if not self.alive or amount <= 0:
            return 0
        before = self.stats.hp
        self.stats.hp = min(self.stats.max_hp, self.stats.hp + amount)
        return self.stats.hp - before

    def spend_mp(self, cost: int) -> bool:
        if self.stats.mp < cost:
            return False
        self.stats.mp -= cost
        return True

    def add_effect(self, effect: ActiveEffect) -> None:
        self.effects.append(effect)


@dataclass(slots=True)
class BattleOutcome:
    """How a finished battle ended; ``winner`` is None for a draw."""

    winner: Team | None
    rounds: int
    reason: OutcomeReason


@dataclass(slots=True)
class BattleState:
    """Tracks the state of an ongoing battle."""

    battle_id: str
    players: List[Character]
    enemies: List[Character]
    rng: RandomSource
    log: BattleLog = field(default_factory=BattleLog)
    round: int = 0
    is_over: bool = False
    outcome: BattleOutcome | None = None

    def roster(self, team: Team) -> List[Character]:
        return self.players if team == "player" else self.enemies

    def opponents_of(self, character: Character) -> List[Character]:
        return self.roster(opposing_team(character.team))

    def all_characters(self) -> List[Character]:
        return [*self.players, *self.enemies]

    @property
    def lines(self) -> List[str]:
        return self.log.lines()
