"""Battle service handling deterministic combat."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Sequence, Tuple

from skirmish.core.config import BattleConfig
from skirmish.core.types import TEAMS, DamageType, RandomSource, Team
from skirmish.domain.battle_log import (
    AttackEvent,
    BattleEvent,
    BattleStartedEvent,
    CriticalHitEvent,
    DeathEvent,
    DotDamageEvent,
    DrawEvent,
    EffectExpiredEvent,
    EquipEvent,
    EffectGainedEvent,
    HealEvent,
    InsufficientResourceEvent,
    InvalidActionEvent,
    ItemUsedEvent,
    NoTargetEvent,
    RoundStartedEvent,
    SkillDamageEvent,
    SkillUsedEvent,
    VictoryEvent,
)
from skirmish.domain.battle_models import BattleOutcome, BattleState, Character
from skirmish.domain.combat_math import mitigate, roll_crit, roll_weapon_damage, scale_power
from skirmish.domain.defs import EffectDef, SkillDef
from skirmish.domain.effects import ActiveEffect, tick_effects, total_dot
from skirmish.domain.item_effects import apply_item_effects
from skirmish.services.errors import BattleSetupError
from skirmish.services.factories import make_instance_id
from skirmish.services.policy import ActionDecision, choose_action

logger = logging.getLogger(__name__)

Policy = Callable[[Character, Sequence[Character], RandomSource, BattleConfig], ActionDecision]


@dataclass(slots=True)
class CombatantView:
    """Read-only snapshot of one character for rendering."""

    instance_id: str
    name: str
    team: Team
    hp: int
    max_hp: int
    mp: int
    max_mp: int
    is_alive: bool
    effects: Tuple[str, ...]


@dataclass(slots=True)
class BattleView:
    """Presentation view for the current battle state."""

    battle_id: str
    round: int
    players: List[CombatantView]
    enemies: List[CombatantView]
    is_over: bool
    winner: Team | None


class BattleService:
    """Deterministic battle orchestrator: turn order, action resolution and termination."""

    def __init__(self, config: BattleConfig | None = None, policy: Policy = choose_action) -> None:
        self._config = config or BattleConfig()
        self._policy = policy

    @property
    def config(self) -> BattleConfig:
        return self._config

    # -----------------------
    # Battle Lifecycle
    # -----------------------
    def start_battle(
        self,
        players: Sequence[Character],
        enemies: Sequence[Character],
        rng: RandomSource,
        *,
        battle_id: str | None = None,
    ) -> BattleState:
        """Validate both rosters and open a new battle at round 0."""
        self._validate_rosters(players, enemies)
        state = BattleState(
            battle_id=battle_id or make_instance_id("battle", rng),
            players=list(players),
            enemies=list(enemies),
            rng=rng,
        )
        state.log.append(
            BattleStartedEvent(
                battle_id=state.battle_id,
                player_names=tuple(character.name for character in state.players),
                enemy_names=tuple(character.name for character in state.enemies),
            )
        )
        for character in state.all_characters():
            self._log_equipment(state, character)
        logger.info(
            "Battle %s started: %d players vs %d enemies", state.battle_id, len(state.players), len(state.enemies)
        )
        self._update_victory(state)
        return state

    def run_battle(self, battle_state: BattleState) -> BattleOutcome:
        """Run rounds until one roster is defeated or the round cap forces a draw."""
        while not battle_state.is_over and battle_state.round < self._config.max_rounds:
            self.run_round(battle_state)

        if not battle_state.is_over:
            battle_state.is_over = True
            battle_state.outcome = BattleOutcome(winner=None, rounds=battle_state.round, reason="round_cap")
            battle_state.log.append(DrawEvent(rounds=battle_state.round))
            logger.info("Battle %s hit the round cap; draw", battle_state.battle_id)

        assert battle_state.outcome is not None
        return battle_state.outcome

    def run_round(self, battle_state: BattleState) -> List[BattleEvent]:
        """Play one round and return the events it produced."""
        if battle_state.is_over:
            return []
        mark = len(battle_state.log)
        battle_state.round += 1
        battle_state.log.append(RoundStartedEvent(round=battle_state.round))
        logger.debug("Battle %s round %d", battle_state.battle_id, battle_state.round)

        for actor in self.turn_order(battle_state):
            if not actor.is_alive:
                continue
            self.take_turn(battle_state, actor)
            if self._update_victory(battle_state):
                break
        return list(battle_state.log.events[mark:])

    def turn_order(self, battle_state: BattleState) -> List[Character]:
        """Players then enemies, by descending effective speed; ties keep roster order."""
        return sorted(battle_state.all_characters(), key=lambda character: -character.effective_speed)

    def take_turn(self, battle_state: BattleState, actor: Character) -> None:
        """Start-of-turn effects, one decided action, then the end-of-turn tick."""
        if not actor.is_alive:
            return
        if self.apply_start_of_turn(battle_state, actor):
            return
        decision = self._policy(actor, battle_state.opponents_of(actor), battle_state.rng, self._config)
        self.perform(battle_state, actor, decision)
        self.apply_end_of_turn(battle_state, actor)

    def perform(self, battle_state: BattleState, actor: Character, decision: ActionDecision) -> List[BattleEvent]:
        """Resolve an already-decided action."""
        target = decision.targets[0] if decision.targets else None
        if decision.action_type == "attack":
            return self.basic_attack(battle_state, actor, target)
        if decision.action_type == "skill":
            index = decision.skill_index if decision.skill_index is not None else -1
            return self.use_skill(battle_state, actor, index, decision.targets)
        if decision.action_type == "item":
            index = decision.item_index if decision.item_index is not None else -1
            return self.use_item(battle_state, actor, index, target)
        raise ValueError(f"Unknown action type: {decision.action_type}")

    def all_dead(self, battle_state: BattleState, team: Team) -> bool:
        return all(not character.is_alive for character in battle_state.roster(team))

    def get_battle_view(self, battle_state: BattleState) -> BattleView:
        """Return structured information for rendering."""
        outcome = battle_state.outcome
        return BattleView(
            battle_id=battle_state.battle_id,
            round=battle_state.round,
            players=[self._to_view(character) for character in battle_state.players],
            enemies=[self._to_view(character) for character in battle_state.enemies],
            is_over=battle_state.is_over,
            winner=outcome.winner if outcome else None,
        )

    # -----------------------
    # Actions
    # -----------------------
    def basic_attack(
        self, battle_state: BattleState, attacker: Character, target: Character | None
    ) -> List[BattleEvent]:
        if not attacker.is_alive:
            return []
        mark = len(battle_state.log)
        if target is None or not target.is_alive:
            battle_state.log.append(
                NoTargetEvent(actor_id=attacker.instance_id, actor_name=attacker.name, action="attack")
            )
            return list(battle_state.log.events[mark:])

        if attacker.weapon is not None:
            low, high = attacker.weapon.damage_min, attacker.weapon.damage_max
            damage_type: DamageType = attacker.weapon.damage_type
        else:
            low, high = self._config.fallback_damage
            damage_type = "physical"

        raw = roll_weapon_damage(battle_state.rng, low, high) + attacker.effective_attack
        raw, crit = roll_crit(raw, attacker.stats.crit_rate, attacker.stats.crit_mult, battle_state.rng)
        if crit:
            battle_state.log.append(
                CriticalHitEvent(actor_id=attacker.instance_id, actor_name=attacker.name, source="attack")
            )
        damage = self._mitigate_for(target, raw, damage_type)
        died = target.take_damage(damage)
        battle_state.log.append(
            AttackEvent(
                attacker_id=attacker.instance_id,
                attacker_name=attacker.name,
                target_id=target.instance_id,
                target_name=target.name,
                raw=raw,
                damage=damage,
                damage_type=damage_type,
                target_hp=target.stats.hp,
            )
        )
        if died:
            self._log_death(battle_state, target)
        return list(battle_state.log.events[mark:])

    def use_skill(
        self,
        battle_state: BattleState,
        actor: Character,
        skill_index: int,
        targets: Sequence[Character],
    ) -> List[BattleEvent]:
        if not actor.is_alive:
            return []
        mark = len(battle_state.log)
        if not 0 <= skill_index < len(actor.skills):
            battle_state.log.append(
                InvalidActionEvent(actor_id=actor.instance_id, actor_name=actor.name, action="skill", index=skill_index)
            )
            return list(battle_state.log.events[mark:])

        skill = actor.skills[skill_index]
        if actor.stats.mp < skill.mp_cost:
            battle_state.log.append(
                InsufficientResourceEvent(
                    actor_id=actor.instance_id,
                    actor_name=actor.name,
                    skill_name=skill.name,
                    required=skill.mp_cost,
                    available=actor.stats.mp,
                )
            )
            return list(battle_state.log.events[mark:])

        living_targets = self._unique_living(targets)
        if not living_targets:
            battle_state.log.append(NoTargetEvent(actor_id=actor.instance_id, actor_name=actor.name, action=skill.name))
            return list(battle_state.log.events[mark:])

        actor.spend_mp(skill.mp_cost)
        battle_state.log.append(
            SkillUsedEvent(
                actor_id=actor.instance_id,
                actor_name=actor.name,
                skill_id=skill.id,
                skill_name=skill.name,
                mp_cost=skill.mp_cost,
            )
        )

        if skill.is_offensive:
            for target in living_targets:
                self._resolve_skill_hit(battle_state, actor, target, skill)
        elif skill.is_heal:
            for target in living_targets:
                healed = target.heal(skill.heal_hp)
                battle_state.log.append(
                    HealEvent(
                        actor_id=actor.instance_id,
                        actor_name=actor.name,
                        target_id=target.instance_id,
                        target_name=target.name,
                        source_name=skill.name,
                        amount=healed,
                        target_hp=target.stats.hp,
                    )
                )
                if skill.effect is not None:
                    self._attach_effect(battle_state, actor, target, skill.effect)
        elif skill.effect is not None:
            for target in living_targets:
                self._attach_effect(battle_state, actor, target, skill.effect)
        return list(battle_state.log.events[mark:])

    def use_item(
        self,
        battle_state: BattleState,
        actor: Character,
        item_index: int,
        target: Character | None,
    ) -> List[BattleEvent]:
        if not actor.is_alive:
            return []
        mark = len(battle_state.log)
        if not 0 <= item_index < len(actor.items):
            battle_state.log.append(
                InvalidActionEvent(actor_id=actor.instance_id, actor_name=actor.name, action="item", index=item_index)
            )
            return list(battle_state.log.events[mark:])

        item = actor.items[item_index]
        if target is None or not target.is_alive:
            battle_state.log.append(NoTargetEvent(actor_id=actor.instance_id, actor_name=actor.name, action=item.name))
            return list(battle_state.log.events[mark:])

        result = apply_item_effects(target.stats, item)
        if not result.had_effect:
            logger.debug("%s used %s on %s with no effect", actor.name, item.id, target.instance_id)
        if item.consumable:
            actor.items.pop(item_index)
        battle_state.log.append(
            ItemUsedEvent(
                actor_id=actor.instance_id,
                actor_name=actor.name,
                target_id=target.instance_id,
                target_name=target.name,
                item_id=item.id,
                item_name=item.name,
                hp_restored=result.hp_delta,
                mp_restored=result.mp_delta,
            )
        )
        return list(battle_state.log.events[mark:])

    # -----------------------
    # Effects
    # -----------------------
    def apply_start_of_turn(self, battle_state: BattleState, character: Character) -> bool:
        """Apply summed damage over time as one pure hit. Returns True if it killed."""
        dot = total_dot(character.effects)
        if dot <= 0 or not character.is_alive:
            return False
        damage = self.apply_damage(battle_state, character, dot, "pure", log_death=False)
        battle_state.log.append(
            DotDamageEvent(
                character_id=character.instance_id,
                character_name=character.name,
                damage=damage,
                target_hp=character.stats.hp,
            )
        )
        if not character.is_alive:
            self._log_death(battle_state, character)
            return True
        return False

    def apply_end_of_turn(self, battle_state: BattleState, character: Character) -> None:
        kept, expired = tick_effects(character.effects)
        character.effects = kept
        for effect in expired:
            battle_state.log.append(
                EffectExpiredEvent(
                    character_id=character.instance_id,
                    character_name=character.name,
                    effect_name=effect.name,
                )
            )

    def apply_damage(
        self,
        battle_state: BattleState,
        target: Character,
        raw: int,
        damage_type: DamageType,
        *,
        log_death: bool = True,
    ) -> int:
        """Mitigate ``raw`` against ``target`` and subtract it from HP."""
        damage = self._mitigate_for(target, raw, damage_type)
        died = target.take_damage(damage)
        if died and log_death:
            self._log_death(battle_state, target)
        return damage

    # -----------------------
    # Helpers
    # -----------------------
    def _validate_rosters(self, players: Sequence[Character], enemies: Sequence[Character]) -> None:
        if not players:
            raise BattleSetupError("Player roster is empty.")
        if not enemies:
            raise BattleSetupError("Enemy roster is empty.")
        for roster, team in zip((players, enemies), TEAMS):
            for character in roster:
                if character.team != team:
                    raise BattleSetupError(
                        f"Character '{character.instance_id}' is tagged '{character.team}' but listed as '{team}'."
                    )
        seen: set[str] = set()
        for character in [*players, *enemies]:
            if character.instance_id in seen:
                raise BattleSetupError(f"Duplicate character id '{character.instance_id}'.")
            seen.add(character.instance_id)

    def _update_victory(self, battle_state: BattleState) -> bool:
        # Enemy defeat is checked first, so a simultaneous wipe goes to the players.
        if self.all_dead(battle_state, "enemy"):
            winner: Team = "player"
        elif self.all_dead(battle_state, "player"):
            winner = "enemy"
        else:
            return False
        battle_state.is_over = True
        battle_state.outcome = BattleOutcome(winner=winner, rounds=battle_state.round, reason="defeat")
        battle_state.log.append(VictoryEvent(winner=winner))
        logger.info("Battle %s won by %s in round %d", battle_state.battle_id, winner, battle_state.round)
        return True

    def _resolve_skill_hit(
        self, battle_state: BattleState, actor: Character, target: Character, skill: SkillDef
    ) -> None:
        if not target.is_alive:
            return
        base = actor.effective_magic if skill.damage_type == "magic" else actor.effective_attack
        power = scale_power(base, skill.damage_multiplier)
        jitter = self._config.damage_jitter
        if jitter:
            power += battle_state.rng.randint(-jitter, jitter)
        power, crit = roll_crit(power, actor.stats.crit_rate, actor.stats.crit_mult, battle_state.rng)
        if crit:
            battle_state.log.append(CriticalHitEvent(actor_id=actor.instance_id, actor_name=actor.name, source="skill"))

        damage = self._mitigate_for(target, power, skill.damage_type)
        died = target.take_damage(damage)
        battle_state.log.append(
            SkillDamageEvent(
                actor_id=actor.instance_id,
                actor_name=actor.name,
                target_id=target.instance_id,
                target_name=target.name,
                skill_name=skill.name,
                raw=power,
                damage=damage,
                damage_type=skill.damage_type,
                target_hp=target.stats.hp,
            )
        )
        if died:
            self._log_death(battle_state, target)
        elif skill.effect is not None:
            self._attach_effect(battle_state, actor, target, skill.effect)

    def _attach_effect(
        self, battle_state: BattleState, source: Character, target: Character, effect_def: EffectDef
    ) -> None:
        effect = ActiveEffect.from_def(effect_def, source_id=source.instance_id)
        target.add_effect(effect)
        battle_state.log.append(
            EffectGainedEvent(
                character_id=target.instance_id,
                character_name=target.name,
                effect_name=effect.name,
                duration=effect.duration,
                source_id=source.instance_id,
            )
        )

    def _mitigate_for(self, target: Character, raw: int, damage_type: DamageType) -> int:
        return mitigate(
            raw,
            damage_type,
            defense=target.effective_defense,
            resist=target.effective_resist,
            minimum=self._config.min_damage,
        )

    @staticmethod
    def _log_equipment(battle_state: BattleState, character: Character) -> None:
        if character.weapon is not None:
            battle_state.log.append(
                EquipEvent(
                    character_id=character.instance_id,
                    character_name=character.name,
                    slot="weapon",
                    item_name=character.weapon.name,
                )
            )
        if character.armour is not None:
            battle_state.log.append(
                EquipEvent(
                    character_id=character.instance_id,
                    character_name=character.name,
                    slot="armour",
                    item_name=character.armour.name,
                )
            )

    @staticmethod
    def _log_death(battle_state: BattleState, character: Character) -> None:
        battle_state.log.append(DeathEvent(character_id=character.instance_id, character_name=character.name))

    @staticmethod
    def _unique_living(targets: Sequence[Character]) -> List[Character]:
        result: List[Character] = []
        for target in targets:
            if target.is_alive and all(target is not existing for existing in result):
                result.append(target)
        return result

    @staticmethod
    def _to_view(character: Character) -> CombatantView:
        return CombatantView(
            instance_id=character.instance_id,
            name=character.name,
            team=character.team,
            hp=character.stats.hp,
            max_hp=character.stats.max_hp,
            mp=character.stats.mp,
            max_mp=character.stats.max_mp,
            is_alive=character.is_alive,
            effects=tuple(effect.name for effect in character.effects),
        )
