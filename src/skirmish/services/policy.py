"""Decision policy that picks each AI actor's action and targets."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Sequence

from skirmish.core.config import BattleConfig
from skirmish.core.types import ActionType, RandomSource
from skirmish.domain.battle_models import Character
from skirmish.domain.defs import SkillDef

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ActionDecision:
    """Represents a structured action decision for one actor."""

    action_type: ActionType
    targets: List[Character] = field(default_factory=list)
    skill_index: int | None = None
    item_index: int | None = None


def living(roster: Sequence[Character]) -> List[Character]:
    return [character for character in roster if character.is_alive]


def first_alive(roster: Sequence[Character]) -> Character | None:
    """Front-of-the-line targeting: first living member in roster order."""
    for character in roster:
        if character.is_alive:
            return character
    return None


def affordable_skill_indices(actor: Character) -> List[int]:
    return [index for index, skill in enumerate(actor.skills) if actor.stats.mp >= skill.mp_cost]


def wants_self_target(actor: Character, skill: SkillDef, config: BattleConfig) -> bool:
    """Heals always target the caster; non-player actors also turtle when low."""
    if skill.is_heal:
        return True
    return actor.team != "player" and actor.stats.hp < actor.stats.max_hp * config.self_heal_ratio


def choose_skill_targets(
    actor: Character, skill: SkillDef, opponents: Sequence[Character], config: BattleConfig
) -> List[Character]:
    """Area skills sweep the opposing roster unless they heal; heals stay on the caster."""
    if skill.target_all and not skill.is_heal:
        return living(opponents)
    if wants_self_target(actor, skill, config):
        return [actor]
    target = first_alive(opponents)
    return [target] if target else []


def choose_action(
    actor: Character,
    opponents: Sequence[Character],
    rng: RandomSource,
    config: BattleConfig,
) -> ActionDecision:
    """
    Pick a skill or a basic attack for ``actor``.

    With at least one skill, ``config.skill_chance`` decides whether a skill
    is attempted; the skill is drawn uniformly from those the actor can pay
    for. Without an affordable skill the actor falls back to a basic attack
    on the first living opponent. Only the RNG is advanced.
    """
    if actor.skills and rng.random() < config.skill_chance:
        candidates = affordable_skill_indices(actor)
        if candidates:
            skill_index = rng.choice(candidates)
            skill = actor.skills[skill_index]
            targets = choose_skill_targets(actor, skill, opponents, config)
            logger.debug(
                "%s picks skill %s -> %s", actor.name, skill.id, [target.instance_id for target in targets]
            )
            return ActionDecision(action_type="skill", skill_index=skill_index, targets=targets)
        logger.debug("%s cannot afford any skill; attacking", actor.name)

    target = first_alive(opponents)
    return ActionDecision(action_type="attack", targets=[target] if target else [])
