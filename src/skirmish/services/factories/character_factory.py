"""Factory for creating battle characters from definitions."""
from __future__ import annotations

import logging
from collections import Counter
from typing import List, Sequence, Tuple

from skirmish.core.types import Team
from skirmish.data.repositories import (
    ArmourRepository,
    CharactersRepository,
    EncountersRepository,
    ItemsRepository,
    SkillsRepository,
    WeaponsRepository,
)
from skirmish.domain.battle_models import Character
from skirmish.domain.defs import CharacterDef
from skirmish.domain.entities import Armour, Weapon
from skirmish.services.errors import FactoryError

from .id_factory import make_roster_id

logger = logging.getLogger(__name__)


def create_character(
    character_def: CharacterDef,
    *,
    team: Team,
    instance_id: str,
    weapons_repo: WeaponsRepository,
    armour_repo: ArmourRepository,
    skills_repo: SkillsRepository,
    items_repo: ItemsRepository,
    name: str | None = None,
) -> Character:
    """Instantiate a character with its own stats and equipment instances."""
    character = Character(
        instance_id=instance_id,
        name=name or character_def.name,
        team=team,
        stats=character_def.stats.fresh(),
    )
    try:
        if character_def.weapon_id:
            character.equip_weapon(Weapon(weapons_repo.get(character_def.weapon_id)))
        if character_def.armour_id:
            character.equip_armour(Armour(armour_repo.get(character_def.armour_id)))
        character.skills = [skills_repo.get(skill_id) for skill_id in character_def.skill_ids]
        character.items = [items_repo.get(item_id) for item_id in character_def.item_ids]
    except KeyError as exc:
        raise FactoryError(f"Character '{character_def.id}' references unknown definition {exc}.") from exc
    return character


def build_roster(
    character_ids: Sequence[str],
    *,
    team: Team,
    characters_repo: CharactersRepository,
    weapons_repo: WeaponsRepository,
    armour_repo: ArmourRepository,
    skills_repo: SkillsRepository,
    items_repo: ItemsRepository,
) -> List[Character]:
    """Build one ordered roster; duplicate templates get numbered names."""
    totals = Counter(character_ids)
    seen: Counter[str] = Counter()
    roster: List[Character] = []
    for position, character_id in enumerate(character_ids, start=1):
        try:
            character_def = characters_repo.get(character_id)
        except KeyError as exc:
            raise FactoryError(f"Character '{character_id}' not found.") from exc
        seen[character_id] += 1
        name = None
        if totals[character_id] > 1:
            name = f"{character_def.name}-{seen[character_id]}"
        roster.append(
            create_character(
                character_def,
                team=team,
                instance_id=make_roster_id(team, position),
                weapons_repo=weapons_repo,
                armour_repo=armour_repo,
                skills_repo=skills_repo,
                items_repo=items_repo,
                name=name,
            )
        )
    return roster


def build_rosters(
    encounter_id: str,
    *,
    encounters_repo: EncountersRepository,
    characters_repo: CharactersRepository,
    weapons_repo: WeaponsRepository,
    armour_repo: ArmourRepository,
    skills_repo: SkillsRepository,
    items_repo: ItemsRepository,
) -> Tuple[List[Character], List[Character]]:
    """Return ``(players, enemies)`` for an encounter definition."""
    try:
        encounter = encounters_repo.get(encounter_id)
    except KeyError as exc:
        raise FactoryError(f"Encounter '{encounter_id}' not found.") from exc

    repos = dict(
        characters_repo=characters_repo,
        weapons_repo=weapons_repo,
        armour_repo=armour_repo,
        skills_repo=skills_repo,
        items_repo=items_repo,
    )
    players = build_roster(encounter.player_ids, team="player", **repos)
    enemies = build_roster(encounter.enemy_ids, team="enemy", **repos)
    logger.debug("Built encounter %s: %d players vs %d enemies", encounter_id, len(players), len(enemies))
    return players, enemies
