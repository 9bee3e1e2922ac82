"""Character template structures."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from skirmish.domain.entities.stats import StatBlock


@dataclass(frozen=True, slots=True)
class CharacterDef:
    """Stats plus equipment, skill and item references for one combatant."""

    id: str
    name: str
    stats: StatBlock
    weapon_id: str | None = None
    armour_id: str | None = None
    skill_ids: Tuple[str, ...] = ()
    item_ids: Tuple[str, ...] = ()
