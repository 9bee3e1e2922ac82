"""Repository exports."""

from .armour_repo import ArmourRepository
from .characters_repo import CharactersRepository
from .effects_repo import EffectsRepository
from .encounters_repo import EncountersRepository
from .items_repo import ItemsRepository
from .skills_repo import SkillsRepository
from .weapons_repo import WeaponsRepository

__all__ = [
    "ArmourRepository",
    "CharactersRepository",
    "EffectsRepository",
    "EncountersRepository",
    "ItemsRepository",
    "SkillsRepository",
    "WeaponsRepository",
]
