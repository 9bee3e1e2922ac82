"""Domain definition exports."""

from .armour_def import ArmourDef
from .character_def import CharacterDef
from .effect_def import EffectDef
from .encounter_def import EncounterDef
from .item_def import ItemDef
from .skill_def import SkillDef
from .weapon_def import WeaponDef

__all__ = [
    "ArmourDef",
    "CharacterDef",
    "EffectDef",
    "EncounterDef",
    "ItemDef",
    "SkillDef",
    "WeaponDef",
]
