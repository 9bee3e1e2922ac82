"""Skills repository."""
from __future__ import annotations

from typing import Dict

from skirmish.core.types import DAMAGE_TYPES
from skirmish.data.errors import DataReferenceError, DataValidationError
from skirmish.data.repositories.base import RepositoryBase
from skirmish.data.repositories.effects_repo import EffectsRepository
from skirmish.domain.defs import SkillDef


class SkillsRepository(RepositoryBase[SkillDef]):
    """Loads skills and resolves their optional effect templates."""

    def __init__(self, effects_repo: EffectsRepository | None = None, base_path=None) -> None:
        super().__init__("skills.json", base_path)
        self._effects_repo = effects_repo or EffectsRepository(base_path=base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, SkillDef]:
        skills: Dict[str, SkillDef] = {}
        for raw_id, payload in raw.items():
            skill_data = self._require_mapping(payload, f"skill '{raw_id}'")
            self._assert_exact_fields(
                skill_data,
                {"name", "mp_cost"},
                f"skill '{raw_id}'",
                optional_fields={
                    "description",
                    "damage_multiplier",
                    "damage_type",
                    "heal_hp",
                    "target_all",
                    "effect",
                },
            )

            damage_multiplier = self._require_number(
                skill_data.get("damage_multiplier", 0), f"skill '{raw_id}' damage_multiplier"
            )
            heal_hp = self._require_non_negative_int(skill_data.get("heal_hp", 0), f"skill '{raw_id}' heal_hp")
            if damage_multiplier < 0:
                raise DataValidationError(f"skill '{raw_id}' damage_multiplier must not be negative.")
            if damage_multiplier > 0 and heal_hp > 0:
                raise DataValidationError(f"skill '{raw_id}' cannot both deal damage and heal.")

            effect_id = self._require_optional_str(skill_data.get("effect"), f"skill '{raw_id}' effect")
            effect = None
            if effect_id is not None:
                try:
                    effect = self._effects_repo.get(effect_id)
                except KeyError as exc:
                    raise DataReferenceError(f"skill '{raw_id}' references missing effect '{effect_id}'.") from exc

            skills[raw_id] = SkillDef(
                id=raw_id,
                name=self._require_str(skill_data["name"], f"skill '{raw_id}' name"),
                description=self._require_str(skill_data.get("description", ""), f"skill '{raw_id}' description"),
                mp_cost=self._require_non_negative_int(skill_data["mp_cost"], f"skill '{raw_id}' mp_cost"),
                damage_multiplier=damage_multiplier,
                damage_type=self._require_literal(  # type: ignore[arg-type]
                    skill_data.get("damage_type", "physical"), DAMAGE_TYPES, f"skill '{raw_id}' damage_type"
                ),
                heal_hp=heal_hp,
                target_all=self._require_bool(skill_data.get("target_all", False), f"skill '{raw_id}' target_all"),
                effect=effect,
            )
        return skills
