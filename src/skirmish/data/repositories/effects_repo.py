"""Effects repository."""
from __future__ import annotations

from typing import Dict

from skirmish.data.errors import DataValidationError
from skirmish.data.repositories.base import RepositoryBase
from skirmish.domain.defs import EffectDef


class EffectsRepository(RepositoryBase[EffectDef]):
    """Loads timed effect templates referenced by skills."""

    def __init__(self, base_path=None) -> None:
        super().__init__("effects.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, EffectDef]:
        effects: Dict[str, EffectDef] = {}
        for raw_id, payload in raw.items():
            effect_data = self._require_mapping(payload, f"effect '{raw_id}'")
            self._assert_exact_fields(
                effect_data,
                {"name", "duration"},
                f"effect '{raw_id}'",
                optional_fields={"attack_mod", "defense_mod", "speed_mod", "dot_hp"},
            )
            duration = self._require_int(effect_data["duration"], f"effect '{raw_id}' duration")
            if duration < 1:
                raise DataValidationError(f"effect '{raw_id}' duration must be at least 1.")

            effects[raw_id] = EffectDef(
                id=raw_id,
                name=self._require_str(effect_data["name"], f"effect '{raw_id}' name"),
                duration=duration,
                attack_mod=self._require_int(effect_data.get("attack_mod", 0), f"effect '{raw_id}' attack_mod"),
                defense_mod=self._require_int(effect_data.get("defense_mod", 0), f"effect '{raw_id}' defense_mod"),
                speed_mod=self._require_int(effect_data.get("speed_mod", 0), f"effect '{raw_id}' speed_mod"),
                dot_hp=self._require_non_negative_int(effect_data.get("dot_hp", 0), f"effect '{raw_id}' dot_hp"),
            )
        return effects
