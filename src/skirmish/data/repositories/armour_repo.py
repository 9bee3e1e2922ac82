"""Armour repository."""
from __future__ import annotations

from typing import Dict

from skirmish.data.repositories.base import RepositoryBase
from skirmish.domain.defs import ArmourDef


class ArmourRepository(RepositoryBase[ArmourDef]):
    """Loads and validates armour definitions."""

    def __init__(self, base_path=None) -> None:
        super().__init__("armour.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, ArmourDef]:
        armour: Dict[str, ArmourDef] = {}
        for raw_id, payload in raw.items():
            armour_data = self._require_mapping(payload, f"armour '{raw_id}'")
            self._assert_exact_fields(
                armour_data,
                {"name"},
                f"armour '{raw_id}'",
                optional_fields={"defense_bonus", "resist_bonus", "hp_bonus"},
            )

            armour[raw_id] = ArmourDef(
                id=raw_id,
                name=self._require_str(armour_data["name"], f"armour '{raw_id}' name"),
                defense_bonus=self._require_int(armour_data.get("defense_bonus", 0), f"armour '{raw_id}' defense_bonus"),
                resist_bonus=self._require_int(armour_data.get("resist_bonus", 0), f"armour '{raw_id}' resist_bonus"),
                hp_bonus=self._require_non_negative_int(armour_data.get("hp_bonus", 0), f"armour '{raw_id}' hp_bonus"),
            )
        return armour
