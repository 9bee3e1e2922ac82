"""Weapons repository."""
from __future__ import annotations

from typing import Dict

from skirmish.core.types import DAMAGE_TYPES
from skirmish.data.errors import DataValidationError
from skirmish.data.repositories.base import RepositoryBase
from skirmish.domain.defs import WeaponDef


class WeaponsRepository(RepositoryBase[WeaponDef]):
    """Loads and validates weapon definitions."""

    def __init__(self, base_path=None) -> None:
        super().__init__("weapons.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, WeaponDef]:
        weapons: Dict[str, WeaponDef] = {}
        for raw_id, payload in raw.items():
            weapon_data = self._require_mapping(payload, f"weapon '{raw_id}'")
            self._assert_exact_fields(
                weapon_data,
                {"name", "damage_min", "damage_max"},
                f"weapon '{raw_id}'",
                optional_fields={"damage_type", "attack_bonus", "magic_bonus"},
            )

            damage_min = self._require_non_negative_int(weapon_data["damage_min"], f"weapon '{raw_id}' damage_min")
            damage_max = self._require_non_negative_int(weapon_data["damage_max"], f"weapon '{raw_id}' damage_max")
            if damage_min > damage_max:
                raise DataValidationError(f"weapon '{raw_id}' damage_min must not exceed damage_max.")

            weapons[raw_id] = WeaponDef(
                id=raw_id,
                name=self._require_str(weapon_data["name"], f"weapon '{raw_id}' name"),
                damage_min=damage_min,
                damage_max=damage_max,
                damage_type=self._require_literal(  # type: ignore[arg-type]
                    weapon_data.get("damage_type", "physical"), DAMAGE_TYPES, f"weapon '{raw_id}' damage_type"
                ),
                attack_bonus=self._require_int(weapon_data.get("attack_bonus", 0), f"weapon '{raw_id}' attack_bonus"),
                magic_bonus=self._require_int(weapon_data.get("magic_bonus", 0), f"weapon '{raw_id}' magic_bonus"),
            )
        return weapons
