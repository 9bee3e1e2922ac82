"""Items repository."""
from __future__ import annotations

from typing import Dict

from skirmish.data.repositories.base import RepositoryBase
from skirmish.domain.defs import ItemDef


class ItemsRepository(RepositoryBase[ItemDef]):
    """Loads consumable item definitions."""

    def __init__(self, base_path=None) -> None:
        super().__init__("items.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, ItemDef]:
        items: Dict[str, ItemDef] = {}
        for raw_id, payload in raw.items():
            item_data = self._require_mapping(payload, f"item '{raw_id}'")
            self._assert_exact_fields(
                item_data,
                {"name"},
                f"item '{raw_id}'",
                optional_fields={"description", "heal_hp", "heal_mp", "consumable"},
            )
            items[raw_id] = ItemDef(
                id=raw_id,
                name=self._require_str(item_data["name"], f"item '{raw_id}' name"),
                description=self._require_str(item_data.get("description", ""), f"item '{raw_id}' description"),
                heal_hp=self._require_non_negative_int(item_data.get("heal_hp", 0), f"item '{raw_id}' heal_hp"),
                heal_mp=self._require_non_negative_int(item_data.get("heal_mp", 0), f"item '{raw_id}' heal_mp"),
                consumable=self._require_bool(item_data.get("consumable", True), f"item '{raw_id}' consumable"),
            )
        return items
