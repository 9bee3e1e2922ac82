"""Pure helpers for applying item effects to combat stats."""
from __future__ import annotations

from dataclasses import dataclass

from skirmish.domain.defs import ItemDef
from skirmish.domain.entities import StatBlock


@dataclass(slots=True)
class ItemEffectResult:
    """Summary of stat deltas produced by a consumable."""

    hp_delta: int = 0
    mp_delta: int = 0

    @property
    def had_effect(self) -> bool:
        return any(delta != 0 for delta in (self.hp_delta, self.mp_delta))


def apply_item_effects(stats: StatBlock, item: ItemDef) -> ItemEffectResult:
    """Apply healing/restoration effects to the provided stats."""

    result = ItemEffectResult()

    if item.heal_hp > 0:
        before = stats.hp
        stats.hp = min(stats.max_hp, stats.hp + item.heal_hp)
        result.hp_delta = stats.hp - before

    if item.heal_mp > 0:
        before = stats.mp
        stats.mp = min(stats.max_mp, stats.mp + item.heal_mp)
        result.mp_delta = stats.mp - before

    return result
