"""Item definition structures."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ItemDef:
    """Consumable that restores HP and/or MP."""

    id: str
    name: str
    description: str = ""
    heal_hp: int = 0
    heal_mp: int = 0
    consumable: bool = True
