"""Encounter definition structures."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True, slots=True)
class EncounterDef:
    """Pairs a player roster with an enemy roster by character id."""

    id: str
    name: str
    player_ids: Tuple[str, ...]
    enemy_ids: Tuple[str, ...]
