"""Timed battle effects: stat modifiers and damage over time."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Literal, Sequence, Tuple

from skirmish.domain.defs import EffectDef

ModifierField = Literal["attack_mod", "defense_mod", "speed_mod"]


@dataclass(slots=True)
class ActiveEffect:
    """An effect attached to one character, counting down once per end of turn."""

    effect_id: str
    name: str
    duration: int
    attack_mod: int = 0
    defense_mod: int = 0
    speed_mod: int = 0
    dot_hp: int = 0
    source_id: str | None = None

    @classmethod
    def from_def(cls, effect_def: EffectDef, source_id: str | None = None) -> ActiveEffect:
        return cls(
            effect_id=effect_def.id,
            name=effect_def.name,
            duration=effect_def.duration,
            attack_mod=effect_def.attack_mod,
            defense_mod=effect_def.defense_mod,
            speed_mod=effect_def.speed_mod,
            dot_hp=effect_def.dot_hp,
            source_id=source_id,
        )


def sum_modifier(effects: Sequence[ActiveEffect], field: ModifierField) -> int:
    """Stack a modifier additively across every active effect."""
    return sum(getattr(effect, field) for effect in effects)


def total_dot(effects: Sequence[ActiveEffect]) -> int:
    return sum(effect.dot_hp for effect in effects)


def tick_effects(effects: Sequence[ActiveEffect]) -> Tuple[List[ActiveEffect], List[ActiveEffect]]:
    """
    Decrement every duration by one and split into (kept, expired).

    The kept list is a fresh list; callers replace their collection with it
    instead of removing entries while iterating.
    """
    kept: List[ActiveEffect] = []
    expired: List[ActiveEffect] = []
    for effect in effects:
        effect.duration -= 1
        if effect.duration > 0:
            kept.append(effect)
        else:
            expired.append(effect)
    return kept, expired
