"""Pure damage arithmetic shared by attacks, skills and damage over time."""
from __future__ import annotations

from typing import Tuple

from skirmish.core.types import DamageType, RandomSource


def mitigate(raw: int, damage_type: DamageType, *, defense: int, resist: int, minimum: int = 1) -> int:
    """
    Reduce a raw hit by the defender's mitigation for its damage type.

    Physical hits lose half the defense, magic hits half the resist (both
    truncated) and are floored at ``minimum``. Pure damage is never reduced.
    """
    if damage_type == "physical":
        return max(minimum, raw - int(defense / 2))
    if damage_type == "magic":
        return max(minimum, raw - int(resist / 2))
    if damage_type == "pure":
        return max(0, raw)
    raise ValueError(f"Unknown damage type: {damage_type}")


def roll_crit(amount: int, crit_rate: float, crit_mult: float, rng: RandomSource) -> Tuple[int, bool]:
    """Run one crit check; on success scale ``amount`` by ``crit_mult``."""
    if rng.random() < crit_rate:
        return int(amount * crit_mult), True
    return amount, False


def roll_weapon_damage(rng: RandomSource, damage_min: int, damage_max: int) -> int:
    return rng.randint(damage_min, damage_max)


def scale_power(base: int, multiplier: float) -> int:
    """Skill power before jitter; truncates toward zero."""
    return int(base * multiplier)
