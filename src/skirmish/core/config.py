"""Battle policy constants and their JSON loader."""
from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Tuple

from skirmish.data.errors import DataValidationError
from skirmish.data.json_loader import load_json
from skirmish.data.paths import get_definitions_path

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "battle_config.json"


@dataclass(frozen=True, slots=True)
class BattleConfig:
    """Tunable constants for damage resolution, the AI and termination."""

    skill_chance: float = 0.5
    self_heal_ratio: float = 0.5
    min_damage: int = 1
    damage_jitter: int = 1
    fallback_damage: Tuple[int, int] = (1, 2)
    max_rounds: int = 100

    def with_overrides(self, **changes: object) -> BattleConfig:
        """Return a copy with the non-None overrides applied."""
        applied = {key: value for key, value in changes.items() if value is not None}
        return replace(self, **applied) if applied else self


def load_battle_config(path: Path | str | None = None) -> BattleConfig:
    """
    Load config from ``path`` or the definitions directory.

    An explicit path must exist. Without one, a missing default file yields
    the built-in defaults. Keys that are present are validated.
    """
    if path is not None:
        config_path = Path(path)
    else:
        config_path = get_definitions_path() / CONFIG_FILENAME
        if not config_path.exists():
            logger.debug("No %s found; using defaults", config_path)
            return BattleConfig()

    raw = load_json(config_path)
    if not isinstance(raw, dict):
        raise DataValidationError(f"Expected top-level object in {config_path}")
    config = _parse_config(raw, str(config_path))
    logger.debug("Loaded battle config from %s: %s", config_path, config)
    return config


def _parse_config(raw: dict[str, object], context: str) -> BattleConfig:
    known = {item.name for item in fields(BattleConfig)}
    unknown = set(raw.keys()) - known
    if unknown:
        raise DataValidationError(f"{context} has unknown fields: {sorted(unknown)}")

    values: dict[str, object] = {}
    if "skill_chance" in raw:
        values["skill_chance"] = _require_probability(raw["skill_chance"], f"{context} skill_chance")
    if "self_heal_ratio" in raw:
        values["self_heal_ratio"] = _require_probability(raw["self_heal_ratio"], f"{context} self_heal_ratio")
    if "min_damage" in raw:
        values["min_damage"] = _require_non_negative_int(raw["min_damage"], f"{context} min_damage")
    if "damage_jitter" in raw:
        values["damage_jitter"] = _require_non_negative_int(raw["damage_jitter"], f"{context} damage_jitter")
    if "max_rounds" in raw:
        max_rounds = _require_non_negative_int(raw["max_rounds"], f"{context} max_rounds")
        if max_rounds < 1:
            raise DataValidationError(f"{context} max_rounds must be at least 1.")
        values["max_rounds"] = max_rounds
    if "fallback_damage" in raw:
        values["fallback_damage"] = _require_range(raw["fallback_damage"], f"{context} fallback_damage")
    return BattleConfig(**values)  # type: ignore[arg-type]


def _require_probability(value: object, context: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DataValidationError(f"{context} must be a number.")
    if not 0.0 <= float(value) <= 1.0:
        raise DataValidationError(f"{context} must be between 0 and 1.")
    return float(value)


def _require_non_negative_int(value: object, context: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise DataValidationError(f"{context} must be an integer.")
    if value < 0:
        raise DataValidationError(f"{context} must not be negative.")
    return value


def _require_range(value: object, context: str) -> Tuple[int, int]:
    if not isinstance(value, list) or len(value) != 2:
        raise DataValidationError(f"{context} must be a [min, max] pair.")
    low = _require_non_negative_int(value[0], f"{context}[0]")
    high = _require_non_negative_int(value[1], f"{context}[1]")
    if low > high:
        raise DataValidationError(f"{context} min must not exceed max.")
    return low, high
