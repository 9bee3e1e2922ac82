"""Factory helpers for runtime entities."""

from .character_factory import build_roster, build_rosters, create_character
from .id_factory import make_instance_id, make_roster_id

__all__ = [
    "build_roster",
    "build_rosters",
    "create_character",
    "make_instance_id",
    "make_roster_id",
]
