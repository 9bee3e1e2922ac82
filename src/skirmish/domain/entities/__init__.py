"""Runtime entity exports."""

from .equipment import Armour, Weapon
from .stats import StatBlock

__all__ = [
    "Armour",
    "StatBlock",
    "Weapon",
]
