"""Service-layer exceptions."""

from skirmish.domain.errors import EquipmentError


class FactoryError(Exception):
    """Raised when a runtime entity cannot be created."""


class BattleSetupError(Exception):
    """Raised when rosters cannot form a valid battle."""


__all__ = ["BattleSetupError", "EquipmentError", "FactoryError"]
