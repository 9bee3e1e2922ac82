"""Service layer exports."""

from .errors import BattleSetupError, EquipmentError, FactoryError
from .battle_service import BattleService, BattleView, CombatantView
from .policy import ActionDecision, choose_action

__all__ = [
    "ActionDecision",
    "BattleService",
    "BattleSetupError",
    "BattleView",
    "CombatantView",
    "EquipmentError",
    "FactoryError",
    "choose_action",
]
