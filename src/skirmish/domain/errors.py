"""Domain-level exceptions."""


class EquipmentError(Exception):
    """Raised when equipment is already held by another character."""
