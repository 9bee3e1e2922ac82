"""Skirmish: deterministic turn-based combat simulator."""

__version__ = "0.1.0"
