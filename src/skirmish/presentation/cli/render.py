"""Shared CLI rendering helpers."""
from __future__ import annotations

import os
from typing import Iterable, Sequence

from skirmish.services.battle_service import BattleView, CombatantView


def debug_enabled() -> bool:
    """Return True only when SKIRMISH_DEBUG is explicitly set to '1'."""
    return os.getenv("SKIRMISH_DEBUG") == "1"


def render_heading(title: str) -> None:
    """Print a consistent section heading."""
    print(f"\n=== {title} ===")


def render_log_lines(lines: Iterable[str]) -> None:
    """Print battle log lines verbatim, in order."""
    for line in lines:
        print(line)


def format_combatant(view: CombatantView) -> str:
    status = "" if view.is_alive else " [down]"
    effects = f" ({', '.join(view.effects)})" if view.effects else ""
    return f"{view.name}: HP {view.hp}/{view.max_hp} MP {view.mp}/{view.max_mp}{effects}{status}"


def render_roster(title: str, combatants: Sequence[CombatantView]) -> None:
    render_heading(title)
    render_bullet_lines(format_combatant(view) for view in combatants)


def render_summary(view: BattleView) -> None:
    """Display final roster state after a battle."""
    render_roster("Players", view.players)
    render_roster("Enemies", view.enemies)
    if view.winner is None:
        print(f"\nResult: draw after {view.round} rounds")
    else:
        print(f"\nResult: {view.winner} team wins in round {view.round}")


def render_bullet_lines(lines: Iterable[str]) -> None:
    """Print bullet-prefixed lines."""
    for line in lines:
        print(f"- {line}")
