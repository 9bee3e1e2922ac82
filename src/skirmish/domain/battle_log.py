"""Battle events and the append-only log that records them."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Literal, Tuple, Type, TypeVar

from skirmish.core.types import DamageType, Team

CritSource = Literal["attack", "skill"]
EquipSlot = Literal["weapon", "armour"]
E = TypeVar("E", bound="BattleEvent")


@dataclass(frozen=True, slots=True)
class BattleEvent:
    """Base battle event."""


@dataclass(frozen=True, slots=True)
class BattleStartedEvent(BattleEvent):
    battle_id: str
    player_names: Tuple[str, ...]
    enemy_names: Tuple[str, ...]


@dataclass(frozen=True, slots=True)
class EquipEvent(BattleEvent):
    character_id: str
    character_name: str
    slot: EquipSlot
    item_name: str


@dataclass(frozen=True, slots=True)
class RoundStartedEvent(BattleEvent):
    round: int


@dataclass(frozen=True, slots=True)
class CriticalHitEvent(BattleEvent):
    actor_id: str
    actor_name: str
    source: CritSource


@dataclass(frozen=True, slots=True)
class AttackEvent(BattleEvent):
    attacker_id: str
    attacker_name: str
    target_id: str
    target_name: str
    raw: int
    damage: int
    damage_type: DamageType
    target_hp: int


@dataclass(frozen=True, slots=True)
class SkillUsedEvent(BattleEvent):
    actor_id: str
    actor_name: str
    skill_id: str
    skill_name: str
    mp_cost: int


@dataclass(frozen=True, slots=True)
class SkillDamageEvent(BattleEvent):
    actor_id: str
    actor_name: str
    target_id: str
    target_name: str
    skill_name: str
    raw: int
    damage: int
    damage_type: DamageType
    target_hp: int


@dataclass(frozen=True, slots=True)
class HealEvent(BattleEvent):
    actor_id: str
    actor_name: str
    target_id: str
    target_name: str
    source_name: str
    amount: int
    target_hp: int


@dataclass(frozen=True, slots=True)
class ItemUsedEvent(BattleEvent):
    actor_id: str
    actor_name: str
    target_id: str
    target_name: str
    item_id: str
    item_name: str
    hp_restored: int
    mp_restored: int


@dataclass(frozen=True, slots=True)
class EffectGainedEvent(BattleEvent):
    character_id: str
    character_name: str
    effect_name: str
    duration: int
    source_id: str | None


@dataclass(frozen=True, slots=True)
class EffectExpiredEvent(BattleEvent):
    character_id: str
    character_name: str
    effect_name: str


@dataclass(frozen=True, slots=True)
class DotDamageEvent(BattleEvent):
    character_id: str
    character_name: str
    damage: int
    target_hp: int


@dataclass(frozen=True, slots=True)
class DeathEvent(BattleEvent):
    character_id: str
    character_name: str


@dataclass(frozen=True, slots=True)
class InvalidActionEvent(BattleEvent):
    actor_id: str
    actor_name: str
    action: Literal["skill", "item"]
    index: int


@dataclass(frozen=True, slots=True)
class InsufficientResourceEvent(BattleEvent):
    actor_id: str
    actor_name: str
    skill_name: str
    required: int
    available: int


@dataclass(frozen=True, slots=True)
class NoTargetEvent(BattleEvent):
    actor_id: str
    actor_name: str
    action: str


@dataclass(frozen=True, slots=True)
class VictoryEvent(BattleEvent):
    winner: Team


@dataclass(frozen=True, slots=True)
class DrawEvent(BattleEvent):
    rounds: int


def describe_event(event: BattleEvent) -> str:
    """Render one event as a human-readable log line."""
    if isinstance(event, BattleStartedEvent):
        return f"Battle {event.battle_id}: {', '.join(event.player_names)} vs {', '.join(event.enemy_names)}"
    if isinstance(event, EquipEvent):
        return f"{event.character_name} equips {event.slot}: {event.item_name}"
    if isinstance(event, RoundStartedEvent):
        return f"=== Round {event.round} ==="
    if isinstance(event, CriticalHitEvent):
        label = "Critical hit!" if event.source == "attack" else "Skill crit!"
        return f"{label} ({event.actor_name})"
    if isinstance(event, AttackEvent):
        return (
            f"{event.attacker_name} attacks {event.target_name} for {event.damage} damage "
            f"({event.damage_type})"
        )
    if isinstance(event, SkillUsedEvent):
        return f"{event.actor_name} uses skill {event.skill_name}"
    if isinstance(event, SkillDamageEvent):
        return f"{event.actor_name} deals {event.damage} damage to {event.target_name} with {event.skill_name}"
    if isinstance(event, HealEvent):
        return f"{event.actor_name} heals {event.target_name} for {event.amount} HP"
    if isinstance(event, ItemUsedEvent):
        restored: List[str] = []
        if event.hp_restored:
            restored.append(f"{event.hp_restored} HP")
        if event.mp_restored:
            restored.append(f"{event.mp_restored} MP")
        detail = f" ({', '.join(restored)})" if restored else ""
        return f"{event.actor_name} uses {event.item_name} on {event.target_name}{detail}"
    if isinstance(event, EffectGainedEvent):
        return f"{event.character_name} gains effect: {event.effect_name} (dur={event.duration})"
    if isinstance(event, EffectExpiredEvent):
        return f"Effect {event.effect_name} on {event.character_name} ended"
    if isinstance(event, DotDamageEvent):
        return f"{event.character_name} takes {event.damage} DOT damage"
    if isinstance(event, DeathEvent):
        return f"{event.character_name} died!"
    if isinstance(event, InvalidActionEvent):
        return f"{event.actor_name} tried to use invalid {event.action}"
    if isinstance(event, InsufficientResourceEvent):
        return f"{event.actor_name} lacks MP for {event.skill_name}"
    if isinstance(event, NoTargetEvent):
        return f"{event.actor_name} has no target for {event.action}"
    if isinstance(event, VictoryEvent):
        return "Players win!" if event.winner == "player" else "Enemies win!"
    if isinstance(event, DrawEvent):
        return f"Draw after {event.rounds} rounds"
    raise ValueError(f"Unknown battle event: {type(event).__name__}")


class BattleLog:
    """Append-only, ordered sink for battle events."""

    def __init__(self) -> None:
        self._events: List[BattleEvent] = []

    def append(self, event: BattleEvent) -> BattleEvent:
        self._events.append(event)
        return event

    @property
    def events(self) -> Tuple[BattleEvent, ...]:
        return tuple(self._events)

    def of_type(self, event_type: Type[E]) -> List[E]:
        return [event for event in self._events if isinstance(event, event_type)]

    def lines(self) -> List[str]:
        return [describe_event(event) for event in self._events]

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[BattleEvent]:
        return iter(tuple(self._events))
