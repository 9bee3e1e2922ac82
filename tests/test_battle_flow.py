from __future__ import annotations

import pytest

from skirmish.core.config import BattleConfig
from skirmish.core.rng import RNG
from skirmish.data.repositories import (
    ArmourRepository,
    CharactersRepository,
    EffectsRepository,
    EncountersRepository,
    ItemsRepository,
    SkillsRepository,
    WeaponsRepository,
)
from skirmish.domain.battle_log import (
    AttackEvent,
    DeathEvent,
    ItemUsedEvent,
    RoundStartedEvent,
    SkillUsedEvent,
    VictoryEvent,
)
from skirmish.domain.effects import ActiveEffect
from skirmish.services import BattleService, BattleSetupError
from skirmish.services.factories import build_rosters

from tests.helpers.builders import make_armour, make_character, make_effect, make_weapon
from tests.helpers.scripted_rng import ScriptedRNG


def _content_rosters(encounter_id: str):
    weapons = WeaponsRepository()
    armour = ArmourRepository()
    skills = SkillsRepository(effects_repo=EffectsRepository())
    items = ItemsRepository()
    characters = CharactersRepository(
        weapons_repo=weapons, armour_repo=armour, skills_repo=skills, items_repo=items
    )
    return build_rosters(
        encounter_id,
        encounters_repo=EncountersRepository(characters_repo=characters),
        characters_repo=characters,
        weapons_repo=weapons,
        armour_repo=armour,
        skills_repo=skills,
        items_repo=items,
    )


def _simulate(encounter_id: str, seed: int):
    players, enemies = _content_rosters(encounter_id)
    service = BattleService()
    state = service.start_battle(players, enemies, RNG(seed))
    outcome = service.run_battle(state)
    return state, outcome


def test_turn_order_sorts_by_speed_and_keeps_roster_order_on_ties() -> None:
    p1 = make_character("p1", speed=5)
    p2 = make_character("p2", speed=7)
    e1 = make_character("e1", "enemy", speed=5)
    e2 = make_character("e2", "enemy", speed=9)
    service = BattleService()
    state = service.start_battle([p1, p2], [e1, e2], ScriptedRNG(), battle_id="battle_test")

    assert [character.instance_id for character in service.turn_order(state)] == ["e2", "p2", "p1", "e1"]


def test_turn_order_uses_effective_speed() -> None:
    p1 = make_character("p1", speed=5)
    e1 = make_character("e1", "enemy", speed=4)
    service = BattleService()
    state = service.start_battle([p1], [e1], ScriptedRNG(), battle_id="battle_test")
    assert [character.instance_id for character in service.turn_order(state)] == ["p1", "e1"]

    p1.effects.append(ActiveEffect.from_def(make_effect("slow", duration=2, speed_mod=-3)))

    assert [character.instance_id for character in service.turn_order(state)] == ["e1", "p1"]


def test_setup_equipment_is_logged_after_battle_start() -> None:
    p1 = make_character("p1")
    p1.equip_weapon(make_weapon(2, 4))
    p1.equip_armour(make_armour(defense_bonus=1))
    e1 = make_character("e1", "enemy")
    e1.equip_armour(make_armour())
    service = BattleService()

    state = service.start_battle([p1], [e1], ScriptedRNG(), battle_id="battle_test")

    assert state.lines == [
        "Battle battle_test: P1 vs E1",
        "P1 equips weapon: Test Weapon",
        "P1 equips armour: Test Armour",
        "E1 equips armour: Test Armour",
    ]


def test_one_hit_kill_ends_battle_before_enemy_acts() -> None:
    p1 = make_character("p1", attack=100, speed=10)
    e1 = make_character("e1", "enemy", max_hp=10, hp=10, speed=1, attack=50)
    service = BattleService()
    state = service.start_battle([p1], [e1], ScriptedRNG(), battle_id="battle_test")

    outcome = service.run_battle(state)

    assert (outcome.winner, outcome.rounds, outcome.reason) == ("player", 1, "defeat")
    assert e1.is_alive is False
    assert p1.stats.hp == 20
    assert state.lines == [
        "Battle battle_test: P1 vs E1",
        "=== Round 1 ===",
        "P1 attacks E1 for 101 damage (physical)",
        "E1 died!",
        "Players win!",
    ]


def test_round_stops_as_soon_as_a_side_is_defeated() -> None:
    p1 = make_character("p1", attack=100, speed=10)
    p2 = make_character("p2", attack=100, speed=8)
    e1 = make_character("e1", "enemy", max_hp=10, hp=10, speed=9)
    service = BattleService()
    state = service.start_battle([p1, p2], [e1], ScriptedRNG(), battle_id="battle_test")

    service.run_round(state)

    attackers = [event.attacker_id for event in state.log.of_type(AttackEvent)]
    assert attackers == ["p1"]
    assert state.is_over is True


def test_enemies_can_win() -> None:
    p1 = make_character("p1", max_hp=20, hp=1, speed=1)
    e1 = make_character("e1", "enemy", attack=10, speed=10)
    service = BattleService()
    state = service.start_battle([p1], [e1], ScriptedRNG(), battle_id="battle_test")

    outcome = service.run_battle(state)

    assert (outcome.winner, outcome.rounds) == ("enemy", 1)
    assert state.lines[-1] == "Enemies win!"


def test_round_cap_produces_draw() -> None:
    p1 = make_character("p1", max_hp=1000, hp=1000)
    e1 = make_character("e1", "enemy", max_hp=1000, hp=1000)
    service = BattleService(BattleConfig(max_rounds=5))
    state = service.start_battle([p1], [e1], ScriptedRNG(), battle_id="battle_test")

    outcome = service.run_battle(state)

    assert (outcome.winner, outcome.rounds, outcome.reason) == (None, 5, "round_cap")
    assert len(state.log.of_type(RoundStartedEvent)) == 5
    assert state.lines[-1] == "Draw after 5 rounds"
    assert state.is_over is True


def test_already_defeated_rosters_resolve_at_start() -> None:
    p1 = make_character("p1", hp=0)
    p1.alive = False
    e1 = make_character("e1", "enemy", hp=0)
    e1.alive = False
    service = BattleService()

    state = service.start_battle([p1], [e1], ScriptedRNG(), battle_id="battle_test")
    outcome = service.run_battle(state)

    assert state.is_over is True
    assert (outcome.winner, outcome.rounds) == ("player", 0)
    assert service.run_round(state) == []
    assert len(state.log.of_type(VictoryEvent)) == 1


def test_run_round_returns_only_that_rounds_events() -> None:
    p1 = make_character("p1", max_hp=100, hp=100)
    e1 = make_character("e1", "enemy", max_hp=100, hp=100)
    service = BattleService()
    state = service.start_battle([p1], [e1], ScriptedRNG(), battle_id="battle_test")

    first = service.run_round(state)
    second = service.run_round(state)

    assert isinstance(first[0], RoundStartedEvent) and first[0].round == 1
    assert isinstance(second[0], RoundStartedEvent) and second[0].round == 2
    assert len(first) == len(second) == 3


def test_actor_killed_by_damage_over_time_skips_its_action() -> None:
    poisoned = make_character("p1", hp=2, speed=10, attack=5)
    poisoned.effects.append(ActiveEffect.from_def(make_effect("poison", duration=3, dot_hp=4)))
    ally = make_character("p2", speed=5)
    e1 = make_character("e1", "enemy", max_hp=50, hp=50, speed=3)
    service = BattleService()
    state = service.start_battle([poisoned, ally], [e1], ScriptedRNG(), battle_id="battle_test")

    service.run_round(state)

    assert poisoned.is_alive is False
    assert "p1" not in [event.attacker_id for event in state.log.of_type(AttackEvent)]
    assert poisoned.effects[0].duration == 3
    assert [event.character_id for event in state.log.of_type(DeathEvent)] == ["p1"]


@pytest.mark.parametrize(
    ("players", "enemies", "message"),
    [
        ([], ["e1"], "Player roster is empty"),
        (["p1"], [], "Enemy roster is empty"),
        (["p1"], ["p1"], "Duplicate character id"),
    ],
)
def test_start_battle_rejects_bad_rosters(players, enemies, message) -> None:
    player_chars = [make_character(instance_id) for instance_id in players]
    enemy_chars = [make_character(instance_id, "enemy") for instance_id in enemies]

    with pytest.raises(BattleSetupError, match=message):
        BattleService().start_battle(player_chars, enemy_chars, ScriptedRNG())


def test_start_battle_rejects_wrong_team_tag() -> None:
    with pytest.raises(BattleSetupError, match="tagged"):
        BattleService().start_battle([make_character("p1")], [make_character("e1")], ScriptedRNG())


def test_same_seed_replays_identical_log() -> None:
    first_state, first_outcome = _simulate("goblin_ambush", 42)
    second_state, second_outcome = _simulate("goblin_ambush", 42)

    assert first_state.lines == second_state.lines
    assert first_state.battle_id == second_state.battle_id
    assert first_outcome == second_outcome


@pytest.mark.parametrize("encounter_id", ["goblin_ambush", "shaman_camp", "training_yard"])
@pytest.mark.parametrize("seed", [1, 7, 42, 1234, 99999])
def test_resource_bounds_hold_every_round(encounter_id: str, seed: int) -> None:
    players, enemies = _content_rosters(encounter_id)
    service = BattleService()
    state = service.start_battle(players, enemies, RNG(seed))

    while not state.is_over and state.round < service.config.max_rounds:
        service.run_round(state)
        for character in state.all_characters():
            assert 0 <= character.stats.hp <= character.stats.max_hp
            assert 0 <= character.stats.mp <= character.stats.max_mp
            assert character.is_alive == (character.stats.hp > 0)

    outcome = service.run_battle(state)
    assert outcome.winner in ("player", "enemy", None)


@pytest.mark.parametrize("seed", [3, 17, 2024])
def test_dead_characters_never_act_again(seed: int) -> None:
    state, _ = _simulate("goblin_ambush", seed)

    dead: set[str] = set()
    for event in state.log:
        if isinstance(event, DeathEvent):
            assert event.character_id not in dead
            dead.add(event.character_id)
        elif isinstance(event, AttackEvent):
            assert event.attacker_id not in dead
        elif isinstance(event, (SkillUsedEvent, ItemUsedEvent)):
            assert event.actor_id not in dead
