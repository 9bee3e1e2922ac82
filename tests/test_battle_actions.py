from __future__ import annotations

from skirmish.core.config import BattleConfig
from skirmish.domain.battle_log import (
    AttackEvent,
    CriticalHitEvent,
    DeathEvent,
    EffectGainedEvent,
    HealEvent,
    InsufficientResourceEvent,
    InvalidActionEvent,
    ItemUsedEvent,
    NoTargetEvent,
    SkillDamageEvent,
    SkillUsedEvent,
)
from skirmish.domain.defs import ItemDef
from skirmish.services.battle_service import BattleService

from tests.helpers.builders import make_character, make_effect, make_skill, make_weapon
from tests.helpers.scripted_rng import ScriptedRNG


def _battle(players, enemies, rng=None, config=None):
    service = BattleService(config or BattleConfig())
    state = service.start_battle(players, enemies, rng or ScriptedRNG(), battle_id="battle_test")
    return service, state


def test_basic_attack_without_defense_deals_full_raw() -> None:
    attacker = make_character("p1", attack=8)
    target = make_character("e1", "enemy", max_hp=20, hp=20, defense=0)
    service, state = _battle([attacker], [target], ScriptedRNG(ints=[2]))

    events = service.basic_attack(state, attacker, target)

    assert target.stats.hp == 10
    attack = next(event for event in events if isinstance(event, AttackEvent))
    assert (attack.raw, attack.damage, attack.damage_type) == (10, 10, "physical")
    assert state.lines[-1] == "P1 attacks E1 for 10 damage (physical)"


def test_basic_attack_is_mitigated_by_half_defense() -> None:
    attacker = make_character("p1", attack=8)
    target = make_character("e1", "enemy", max_hp=20, hp=20, defense=6)
    service, state = _battle([attacker], [target], ScriptedRNG(ints=[2]))

    service.basic_attack(state, attacker, target)

    assert target.stats.hp == 13


def test_basic_attack_uses_weapon_range_and_damage_type() -> None:
    attacker = make_character("p1", attack=2)
    attacker.equip_weapon(make_weapon(3, 3, damage_type="magic"))
    target = make_character("e1", "enemy", defense=10, resist=4)
    service, state = _battle([attacker], [target])

    service.basic_attack(state, attacker, target)

    assert target.stats.hp == 17
    assert state.lines[-1] == "P1 attacks E1 for 3 damage (magic)"


def test_basic_attack_fallback_range_is_one_to_two() -> None:
    attacker = make_character("p1")
    target = make_character("e1", "enemy")
    rng = ScriptedRNG()
    service, state = _battle([attacker], [target], rng)

    service.basic_attack(state, attacker, target)

    # ScriptedRNG answers randint with the low bound of the requested range
    assert target.stats.hp == 19


def test_critical_basic_attack_multiplies_before_mitigation() -> None:
    attacker = make_character("p1", attack=8, crit_rate=1.0, crit_mult=2.0)
    target = make_character("e1", "enemy", max_hp=30, hp=30, defense=4)
    service, state = _battle([attacker], [target], ScriptedRNG(ints=[2]))

    service.basic_attack(state, attacker, target)

    assert target.stats.hp == 30 - (20 - 2)
    assert state.lines[-2:] == ["Critical hit! (P1)", "P1 attacks E1 for 18 damage (physical)"]
    assert len(state.log.of_type(CriticalHitEvent)) == 1


def test_lethal_hit_clamps_hp_and_logs_death_once() -> None:
    attacker = make_character("p1", attack=8)
    target = make_character("e1", "enemy", max_hp=20, hp=5)
    other = make_character("e2", "enemy")
    service, state = _battle([attacker], [target, other], ScriptedRNG(ints=[2]))

    service.basic_attack(state, attacker, target)
    follow_up = service.basic_attack(state, attacker, target)

    assert target.stats.hp == 0
    assert target.alive is False
    assert len(state.log.of_type(DeathEvent)) == 1
    assert [type(event) for event in follow_up] == [NoTargetEvent]
    assert state.lines[-1] == "P1 has no target for attack"


def test_damage_to_dead_character_does_not_log_second_death() -> None:
    target = make_character("e1", "enemy", hp=1)
    service, state = _battle([make_character("p1")], [target, make_character("e2", "enemy")])

    service.apply_damage(state, target, 5, "pure")
    service.apply_damage(state, target, 5, "pure")

    assert target.stats.hp == 0
    assert len(state.log.of_type(DeathEvent)) == 1


def test_dead_actor_cannot_act() -> None:
    attacker = make_character("p1", attack=8)
    attacker.alive = False
    attacker.stats.hp = 0
    target = make_character("e1", "enemy")
    service, state = _battle([attacker, make_character("p2")], [target])
    before = len(state.log)

    assert service.basic_attack(state, attacker, target) == []
    assert service.use_skill(state, attacker, 0, [target]) == []
    assert len(state.log) == before
    assert target.stats.hp == 20


def test_invalid_skill_index_changes_nothing() -> None:
    actor = make_character("p1", skills=[make_skill(mp_cost=2, damage_multiplier=1.0)])
    target = make_character("e1", "enemy")
    service, state = _battle([actor], [target])

    events = service.use_skill(state, actor, 3, [target])
    events += service.use_skill(state, actor, -1, [target])

    assert [type(event) for event in events] == [InvalidActionEvent, InvalidActionEvent]
    assert actor.stats.mp == 10
    assert target.stats.hp == 20
    assert state.lines[-1] == "P1 tried to use invalid skill"


def test_skill_without_enough_mp_is_a_logged_no_op() -> None:
    fireball = make_skill("fireball", mp_cost=8, damage_multiplier=2.0, damage_type="magic")
    actor = make_character("p1", mp=5, magic=10, skills=[fireball])
    target = make_character("e1", "enemy")
    service, state = _battle([actor], [target])

    events = service.use_skill(state, actor, 0, [target])

    assert [type(event) for event in events] == [InsufficientResourceEvent]
    assert actor.stats.mp == 5
    assert target.stats.hp == 20
    assert target.effects == []
    assert state.lines[-1] == "P1 lacks MP for Fireball"


def test_offensive_skill_debits_mp_and_damages() -> None:
    strike = make_skill("strike", mp_cost=4, damage_multiplier=2.0)
    actor = make_character("p1", attack=5, skills=[strike])
    target = make_character("e1", "enemy")
    service, state = _battle([actor], [target], ScriptedRNG(ints=[0]))

    events = service.use_skill(state, actor, 0, [target])

    assert [type(event) for event in events] == [SkillUsedEvent, SkillDamageEvent]
    assert actor.stats.mp == 6
    assert target.stats.hp == 10
    assert state.lines[-2:] == ["P1 uses skill Strike", "P1 deals 10 damage to E1 with Strike"]


def test_magic_skill_scales_from_magic_and_is_resisted() -> None:
    bolt = make_skill("bolt", mp_cost=1, damage_multiplier=2.2, damage_type="magic")
    actor = make_character("p1", attack=50, magic=4, skills=[bolt])
    actor.equip_weapon(make_weapon(magic_bonus=1))
    target = make_character("e1", "enemy", defense=40, resist=2)
    service, state = _battle([actor], [target], ScriptedRNG(ints=[-1]))

    service.use_skill(state, actor, 0, [target])

    # int(5 * 2.2) = 11, jitter -1, resist 2 // 2 = 1
    assert target.stats.hp == 20 - 9


def test_skill_crit_is_checked_per_target() -> None:
    sweep = make_skill("sweep", damage_multiplier=1.0, target_all=True)
    actor = make_character("p1", attack=10, crit_rate=0.5, crit_mult=2.0, skills=[sweep])
    first = make_character("e1", "enemy", max_hp=50, hp=50)
    second = make_character("e2", "enemy", max_hp=50, hp=50)
    rng = ScriptedRNG(ints=[0, 0], floats=[0.1, 0.9])
    service, state = _battle([actor], [first, second], rng)

    service.use_skill(state, actor, 0, [first, second])

    assert first.stats.hp == 30
    assert second.stats.hp == 40
    assert state.lines.count("Skill crit! (P1)") == 1


def test_target_all_skill_skips_dead_members() -> None:
    sweep = make_skill("sweep", mp_cost=3, damage_multiplier=1.0, target_all=True)
    actor = make_character("p1", attack=5, skills=[sweep])
    alive_a = make_character("e1", "enemy")
    fallen = make_character("e2", "enemy", hp=0)
    fallen.alive = False
    alive_b = make_character("e3", "enemy")
    service, state = _battle([actor], [alive_a, fallen, alive_b], ScriptedRNG(ints=[0, 0]))

    service.use_skill(state, actor, 0, [alive_a, fallen, alive_b])

    hits = state.log.of_type(SkillDamageEvent)
    assert [hit.target_id for hit in hits] == ["e1", "e3"]
    assert (alive_a.stats.hp, fallen.stats.hp, alive_b.stats.hp) == (15, 0, 15)


def test_offensive_skill_effect_only_lands_on_survivors() -> None:
    poison = make_effect("poison", duration=3, dot_hp=2)
    stab = make_skill("stab", damage_multiplier=1.0, target_all=True, effect=poison)
    actor = make_character("p1", attack=5, skills=[stab])
    sturdy = make_character("e1", "enemy")
    frail = make_character("e2", "enemy", hp=3)
    service, state = _battle([actor], [sturdy, frail], ScriptedRNG(ints=[0, 0]))

    service.use_skill(state, actor, 0, [sturdy, frail])

    assert [effect.name for effect in sturdy.effects] == ["Poison"]
    assert sturdy.effects[0].source_id == "p1"
    assert frail.effects == []
    gained = state.log.of_type(EffectGainedEvent)
    assert len(gained) == 1
    assert "E1 gains effect: Poison (dur=3)" in state.lines


def test_each_target_gets_its_own_effect_copy() -> None:
    slow = make_effect("slow", duration=2, speed_mod=-3)
    nova = make_skill("nova", damage_multiplier=1.0, target_all=True, effect=slow)
    actor = make_character("p1", attack=2, skills=[nova])
    first = make_character("e1", "enemy")
    second = make_character("e2", "enemy")
    service, state = _battle([actor], [first, second], ScriptedRNG(ints=[0, 0]))

    service.use_skill(state, actor, 0, [first, second])
    service.apply_end_of_turn(state, first)

    assert first.effects[0].duration == 1
    assert second.effects[0].duration == 2


def test_heal_skill_clamps_at_max_and_applies_effect() -> None:
    blessing = make_effect("blessing", duration=3, attack_mod=2)
    heal = make_skill("heal", mp_cost=8, heal_hp=18, effect=blessing)
    cleric = make_character("p1", skills=[heal])
    ally = make_character("p2", max_hp=20, hp=5)
    service, state = _battle([cleric, ally], [make_character("e1", "enemy")])

    service.use_skill(state, cleric, 0, [ally])

    assert ally.stats.hp == 20
    assert cleric.stats.mp == 2
    assert state.log.of_type(HealEvent)[0].amount == 15
    assert "P1 heals P2 for 15 HP" in state.lines
    assert ally.effective_attack == 2


def test_heal_never_revives() -> None:
    heal = make_skill("heal", mp_cost=8, heal_hp=18)
    cleric = make_character("p1", skills=[heal])
    fallen = make_character("p2", hp=0)
    fallen.alive = False
    service, state = _battle([cleric, fallen], [make_character("e1", "enemy")])

    events = service.use_skill(state, cleric, 0, [fallen])

    assert [type(event) for event in events] == [NoTargetEvent]
    assert fallen.stats.hp == 0
    assert fallen.alive is False
    assert cleric.stats.mp == 10


def test_effect_only_skill_applies_debuff() -> None:
    weaken = make_effect("weaken", duration=2, attack_mod=-2)
    hex_skill = make_skill("hex", mp_cost=4, effect=weaken)
    caster = make_character("p1", skills=[hex_skill])
    target = make_character("e1", "enemy", attack=6)
    service, state = _battle([caster], [target])

    events = service.use_skill(state, caster, 0, [target])

    assert [type(event) for event in events] == [SkillUsedEvent, EffectGainedEvent]
    assert caster.stats.mp == 6
    assert target.stats.hp == 20
    assert target.effective_attack == 4


def test_use_item_restores_and_consumes() -> None:
    potion = ItemDef(id="hp_potion", name="HP Potion", heal_hp=20)
    charm = ItemDef(id="charm", name="Charm", heal_mp=3, consumable=False)
    actor = make_character("p1", items=[potion, charm], mp=2)
    ally = make_character("p2", max_hp=30, hp=10)
    service, state = _battle([actor, ally], [make_character("e1", "enemy")])

    service.use_item(state, actor, 0, ally)
    service.use_item(state, actor, 0, actor)

    assert ally.stats.hp == 30
    assert actor.stats.mp == 5
    assert actor.items == [charm]
    assert [event.item_id for event in state.log.of_type(ItemUsedEvent)] == ["hp_potion", "charm"]
    assert state.lines[-2] == "P1 uses HP Potion on P2 (20 HP)"


def test_use_item_rejects_bad_index_and_dead_target() -> None:
    potion = ItemDef(id="hp_potion", name="HP Potion", heal_hp=20)
    actor = make_character("p1", items=[potion])
    fallen = make_character("p2", hp=0)
    fallen.alive = False
    service, state = _battle([actor, fallen], [make_character("e1", "enemy")])

    service.use_item(state, actor, 4, actor)
    service.use_item(state, actor, 0, fallen)

    assert state.lines[-2:] == ["P1 tried to use invalid item", "P1 has no target for HP Potion"]
    assert actor.items == [potion]
    assert fallen.stats.hp == 0
