"""Command-line front end: runs encounters and prints their event log."""
from __future__ import annotations

import argparse
import logging
import secrets
import sys
from pathlib import Path
from typing import Sequence

from skirmish.core.config import BattleConfig, load_battle_config
from skirmish.core.rng import RNG
from skirmish.data.errors import DataError
from skirmish.data.repositories import (
    ArmourRepository,
    CharactersRepository,
    EffectsRepository,
    EncountersRepository,
    ItemsRepository,
    SkillsRepository,
    WeaponsRepository,
)
from skirmish.services import BattleService, BattleSetupError, FactoryError
from skirmish.services.factories import build_rosters

from .render import debug_enabled, render_heading, render_log_lines, render_summary

_MAX_RANDOM_SEED = 2**31 - 1

logger = logging.getLogger(__name__)


class _Repositories:
    """Concrete repositories sharing one definitions directory."""

    def __init__(self, base_path: Path | None = None) -> None:
        self.weapons = WeaponsRepository(base_path=base_path)
        self.armour = ArmourRepository(base_path=base_path)
        self.effects = EffectsRepository(base_path=base_path)
        self.skills = SkillsRepository(effects_repo=self.effects, base_path=base_path)
        self.items = ItemsRepository(base_path=base_path)
        self.characters = CharactersRepository(
            weapons_repo=self.weapons,
            armour_repo=self.armour,
            skills_repo=self.skills,
            items_repo=self.items,
            base_path=base_path,
        )
        self.encounters = EncountersRepository(characters_repo=self.characters, base_path=base_path)


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="skirmish", description="Turn-based combat simulator.")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--definitions", type=Path, default=None, help="Directory holding definition JSON files")
    subparsers = parser.add_subparsers(dest="command", required=True)

    simulate = subparsers.add_parser("simulate", help="Run an encounter to completion")
    simulate.add_argument("encounter_id", help="Encounter id from encounters.json")
    simulate.add_argument("--seed", type=int, default=None, help="Seed for deterministic rolls")
    simulate.add_argument("--max-rounds", type=_positive_int, default=None, help="Round cap before declaring a draw")
    simulate.add_argument("--config", type=Path, default=None, help="Path to a battle_config.json")
    simulate.add_argument("--summary", action="store_true", help="Print final roster state")

    subparsers.add_parser("list", help="List available encounters")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Parse arguments, run the command and return an exit status."""
    args = build_parser().parse_args(argv)
    _configure_logging(args.debug or debug_enabled())
    repos = _Repositories(args.definitions)
    try:
        if args.command == "list":
            return _list_encounters(repos)
        return _simulate(repos, args)
    except (DataError, FactoryError, BattleSetupError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


def _configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _list_encounters(repos: _Repositories) -> int:
    render_heading("Encounters")
    for encounter in repos.encounters.all():
        print(f"{encounter.id}: {encounter.name}")
    return 0


def _simulate(repos: _Repositories, args: argparse.Namespace) -> int:
    config = _load_config(args.config, args.definitions).with_overrides(max_rounds=args.max_rounds)
    seed = args.seed if args.seed is not None else secrets.randbelow(_MAX_RANDOM_SEED)
    print(f"Seed: {seed}")
    logger.debug("Simulating %s with seed %d and %s", args.encounter_id, seed, config)

    players, enemies = build_rosters(
        args.encounter_id,
        encounters_repo=repos.encounters,
        characters_repo=repos.characters,
        weapons_repo=repos.weapons,
        armour_repo=repos.armour,
        skills_repo=repos.skills,
        items_repo=repos.items,
    )
    service = BattleService(config)
    battle_state = service.start_battle(players, enemies, RNG(seed))
    service.run_battle(battle_state)
    render_log_lines(battle_state.lines)
    if args.summary:
        render_summary(service.get_battle_view(battle_state))
    return 0


def _load_config(config_path: Path | None, definitions: Path | None) -> BattleConfig:
    if config_path is not None:
        return load_battle_config(config_path)
    if definitions is not None:
        candidate = definitions / "battle_config.json"
        return load_battle_config(candidate) if candidate.exists() else BattleConfig()
    return load_battle_config()

