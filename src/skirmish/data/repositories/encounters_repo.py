"""Encounters repository."""
from __future__ import annotations

from typing import Dict, List

from skirmish.data.errors import DataReferenceError, DataValidationError
from skirmish.data.repositories.base import RepositoryBase
from skirmish.data.repositories.characters_repo import CharactersRepository
from skirmish.domain.defs import EncounterDef


class EncountersRepository(RepositoryBase[EncounterDef]):
    """Loads player-versus-enemy roster pairings."""

    def __init__(self, characters_repo: CharactersRepository | None = None, base_path=None) -> None:
        super().__init__("encounters.json", base_path)
        self._characters_repo = characters_repo or CharactersRepository(base_path=base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, EncounterDef]:
        character_ids = self._characters_repo.ids()
        encounters: Dict[str, EncounterDef] = {}
        for raw_id, payload in raw.items():
            context = f"encounter '{raw_id}'"
            data = self._require_mapping(payload, context)
            self._assert_exact_fields(data, {"name", "players", "enemies"}, context)

            players = self._require_roster(data["players"], character_ids, f"{context} players")
            enemies = self._require_roster(data["enemies"], character_ids, f"{context} enemies")
            encounters[raw_id] = EncounterDef(
                id=raw_id,
                name=self._require_str(data["name"], f"{context} name"),
                player_ids=tuple(players),
                enemy_ids=tuple(enemies),
            )
        return encounters

    def _require_roster(self, value: object, known: set[str], context: str) -> List[str]:
        roster = self._require_str_list(value, context)
        if not roster:
            raise DataValidationError(f"{context} must list at least one character.")
        for character_id in roster:
            if character_id not in known:
                raise DataReferenceError(f"{context} references missing character '{character_id}'.")
        return roster
