"""Characters repository with reference validation."""
from __future__ import annotations

from typing import Dict, Iterable

from skirmish.data.errors import DataReferenceError, DataValidationError
from skirmish.data.repositories.armour_repo import ArmourRepository
from skirmish.data.repositories.base import RepositoryBase
from skirmish.data.repositories.items_repo import ItemsRepository
from skirmish.data.repositories.skills_repo import SkillsRepository
from skirmish.data.repositories.weapons_repo import WeaponsRepository
from skirmish.domain.defs import CharacterDef
from skirmish.domain.entities import StatBlock

_STAT_FIELDS = {"max_hp", "max_mp", "attack", "defense", "magic", "resist", "speed"}


class CharactersRepository(RepositoryBase[CharacterDef]):
    """Loads character templates and ensures referenced content exists."""

    def __init__(
        self,
        weapons_repo: WeaponsRepository | None = None,
        armour_repo: ArmourRepository | None = None,
        skills_repo: SkillsRepository | None = None,
        items_repo: ItemsRepository | None = None,
        base_path=None,
    ) -> None:
        super().__init__("characters.json", base_path)
        self._weapons_repo = weapons_repo or WeaponsRepository(base_path=base_path)
        self._armour_repo = armour_repo or ArmourRepository(base_path=base_path)
        self._skills_repo = skills_repo or SkillsRepository(base_path=base_path)
        self._items_repo = items_repo or ItemsRepository(base_path=base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, CharacterDef]:
        weapon_ids = self._weapons_repo.ids()
        armour_ids = self._armour_repo.ids()
        skill_ids = self._skills_repo.ids()
        item_ids = self._items_repo.ids()

        characters: Dict[str, CharacterDef] = {}
        for raw_id, payload in raw.items():
            context = f"character '{raw_id}'"
            data = self._require_mapping(payload, context)
            self._assert_exact_fields(
                data,
                {"name", "stats"},
                context,
                optional_fields={"weapon", "armour", "skills", "items"},
            )

            weapon_id = self._require_optional_str(data.get("weapon"), f"{context} weapon")
            armour_id = self._require_optional_str(data.get("armour"), f"{context} armour")
            skills = self._require_str_list(data.get("skills", []), f"{context} skills")
            items = self._require_str_list(data.get("items", []), f"{context} items")

            if weapon_id is not None and weapon_id not in weapon_ids:
                raise DataReferenceError(f"{context} references missing weapon '{weapon_id}'.")
            if armour_id is not None and armour_id not in armour_ids:
                raise DataReferenceError(f"{context} references missing armour '{armour_id}'.")
            self._check_refs(skills, skill_ids, f"{context} skill")
            self._check_refs(items, item_ids, f"{context} item")

            characters[raw_id] = CharacterDef(
                id=raw_id,
                name=self._require_str(data["name"], f"{context} name"),
                stats=self._build_stats(data["stats"], f"{context} stats"),
                weapon_id=weapon_id,
                armour_id=armour_id,
                skill_ids=tuple(skills),
                item_ids=tuple(items),
            )
        return characters

    def _build_stats(self, value: object, context: str) -> StatBlock:
        stats = self._require_mapping(value, context)
        self._assert_exact_fields(stats, _STAT_FIELDS, context, optional_fields={"crit_rate", "crit_mult"})

        max_hp = self._require_int(stats["max_hp"], f"{context}.max_hp")
        if max_hp < 1:
            raise DataValidationError(f"{context}.max_hp must be at least 1.")
        max_mp = self._require_non_negative_int(stats["max_mp"], f"{context}.max_mp")
        crit_rate = self._require_number(stats.get("crit_rate", 0.0), f"{context}.crit_rate")
        crit_mult = self._require_number(stats.get("crit_mult", 1.0), f"{context}.crit_mult")
        if not 0.0 <= crit_rate <= 1.0:
            raise DataValidationError(f"{context}.crit_rate must be between 0 and 1.")
        if crit_mult < 1.0:
            raise DataValidationError(f"{context}.crit_mult must be at least 1.")

        return StatBlock(
            max_hp=max_hp,
            hp=max_hp,
            max_mp=max_mp,
            mp=max_mp,
            attack=self._require_int(stats["attack"], f"{context}.attack"),
            defense=self._require_int(stats["defense"], f"{context}.defense"),
            magic=self._require_int(stats["magic"], f"{context}.magic"),
            resist=self._require_int(stats["resist"], f"{context}.resist"),
            speed=self._require_int(stats["speed"], f"{context}.speed"),
            crit_rate=crit_rate,
            crit_mult=crit_mult,
        )

    @staticmethod
    def _check_refs(refs: Iterable[str], known: set[str], context: str) -> None:
        for ref in refs:
            if ref not in known:
                raise DataReferenceError(f"{context} '{ref}' does not exist.")
