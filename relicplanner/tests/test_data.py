"""Tests for GameData (data.py) against the bundled resources."""
from pathlib import Path

import orjson

from relicplanner import GameData
from relicplanner.data import get_game_data
from relicplanner.models import BuildResult, Relic, SkillRoll


class TestBundledData:
    def test_categories(self, gd: GameData) -> None:
        assert set(gd.taxonomy.categories) == {"Bulwark", "Vanguard", "Support", "Sentinel"}

    def test_elements_expand(self, gd: GameData) -> None:
        index = gd.build_index()
        for element in gd.taxonomy.elements:
            assert index.category_of(f"{element} Resistance") == "Bulwark"
            assert index.category_of(f"{element} Damage Boost") == "Vanguard"

    def test_overrides_win(self, gd: GameData) -> None:
        index = gd.build_index()
        assert index.max_level("HP Boost") == 12
        assert index.max_level("Lifeline") == 4
        assert index.max_level("Rally") == 6

    def test_custom_default_max_level(self, gd: GameData) -> None:
        assert gd.build_index(default_max_level=8).max_level("Unknown") == 8

    def test_dolls(self, gd: GameData) -> None:
        names = gd.get_doll_names()
        assert names == sorted(names)
        groza = gd.get_doll("Groza")
        assert groza is not None
        assert sum(groza.allowed_slots.values()) == 6
        assert [b.tier for b in groza.bonuses] == [1, 2, 3]
        assert groza.bonuses[2].thresholds == {"Bulwark": 18, "Support": 3}

    def test_every_doll_fills_a_build(self, gd: GameData) -> None:
        for name in gd.get_doll_names():
            doll = gd.get_doll(name)
            assert sum(doll.allowed_slots.values()) >= 6, name
            assert set(doll.allowed_slots) <= set(gd.taxonomy.categories), name

    def test_unknown_doll(self, gd: GameData) -> None:
        assert gd.get_doll("Nobody") is None

    def test_active_bonuses(self, gd: GameData) -> None:
        relic = Relic(category="Bulwark", primary=SkillRoll(name="Fortress", level=2))
        result = BuildResult(
            relics=[relic] * 6,
            raw_category_levels={"Bulwark": 12},
            raw_skill_levels={"Fortress": 12},
            effective_skill_levels={"Fortress": 6},
        )
        active = gd.get_doll("Groza").active_bonuses(result)
        assert [b.tier for b in active] == [1, 2]


class TestCustomResources:
    def test_missing_files_load_empty(self, tmp_path: Path) -> None:
        gd = GameData(resources_dir=tmp_path)
        assert gd.taxonomy.categories == {}
        assert gd.skill_overrides == {}
        assert gd.dolls == {}

    def test_custom_directory(self, tmp_path: Path) -> None:
        (tmp_path / "taxonomy.json").write_bytes(orjson.dumps({
            "RELIC_TYPES": {"Arcane": {"main_skills": ["Spark"], "aux_skills": {}}},
            "ELEMENTS": [],
        }))
        (tmp_path / "dolls.json").write_bytes(orjson.dumps({
            "Mage": {"allowed_slots": {"Arcane": 6}, "bonuses": []},
        }))
        gd = GameData(resources_dir=tmp_path)
        assert list(gd.taxonomy.categories) == ["Arcane"]
        assert gd.build_index().category_of("Spark") == "Arcane"
        assert gd.get_doll("Mage").name == "Mage"


class TestCachedLoader:
    def test_loaded_once(self) -> None:
        assert get_game_data() is get_game_data()
        assert "Cheeta" in get_game_data().get_doll_names()
