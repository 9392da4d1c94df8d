"""Shared fixtures for relicplanner unit tests.

Most tests use a small hand-written taxonomy so expected numbers are easy to
check by hand. ``gd`` loads the bundled reference data for the tests that
exercise it.
"""
import pytest

from relicplanner import GameData, SkillIndex, Taxonomy

TAXONOMY_JSON = {
    "RELIC_TYPES": {
        "Bulwark": {
            "main_skills": ["Fortress"],
            "aux_skills": {"HP Boost": 6, "{Element} Resistance": 4},
        },
        "Vanguard": {
            "main_skills": ["Onslaught"],
            "aux_skills": {"Attack Boost": 6},
        },
        "Support": {
            "main_skills": ["Lifeline"],
            "aux_skills": {"Healing Boost": 6},
        },
    },
    "ELEMENTS": ["Burn", "Freeze"],
}


@pytest.fixture(scope="session")
def taxonomy() -> Taxonomy:
    return Taxonomy.model_validate(TAXONOMY_JSON)


@pytest.fixture(scope="session")
def index(taxonomy: Taxonomy) -> SkillIndex:
    return SkillIndex(taxonomy)


@pytest.fixture(scope="session")
def gd() -> GameData:
    """GameData over the bundled resources. Loaded once per run."""
    return GameData()


@pytest.fixture(scope="session")
def taxonomy_json() -> dict:
    """The test taxonomy in reference JSON form (RELIC_TYPES / ELEMENTS)."""
    return TAXONOMY_JSON
