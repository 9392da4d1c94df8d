"""
Reference game data loader — reads the bundled JSON resources.

All methods are read-only. Constructor takes an optional resources_dir so
paths can be overridden (useful for testing and for custom data sets).
"""
import logging
from functools import lru_cache
from pathlib import Path

import orjson

from relicplanner.index import SkillIndex
from relicplanner.models import Doll, SkillOverride, Taxonomy

logger = logging.getLogger(__name__)


class GameData:
    """Taxonomy, skill overrides and characters from one resources directory."""

    TAXONOMY_FILE = "taxonomy.json"
    SKILLS_FILE   = "skills.json"
    DOLLS_FILE    = "dolls.json"

    def __init__(self, resources_dir: Path | None = None):
        if resources_dir is None:
            resources_dir = Path(__file__).parent / "resources"
        self._resources_dir = resources_dir

        self.taxonomy: Taxonomy = Taxonomy.model_validate(
            self._read(self.TAXONOMY_FILE, default={}))
        self.skill_overrides: dict[str, SkillOverride] = {
            name: SkillOverride.model_validate(d)
            for name, d in self._read(self.SKILLS_FILE, default={}).items()
        }
        self.dolls: dict[str, Doll] = {
            name: Doll.model_validate({"name": name, **d})
            for name, d in self._read(self.DOLLS_FILE, default={}).items()
        }
        logger.debug("Loaded %d categories, %d skill overrides, %d dolls from %s",
                     len(self.taxonomy.categories), len(self.skill_overrides),
                     len(self.dolls), resources_dir)

    def _read(self, filename: str, default: dict) -> dict:
        path = self._resources_dir / filename
        if not path.exists():
            logger.warning("Missing resource file %s", path)
            return default
        return orjson.loads(path.read_bytes())

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def build_index(self, default_max_level: int | None = None) -> SkillIndex:
        if default_max_level is None:
            return SkillIndex(self.taxonomy, self.skill_overrides)
        return SkillIndex(self.taxonomy, self.skill_overrides, default_max_level)

    def get_doll(self, name: str) -> Doll | None:
        return self.dolls.get(name)

    def get_doll_names(self) -> list[str]:
        return sorted(self.dolls)


@lru_cache(maxsize=1)
def get_game_data() -> GameData:
    """The bundled reference data, loaded once per process."""
    return GameData()
