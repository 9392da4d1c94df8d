"""Skill lookup tables: skill name -> category, skill name -> max level."""
import logging
from collections.abc import Iterator

from relicplanner.constants import DEFAULT_MAX_LEVEL, ELEMENT_PLACEHOLDER
from relicplanner.models import SkillOverride, Taxonomy

logger = logging.getLogger(__name__)


class SkillIndex:
    """Total lookups over every skill the taxonomy and overrides know about.

    Unknown names never raise: they are uncategorized and capped at
    ``default_max_level``.
    """

    def __init__(self, taxonomy: Taxonomy | None = None,
                 overrides: dict[str, SkillOverride] | None = None,
                 default_max_level: int = DEFAULT_MAX_LEVEL):
        self.default_max_level = default_max_level
        self._categories: dict[str, str] = {}
        self._max_levels: dict[str, int] = {}
        self._descriptions: dict[str, str] = {}
        self._category_names: set[str] = set()
        if taxonomy is not None:
            self._load_taxonomy(taxonomy)
        for name, override in (overrides or {}).items():
            self._categories[name] = override.category
            self._max_levels[name] = override.max_level
            self._category_names.add(override.category)
            if override.description:
                self._descriptions[name] = override.description
        logger.debug("SkillIndex: %d skills across %d categories",
                     len(self._categories), len(self._category_names))

    def _load_taxonomy(self, taxonomy: Taxonomy) -> None:
        for cat_name, cat in taxonomy.categories.items():
            self._category_names.add(cat_name)
            for skill in cat.primary_skills:
                self._categories[skill] = cat_name
                self._max_levels[skill] = self.default_max_level
            for template, max_lvl in cat.secondary_skills.items():
                for skill in self.expand_template(template, taxonomy.elements):
                    self._categories[skill] = cat_name
                    self._max_levels[skill] = max_lvl

    @staticmethod
    def expand_template(template: str, elements: list[str]) -> list[str]:
        """Concrete names for a secondary skill template.

        A template without the placeholder is its own single name.
        """
        if ELEMENT_PLACEHOLDER not in template:
            return [template]
        return [template.replace(ELEMENT_PLACEHOLDER, el) for el in elements]

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def category_of(self, skill_name: str) -> str | None:
        return self._categories.get(skill_name)

    def max_level(self, skill_name: str) -> int:
        return self._max_levels.get(skill_name, self.default_max_level)

    def describe(self, skill_name: str, level: int) -> str:
        if skill_name in self._descriptions:
            return self._descriptions[skill_name]
        return f"Increases {skill_name} by level {level} amount."

    @property
    def categories(self) -> set[str]:
        """Every category named by the taxonomy or an override."""
        return set(self._category_names)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._categories))

    def __contains__(self, skill_name: str) -> bool:
        return skill_name in self._categories

    def __len__(self) -> int:
        return len(self._categories)
