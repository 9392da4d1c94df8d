"""Complete-build evaluation: aggregation, threshold checks, dedup."""
from collections.abc import Sequence

from relicplanner.index import SkillIndex
from relicplanner.models import BuildConstraints, BuildResult, Relic


def relic_key(relic: Relic) -> str:
    """Composition key of one relic; independent of its id."""
    secondaries = ",".join(sorted(s.key for s in relic.secondaries))
    return f"{relic.category}|{relic.primary.key}|{secondaries}"


def build_fingerprint(relics: Sequence[Relic]) -> str:
    """Canonical key of a build; equal for equal compositions in any order."""
    return ";".join(sorted(relic_key(r) for r in relics))


class BuildEvaluator:
    """Accepts or rejects complete builds for a single solve call.

    Holds the accepted results and seen fingerprints, so use one instance
    per solve.
    """

    def __init__(self, index: SkillIndex, constraints: BuildConstraints):
        self.index = index
        self.constraints = constraints
        self.results: list[BuildResult] = []
        self._seen: set[str] = set()

    def aggregate(self, relics: Sequence[Relic]) -> tuple[dict[str, int], dict[str, int]]:
        """(raw_skill_levels, raw_category_levels). Uncategorized skills only count per skill."""
        skill_levels: dict[str, int] = {}
        category_levels: dict[str, int] = {}
        for relic in relics:
            for skill in relic.skills:
                skill_levels[skill.name] = skill_levels.get(skill.name, 0) + skill.level
                cat = self.index.category_of(skill.name)
                if cat is not None:
                    category_levels[cat] = category_levels.get(cat, 0) + skill.level
        return skill_levels, category_levels

    def category_levels(self, relics: Sequence[Relic]) -> dict[str, int]:
        return self.aggregate(relics)[1]

    def meets_minimums(self, skill_levels: dict[str, int],
                       category_levels: dict[str, int]) -> bool:
        for cat, need in self.constraints.category_minimums.items():
            if category_levels.get(cat, 0) < need:
                return False
        for skill, need in self.constraints.skill_minimums.items():
            if skill_levels.get(skill, 0) < need:
                return False
        return True

    def effective_levels(self, skill_levels: dict[str, int]) -> dict[str, int]:
        return {
            skill: min(raw, self.index.max_level(skill))
            for skill, raw in skill_levels.items()
        }

    def evaluate(self, relics: Sequence[Relic]) -> BuildResult | None:
        """Record and return the build if it is new and meets every minimum."""
        skill_levels, category_levels = self.aggregate(relics)
        if not self.meets_minimums(skill_levels, category_levels):
            return None

        fingerprint = build_fingerprint(relics)
        if fingerprint in self._seen:
            return None
        self._seen.add(fingerprint)

        result = BuildResult(
            relics=list(relics),
            raw_category_levels=category_levels,
            raw_skill_levels=skill_levels,
            effective_skill_levels=self.effective_levels(skill_levels),
        )
        self.results.append(result)
        return result

    def __len__(self) -> int:
        return len(self.results)
