"""Candidate reduction: shrink the inventory to a searchable candidate set."""
import logging
from collections import defaultdict

from relicplanner.config import SolverSettings, settings as default_settings
from relicplanner.index import SkillIndex
from relicplanner.models import BuildConstraints, Relic

logger = logging.getLogger(__name__)


class CandidateReducer:
    """Scores relics against the constraints and keeps the strongest per category.

    Heuristic: a build that needs a low-scoring relic can be missed. Every
    quota-bearing category keeps up to ``candidates_per_category`` relics, so
    quotas no larger than that can still be filled when the inventory allows.
    """

    def __init__(self, index: SkillIndex, settings: SolverSettings | None = None):
        self.index = index
        self.settings = settings or default_settings

    def score_relic(self, relic: Relic, constraints: BuildConstraints) -> int:
        score = 0
        for skill in relic.skills:
            cat = self.index.category_of(skill.name)
            if cat is not None and cat in constraints.category_minimums:
                score += skill.level * self.settings.category_weight
            if skill.name in constraints.skill_minimums:
                score += skill.level * self.settings.skill_weight
        return score

    def reduce(self, relics: list[Relic], constraints: BuildConstraints) -> list[Relic]:
        """Candidates in descending score order (ties keep inventory order)."""
        if not relics:
            return []
        scores = [self.score_relic(r, constraints) for r in relics]
        ranked = sorted(range(len(relics)), key=lambda i: -scores[i])

        by_category: dict[str, list[int]] = defaultdict(list)
        for i in ranked:
            by_category[relics[i].category].append(i)

        if constraints.category_quotas is not None:
            kept_categories = list(constraints.category_quotas)
        else:
            kept_categories = sorted(set(by_category) | self.index.categories)

        top_k = self.settings.candidates_per_category
        keep: set[int] = set()
        for cat in kept_categories:
            keep.update(by_category.get(cat, [])[:top_k])

        floor = self.settings.candidate_floor
        if len(keep) < floor:
            for i in ranked:
                if len(keep) >= floor:
                    break
                keep.add(i)

        candidates = [relics[i] for i in ranked if i in keep]
        logger.debug("Reduced %d relics to %d candidates", len(relics), len(candidates))
        return candidates
