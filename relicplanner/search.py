"""Depth-bounded backtracking over candidate combinations."""
import logging

from relicplanner.config import RelicShape
from relicplanner.constants import BUILD_SIZE, MAX_BUILDS
from relicplanner.evaluator import BuildEvaluator
from relicplanner.models import BuildConstraints, Relic

logger = logging.getLogger(__name__)


def _skill_levels(relic: Relic, names: set[str]) -> dict[str, int]:
    levels: dict[str, int] = {}
    for skill in relic.skills:
        if skill.name in names:
            levels[skill.name] = levels.get(skill.name, 0) + skill.level
    return levels


class BuildSearch:
    """Enumerates BUILD_SIZE-relic combinations of the candidates.

    Combinations (not permutations): each level only looks at candidates
    after the previous pick. Subtrees that can no longer reach a category or
    skill minimum are pruned, candidates that would overflow a quota are
    skipped, and the whole search stops once ``max_results`` builds are
    accepted.

    The category bound is ``remaining * max_contribution`` of the shape,
    widened when a candidate carries more than the shape allows. The skill
    bound is ``remaining`` times the largest level any candidate carries for
    that skill.
    """

    def __init__(self, evaluator: BuildEvaluator, shape: RelicShape | None = None,
                 max_results: int = MAX_BUILDS):
        self.evaluator = evaluator
        self.shape = shape or RelicShape()
        self.max_results = max_results
        self.nodes_visited = 0

    def run(self, candidates: list[Relic]) -> None:
        constraints: BuildConstraints = self.evaluator.constraints
        self.nodes_visited = 0
        category_minimums = {c: m for c, m in constraints.category_minimums.items() if m > 0}
        skill_minimums = {s: m for s, m in constraints.skill_minimums.items() if m > 0}

        # per-candidate contributions, computed once
        contributions = [self.evaluator.category_levels([r]) for r in candidates]
        skill_contributions = [_skill_levels(r, set(skill_minimums)) for r in candidates]
        quotas = {r.category: constraints.quota_for(r.category) for r in candidates}

        per_relic_max = max([self.shape.max_contribution,
                             *(max(c.values(), default=0) for c in contributions)])
        skill_max = {
            skill: max((c.get(skill, 0) for c in skill_contributions), default=0)
            for skill in skill_minimums
        }
        missing = sorted(s for s, best in skill_max.items() if best == 0)
        if missing:
            logger.debug("No candidate carries %s; skipping search", missing)
            return

        current: list[Relic] = []
        category_sums: dict[str, int] = {}
        skill_sums: dict[str, int] = {}
        category_counts: dict[str, int] = {}

        def budget_spent() -> bool:
            return len(self.evaluator) >= self.max_results

        def reachable(depth: int) -> bool:
            remaining = BUILD_SIZE - depth
            headroom = remaining * per_relic_max
            if any(category_sums.get(cat, 0) + headroom < need
                   for cat, need in category_minimums.items()):
                return False
            return all(skill_sums.get(skill, 0) + remaining * skill_max[skill] >= need
                       for skill, need in skill_minimums.items())

        def add(i: int, sign: int) -> None:
            relic = candidates[i]
            category_counts[relic.category] = category_counts.get(relic.category, 0) + sign
            for cat, lvl in contributions[i].items():
                category_sums[cat] = category_sums.get(cat, 0) + sign * lvl
            for skill, lvl in skill_contributions[i].items():
                skill_sums[skill] = skill_sums.get(skill, 0) + sign * lvl

        def backtrack(start: int, depth: int) -> None:
            if budget_spent():
                return
            self.nodes_visited += 1

            # at full depth this is the exact minimum check
            if not reachable(depth):
                return  # prune

            if depth == BUILD_SIZE:
                self.evaluator.evaluate(current)
                return

            for i in range(start, len(candidates)):
                relic = candidates[i]
                quota = quotas[relic.category]
                if quota is not None and category_counts.get(relic.category, 0) >= quota:
                    continue

                current.append(relic)
                add(i, 1)
                backtrack(i + 1, depth + 1)
                current.pop()
                add(i, -1)

                if budget_spent():
                    return

        backtrack(0, 0)
        logger.debug("Search visited %d nodes, accepted %d builds",
                     self.nodes_visited, len(self.evaluator))
