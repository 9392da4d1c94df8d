"""Solve facade: one call runs index, reduce, search and rank."""
import logging
import time

from relicplanner.config import SolverSettings, settings as default_settings
from relicplanner.errors import SolverError
from relicplanner.evaluator import BuildEvaluator
from relicplanner.index import SkillIndex
from relicplanner.models import (
    BuildConstraints, BuildResult, Doll, Relic, SkillOverride, SolveRequest, Taxonomy,
)
from relicplanner.ranking import rank_builds
from relicplanner.reducer import CandidateReducer
from relicplanner.search import BuildSearch

logger = logging.getLogger(__name__)


class RelicSolver:
    """Finds relic builds that satisfy a set of constraints.

    Every solve() starts from scratch: nothing carries over between calls or
    between solver instances. With a ``doll``, each result lists the set
    bonuses it unlocks for that character.
    """

    def __init__(self, relics: list[Relic], constraints: BuildConstraints,
                 taxonomy: Taxonomy | None = None,
                 skill_overrides: dict[str, SkillOverride] | None = None,
                 settings: SolverSettings | None = None,
                 doll: Doll | None = None):
        self.relics = list(relics)
        self.constraints = constraints
        self.settings = settings or default_settings
        self.doll = doll
        self.index = SkillIndex(taxonomy, skill_overrides,
                                default_max_level=self.settings.default_max_level)

    @classmethod
    def from_request(cls, request: SolveRequest,
                     settings: SolverSettings | None = None) -> "RelicSolver":
        return cls(
            request.eligible_relics(),
            request.effective_constraints(),
            request.taxonomy,
            request.skill_overrides,
            settings=settings,
            doll=request.doll,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def solve(self) -> list[BuildResult]:
        """Ranked builds, at most ``settings.max_results`` of them.

        An empty list means the search ran and nothing qualified. Raises
        SolverError on any internal fault.
        """
        try:
            return self._solve()
        except SolverError:
            raise
        except Exception as e:
            raise SolverError(f"Optimization failed: {e}") from e

    def _solve(self) -> list[BuildResult]:
        started = time.perf_counter()
        self._warn_out_of_shape()

        reducer = CandidateReducer(self.index, self.settings)
        candidates = reducer.reduce(self.relics, self.constraints)

        evaluator = BuildEvaluator(self.index, self.constraints)
        search = BuildSearch(evaluator, self.settings.shape, self.settings.max_results)
        search.run(candidates)

        results = rank_builds(evaluator.results)
        if self.doll is not None:
            for result in results:
                result.active_bonuses = self.doll.active_bonuses(result)
        logger.info(
            "Solved %d relics (%d candidates): %d builds in %.2fs",
            len(self.relics), len(candidates), len(results),
            time.perf_counter() - started,
        )
        return results

    def _warn_out_of_shape(self) -> None:
        """Out-of-shape relics stay in the solve; the search widens its bound."""
        shape = self.settings.shape
        for relic in self.relics:
            label = relic.id if relic.id is not None else relic.primary.name
            if relic.primary.level > shape.max_primary_level:
                logger.warning("Relic %s: primary level %d exceeds %d",
                               label, relic.primary.level, shape.max_primary_level)
            if len(relic.secondaries) > shape.max_secondaries:
                logger.warning("Relic %s: %d secondary skills (max %d)",
                               label, len(relic.secondaries), shape.max_secondaries)
            for skill in relic.secondaries:
                if skill.level > shape.max_secondary_level:
                    logger.warning("Relic %s: '%s' level %d exceeds %d",
                                   label, skill.name, skill.level,
                                   shape.max_secondary_level)
