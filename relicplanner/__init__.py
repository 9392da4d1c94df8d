"""relicplanner — constrained relic build optimizer."""

from relicplanner.config import RelicShape, SolverSettings, settings
from relicplanner.errors import SolverError
from relicplanner.models import (
    SkillRoll, Relic,
    BuildConstraints,
    CategoryTaxonomy, Taxonomy, SkillOverride,
    DollBonus, Doll,
    SolveRequest, BuildResult,
)
from relicplanner.index import SkillIndex
from relicplanner.reducer import CandidateReducer
from relicplanner.evaluator import BuildEvaluator, build_fingerprint
from relicplanner.search import BuildSearch
from relicplanner.ranking import rank_builds
from relicplanner.solver import RelicSolver
from relicplanner.data import GameData
from relicplanner.worker import SolverWorker, solve_payload

__all__ = [
    # Settings
    "RelicShape", "SolverSettings", "settings",
    # Errors
    "SolverError",
    # Models
    "SkillRoll", "Relic",
    "BuildConstraints",
    "CategoryTaxonomy", "Taxonomy", "SkillOverride",
    "DollBonus", "Doll",
    "SolveRequest", "BuildResult",
    # Pipeline
    "SkillIndex", "CandidateReducer",
    "BuildEvaluator", "build_fingerprint",
    "BuildSearch", "rank_builds",
    "RelicSolver",
    # Reference data
    "GameData",
    # Off-process solving
    "SolverWorker", "solve_payload",
]
