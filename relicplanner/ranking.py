"""Result ordering."""
from relicplanner.models import BuildResult


def rank_builds(results: list[BuildResult]) -> list[BuildResult]:
    """Highest total raw level first, then highest total effective level.

    Stable: builds tied on both keys keep their acceptance order.
    """
    return sorted(results, key=lambda r: (-r.total_raw_level, -r.total_effective_level))
