"""Tests for CandidateReducer (reducer.py)."""
import pytest

from relicplanner import CandidateReducer, SkillIndex, SolverSettings
from relicplanner.models import BuildConstraints, Relic, SkillRoll


def _make_relic(category: str, primary: str, level: int,
                secondaries: list[tuple[str, int]] | None = None,
                rid: int | None = None) -> Relic:
    return Relic(
        id=rid,
        category=category,
        primary=SkillRoll(name=primary, level=level),
        secondaries=[SkillRoll(name=n, level=l) for n, l in (secondaries or [])],
    )


def _reducer(index: SkillIndex, per_category: int = 15, floor: int = 50) -> CandidateReducer:
    return CandidateReducer(
        index, SolverSettings(candidates_per_category=per_category, candidate_floor=floor))


class TestScoreRelic:
    def test_category_and_skill_weights(self, index: SkillIndex) -> None:
        relic = _make_relic("Bulwark", "Fortress", 3, [("HP Boost", 2)])
        constraints = BuildConstraints(
            category_minimums={"Bulwark": 1}, skill_minimums={"HP Boost": 1})
        # Fortress 3*2, HP Boost 2*2 (category) + 2*5 (skill)
        assert _reducer(index).score_relic(relic, constraints) == 20

    def test_no_constraints_scores_zero(self, index: SkillIndex) -> None:
        relic = _make_relic("Bulwark", "Fortress", 3, [("HP Boost", 2)])
        assert _reducer(index).score_relic(relic, BuildConstraints()) == 0

    def test_unmapped_skill_only_scores_by_name(self, index: SkillIndex) -> None:
        relic = _make_relic("Bulwark", "Mystery", 2)
        constraints = BuildConstraints(
            category_minimums={"Bulwark": 1}, skill_minimums={"Mystery": 1})
        assert _reducer(index).score_relic(relic, constraints) == 10

    def test_custom_weights(self, index: SkillIndex) -> None:
        reducer = CandidateReducer(index, SolverSettings(category_weight=1, skill_weight=10))
        relic = _make_relic("Bulwark", "Fortress", 3)
        constraints = BuildConstraints(
            category_minimums={"Bulwark": 1}, skill_minimums={"Fortress": 1})
        assert reducer.score_relic(relic, constraints) == 33

    def test_skill_weight_must_exceed_category_weight(self) -> None:
        with pytest.raises(ValueError):
            SolverSettings(category_weight=5, skill_weight=5)


class TestReduce:
    def test_empty_inventory(self, index: SkillIndex) -> None:
        assert _reducer(index).reduce([], BuildConstraints()) == []

    def test_small_inventory_kept_whole(self, index: SkillIndex) -> None:
        relics = [_make_relic("Bulwark", "Fortress", l, rid=l) for l in (1, 2, 3)]
        kept = _reducer(index).reduce(relics, BuildConstraints())
        assert {r.id for r in kept} == {1, 2, 3}

    def test_top_k_per_quota_category(self, index: SkillIndex) -> None:
        relics = [_make_relic("Bulwark", "Fortress", l, rid=l) for l in (1, 2, 3, 1, 2)]
        relics += [_make_relic("Vanguard", "Onslaught", 3, rid=10 + i) for i in range(3)]
        constraints = BuildConstraints(
            category_minimums={"Bulwark": 1}, category_quotas={"Bulwark": 2})
        kept = _reducer(index, per_category=2, floor=0).reduce(relics, constraints)
        assert [r.id for r in kept] == [3, 2]

    def test_every_category_without_quota_map(self, index: SkillIndex) -> None:
        relics = [_make_relic("Bulwark", "Fortress", l) for l in (1, 2, 3, 1, 2)]
        relics += [_make_relic("Vanguard", "Onslaught", 3) for _ in range(3)]
        kept = _reducer(index, per_category=2, floor=0).reduce(relics, BuildConstraints())
        assert sorted(r.category for r in kept) == ["Bulwark", "Bulwark", "Vanguard", "Vanguard"]

    def test_low_scoring_quota_category_keeps_representation(self, index: SkillIndex) -> None:
        relics = [_make_relic("Bulwark", "Fortress", 3) for _ in range(6)]
        relics += [_make_relic("Support", "Lifeline", 1) for _ in range(3)]
        constraints = BuildConstraints(
            category_minimums={"Bulwark": 10},
            category_quotas={"Bulwark": 4, "Support": 2})
        kept = _reducer(index, per_category=4, floor=0).reduce(relics, constraints)
        assert sum(1 for r in kept if r.category == "Support") == 3
        assert sum(1 for r in kept if r.category == "Bulwark") == 4

    def test_floor_padding_by_score(self, index: SkillIndex) -> None:
        relics = [_make_relic("Bulwark", "Fortress", l, rid=l) for l in (1, 2, 3)]
        relics += [_make_relic("Vanguard", "Onslaught", 1, rid=10)]
        constraints = BuildConstraints(
            category_minimums={"Bulwark": 1}, category_quotas={"Vanguard": 1})
        kept = _reducer(index, per_category=1, floor=3).reduce(relics, constraints)
        # Vanguard via quota, then the two best Bulwark relics as padding
        assert [r.id for r in kept] == [3, 2, 10]

    def test_floor_stops_at_inventory_size(self, index: SkillIndex) -> None:
        relics = [_make_relic("Bulwark", "Fortress", 1) for _ in range(4)]
        constraints = BuildConstraints(category_quotas={})
        kept = _reducer(index, per_category=1, floor=50).reduce(relics, constraints)
        assert len(kept) == 4

    def test_ties_keep_inventory_order(self, index: SkillIndex) -> None:
        relics = [_make_relic("Bulwark", "Fortress", 2, rid=i) for i in range(5)]
        kept = _reducer(index).reduce(relics, BuildConstraints(category_minimums={"Bulwark": 1}))
        assert [r.id for r in kept] == [0, 1, 2, 3, 4]
