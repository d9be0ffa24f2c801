"""
Matching engine tests.

Validates:
  - component sub-scores and weighted total
  - strict 0.5 threshold and descending, stable ordering
  - self-exclusion
  - subject/candidate error asymmetry
  - determinism
"""
import random

import pytest

from engines.matching_engine import score_candidate, score_candidates, select_best_match
from models.errors import ValidationError
from utils.settings import ScoringConfig

FIVE_SLOTS = {
    "Monday": ["Morning", "Evening"],
    "Wednesday": ["Evening"],
    "Saturday": ["Afternoon", "Evening"],
}


class TestScoreCandidate:

    def test_component_scores(self, subject, candidate):
        result = score_candidate(subject, candidate)
        assert result.activity_score == pytest.approx(2 / 3)
        assert result.visual_score == pytest.approx(1 / 3)
        assert result.overlapping_slots == [("Monday", "Morning"), ("Saturday", "Evening")]
        assert result.availability_score == pytest.approx(0.4)
        assert result.score == pytest.approx(0.4 * (1 / 3) + 0.3 * (2 / 3) + 0.3 * 0.4)

    def test_availability_saturates(self, make_profile):
        a = make_profile("a", visual={1, 3, 5}, activities={"hiking", "coffee"}, availability=FIVE_SLOTS)
        b = make_profile("b", visual={2, 3, 4}, activities={"hiking", "coffee", "yoga"}, availability=FIVE_SLOTS)
        result = score_candidate(a, b)
        assert len(result.overlapping_slots) == 5
        assert result.availability_score == 1.0
        assert result.score == pytest.approx(0.4 / 3 + 0.2 + 0.3)

    def test_nothing_shared_scores_zero(self, make_profile):
        a = make_profile("a", visual={1}, activities={"chess"}, availability={"Monday": ["Morning"]})
        b = make_profile("b", visual={2}, activities={"surfing"}, availability={"Tuesday": ["Morning"]})
        assert score_candidate(a, b).score == 0.0

    def test_score_bounded(self, make_profile):
        a = make_profile("a", visual={1, 2}, activities={"x"}, availability=FIVE_SLOTS)
        b = make_profile("b", visual={1, 2}, activities={"x"}, availability=FIVE_SLOTS)
        assert 0.0 <= score_candidate(a, b).score <= 1.0
        assert score_candidate(a, b).score == pytest.approx(1.0)


class TestScoreCandidates:

    def test_scenario_below_threshold_is_excluded(self, subject, candidate):
        assert score_candidates(subject, [candidate]) == []

    def test_never_matches_self(self, make_profile):
        me = make_profile("me", visual={1}, activities={"x"}, availability=FIVE_SLOTS)
        twin = make_profile("twin", visual={1}, activities={"x"}, availability=FIVE_SLOTS)
        results = score_candidates(me, [me, twin])
        assert [r.candidate.id for r in results] == ["twin"]

    def test_threshold_is_strict(self, make_profile):
        # visual 1.0 * 0.4 + activity 1/3 * 0.3 = 0.5 exactly
        a = make_profile("a", visual={1}, activities={"x", "y", "z"})
        b = make_profile("b", visual={1}, activities={"x"})
        assert score_candidate(a, b).score == pytest.approx(0.5)
        config = ScoringConfig(min_score=score_candidate(a, b).score)
        assert score_candidates(a, [b], config) == []

    def test_sorted_descending_ties_keep_input_order(self, make_profile):
        subject = make_profile("s", visual={1, 2}, activities={"x"}, availability=FIVE_SLOTS)
        strong = make_profile("strong", visual={1, 2}, activities={"x"}, availability=FIVE_SLOTS)
        tie_a = make_profile("tie-a", visual={1, 2}, activities={"x"})
        tie_b = make_profile("tie-b", visual={1, 2}, activities={"x"})
        results = score_candidates(subject, [tie_a, strong, tie_b])
        assert [r.candidate.id for r in results] == ["strong", "tie-a", "tie-b"]

    def test_empty_candidates(self, subject):
        assert score_candidates(subject, []) == []

    def test_accepts_store_records(self, subject):
        record = {
            "id": "doc-1",
            "selectedFaces": [1, 3, 5],
            "activities": ["hiking", "coffee"],
            "availability": {"monday": ["morning"]},
        }
        results = score_candidates(subject, [record])
        assert [r.candidate.id for r in results] == ["doc-1"]

    def test_malformed_candidate_skipped(self, subject, caplog):
        good = {"id": "good", "selectedFaces": [1, 3, 5], "activities": ["hiking", "coffee"]}
        bad = {"activities": ["hiking"]}  # no id
        results = score_candidates(subject, [bad, good, "not a profile"])
        assert [r.candidate.id for r in results] == ["good"]
        assert "Skipping malformed candidate" in caplog.text

    def test_candidate_with_unhashable_tags_skipped(self, subject, caplog):
        good = {"id": "good", "selectedFaces": [1, 3, 5], "activities": ["hiking", "coffee"]}
        bad = {"id": "bad", "selectedFaces": [{"face": 1}], "activities": ["hiking"]}
        results = score_candidates(subject, [bad, good])
        assert [r.candidate.id for r in results] == ["good"]
        assert "Skipping malformed candidate" in caplog.text

    def test_malformed_subject_raises(self, candidate):
        with pytest.raises(ValidationError):
            score_candidates({"activities": ["hiking"]}, [candidate])
        with pytest.raises(ValidationError):
            score_candidates(42, [candidate])

    def test_deterministic(self, make_profile):
        subject = make_profile("s", visual={1, 2, 3}, activities={"a", "b"}, availability=FIVE_SLOTS)
        pool = [
            make_profile(f"c{i}", visual={1, 2, i}, activities={"a", "b"}, availability=FIVE_SLOTS)
            for i in range(6)
        ]
        first = score_candidates(subject, pool)
        second = score_candidates(subject, pool)
        assert [(r.candidate.id, r.score) for r in first] == [(r.candidate.id, r.score) for r in second]

    def test_injected_weights(self, subject, candidate):
        activity_only = ScoringConfig(visual_weight=0.0, activity_weight=1.0, availability_weight=0.0)
        results = score_candidates(subject, [candidate], activity_only)
        assert results[0].score == pytest.approx(2 / 3)


class TestSelectBestMatch:

    def test_empty(self):
        assert select_best_match([]) is None

    def test_picks_top_result_and_a_shared_slot(self, make_profile):
        subject = make_profile("s", visual={1}, activities={"x"}, availability=FIVE_SLOTS)
        other = make_profile("o", visual={1}, activities={"x"}, availability=FIVE_SLOTS)
        matches = score_candidates(subject, [other])
        best = select_best_match(matches, rng=random.Random(7))
        assert best.candidate.id == "o"
        assert best.score == matches[0].score
        assert best.time_slot in matches[0].overlapping_slots
        assert select_best_match(matches, rng=random.Random(7)).time_slot == best.time_slot

    def test_no_shared_slot(self, make_profile):
        subject = make_profile("s", visual={1}, activities={"x"})
        other = make_profile("o", visual={1}, activities={"x"})
        best = select_best_match(score_candidates(subject, [other]))
        assert best.time_slot is None
