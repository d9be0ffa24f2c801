"""
Matching Engine — scores and ranks candidate profiles for a subject.
Uses weighted scoring: visual preference=40%, activity=30%, availability=30%.
Only candidates scoring strictly above 0.5 are returned, best first.
"""
from __future__ import annotations
import logging
import random
from typing import Iterable, List, Optional

from models.errors import ValidationError
from models.match import BestMatch, MatchResult
from models.profile import Profile
from utils.overlap import find_overlapping_slots
from utils.scoring import availability_contribution, tag_overlap_ratio, weighted_score
from utils.settings import ScoringConfig

logger = logging.getLogger(__name__)


def _as_profile(record) -> Profile:
    """Accept a Profile or a raw store record."""
    if isinstance(record, Profile):
        return record
    if isinstance(record, dict) or hasattr(record, "get"):
        return Profile.from_dict(record)
    raise ValidationError(f"Expected a Profile or a profile record, got {type(record).__name__}")


def score_candidate(
    subject: Profile, candidate: Profile, config: Optional[ScoringConfig] = None
) -> MatchResult:
    """Score one candidate against the subject. No threshold is applied."""
    config = config or ScoringConfig()

    visual_s = tag_overlap_ratio(subject.visual_preference_tags, candidate.visual_preference_tags)
    activity_s = tag_overlap_ratio(subject.activity_tags, candidate.activity_tags)
    slots = find_overlapping_slots(subject.availability, candidate.availability)
    avail_s = availability_contribution(len(slots), config.saturation_slots)

    # Clamp float drift so a perfect match stays at exactly 1.0
    total = max(0.0, min(1.0, weighted_score(visual_s, activity_s, avail_s, config)))
    return MatchResult(
        candidate=candidate,
        score=total,
        overlapping_slots=slots,
        visual_score=visual_s,
        activity_score=activity_s,
        availability_score=avail_s,
    )


def score_candidates(
    subject, candidates: Iterable, config: Optional[ScoringConfig] = None
) -> List[MatchResult]:
    """
    Rank candidates against the subject.

    The subject itself (same id) is never returned. A malformed subject raises
    ValidationError; a malformed candidate is logged and skipped so one bad
    record cannot block the whole list. Ties keep input order.
    """
    config = config or ScoringConfig()
    subject = _as_profile(subject)

    results = []
    skipped = 0
    for record in candidates:
        try:
            candidate = _as_profile(record)
        except ValidationError as e:
            skipped += 1
            logger.warning(f"Skipping malformed candidate for {subject.id}: {e}")
            continue
        if candidate.id == subject.id:
            continue
        result = score_candidate(subject, candidate, config)
        if result.score > config.min_score:
            results.append(result)

    results.sort(key=lambda r: r.score, reverse=True)
    logger.info(
        f"Scored candidates for {subject.id}: {len(results)} qualifying"
        + (f", {skipped} skipped" if skipped else "")
    )
    return results


def select_best_match(
    matches: List[MatchResult], rng: Optional[random.Random] = None
) -> Optional[BestMatch]:
    """
    Pick the highest-ranked match and one of its shared weekly slots.
    ``matches`` must already be ranked (as returned by score_candidates).
    """
    if not matches:
        return None
    best = matches[0]
    slot = None
    if best.overlapping_slots:
        rng = rng or random.Random()
        slot = rng.choice(best.overlapping_slots)
    return BestMatch(match=best, time_slot=slot)
