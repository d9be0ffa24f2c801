"""
Scoring utilities — shared weighted scoring functions used by the matching engine.
"""
from typing import Hashable, Iterable, Optional

from utils.settings import ScoringConfig


def tag_overlap_ratio(tags_a: Iterable[Hashable], tags_b: Iterable[Hashable]) -> float:
    """
    Shared tags divided by the size of the larger set.
    Tags compare exactly. Returns 0.0 if either set is empty.
    """
    a = set(tags_a)
    b = set(tags_b)
    if not a or not b:
        return 0.0
    return len(a & b) / max(len(a), len(b))


def availability_contribution(slot_count: int, saturation_slots: int = 5) -> float:
    """Fraction of the saturation slot count reached, capped at 1.0."""
    if saturation_slots <= 0:
        raise ValueError(f"saturation_slots must be positive, got {saturation_slots}")
    return min(slot_count / saturation_slots, 1.0)


def weighted_score(
    visual_score: float,
    activity_score: float,
    availability_score: float,
    config: Optional[ScoringConfig] = None,
) -> float:
    """
    Compute the weighted composite match score.
    Default weights: visual=40%, activity=30%, availability=30%
    """
    if config is None:
        config = ScoringConfig()
    return (
        visual_score * config.visual_weight
        + activity_score * config.activity_weight
        + availability_score * config.availability_weight
    )
