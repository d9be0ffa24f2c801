"""
Match and slot result models — transient outputs of the matching and
scheduling engines. Never persisted directly.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Dict, List, Optional, Tuple

from models.availability import (
    REPRESENTATIVE_TIMES,
    TIME_PERIOD_LABELS,
    normalize_time_band,
    weekday_name,
)
from models.errors import ValidationError
from models.profile import Profile


@dataclass
class MatchResult:
    """One candidate scored against a subject. ``candidate`` is a reference, not a copy."""
    candidate: Profile
    score: float
    overlapping_slots: List[Tuple[str, str]] = field(default_factory=list)
    visual_score: float = 0.0
    activity_score: float = 0.0
    availability_score: float = 0.0

    def breakdown(self) -> Dict[str, float]:
        return {
            "visual_match": round(self.visual_score, 2),
            "activity_match": round(self.activity_score, 2),
            "availability": round(self.availability_score, 2),
            "shared_slots": len(self.overlapping_slots),
            "total_score": round(self.score, 2),
        }


@dataclass(frozen=True)
class SlotSuggestion:
    """A concrete proposed meeting opportunity on a calendar date."""
    date: date
    weekday: str
    time_band: str
    representative_time: time

    def __post_init__(self):
        if normalize_time_band(self.time_band) != self.time_band:
            raise ValidationError(f"Unknown time band: {self.time_band!r}", field="time_band")
        if weekday_name(self.date) != self.weekday:
            raise ValidationError(
                f"{self.date.isoformat()} is a {weekday_name(self.date)}, not a {self.weekday}",
                field="weekday",
            )

    @classmethod
    def for_date(cls, day: date, time_band: str) -> SlotSuggestion:
        band = normalize_time_band(time_band)
        if band is None:
            raise ValidationError(f"Unknown time band: {time_band!r}", field="time_band")
        return cls(
            date=day,
            weekday=weekday_name(day),
            time_band=band,
            representative_time=REPRESENTATIVE_TIMES[band],
        )

    @property
    def starts_at(self) -> datetime:
        return datetime.combine(self.date, self.representative_time)

    @property
    def label(self) -> str:
        return (
            f"{self.weekday} {self.date.strftime('%b %d')} · {self.time_band} "
            f"({TIME_PERIOD_LABELS[self.time_band]})"
        )


@dataclass
class BestMatch:
    """The top-ranked match together with one shared weekly slot to propose."""
    match: MatchResult
    time_slot: Optional[Tuple[str, str]]  # None when the pair shares no weekly slot

    @property
    def candidate(self) -> Profile:
        return self.match.candidate

    @property
    def score(self) -> float:
        return self.match.score
