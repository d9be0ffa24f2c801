"""
Scheduling Engine — turns the weekly availability two members share into
concrete calendar dates they could meet on.

Starts from tomorrow, walks forward one day at a time up to the horizon,
skips any date either member has blacked out, and emits one suggestion per
shared time band on matching weekdays until ``max_results`` are collected.
"""
from __future__ import annotations
import logging
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Set

from models.availability import weekday_name
from models.errors import ValidationError
from models.match import SlotSuggestion
from models.profile import Profile, parse_blackout_date
from utils.overlap import find_overlapping_slots
from utils.settings import SchedulingConfig

logger = logging.getLogger(__name__)


def _blackout_set(blackout_dates: Iterable) -> Set[date]:
    if isinstance(blackout_dates, str):
        raise ValidationError("blackout_dates must be a collection of dates", field="blackout_dates")
    return {parse_blackout_date(raw) for raw in blackout_dates or ()}


def suggest_slots(
    subject_availability,
    candidate_availability,
    blackout_dates: Iterable = (),
    horizon_days: int = 14,
    max_results: int = 5,
    today: Optional[date] = None,
) -> List[SlotSuggestion]:
    """
    Project the shared weekly slots onto dates in (today, today + horizon_days].

    ``blackout_dates`` is the union of both members' blackout lists. Results are
    chronological; within one date bands run Morning → Afternoon → Evening. An
    empty list means there is nothing to propose, not an error.
    """
    if horizon_days < 0:
        raise ValidationError(f"horizon_days must be >= 0, got {horizon_days}", field="horizon_days")
    if max_results < 0:
        raise ValidationError(f"max_results must be >= 0, got {max_results}", field="max_results")

    overlapping = find_overlapping_slots(subject_availability, candidate_availability)
    if not overlapping or max_results == 0:
        return []

    bands_by_day: Dict[str, List[str]] = {}
    for day_name, band in overlapping:
        bands_by_day.setdefault(day_name, []).append(band)

    blacked_out = _blackout_set(blackout_dates)
    today = today or date.today()

    suggestions: List[SlotSuggestion] = []
    for offset in range(1, horizon_days + 1):
        current = today + timedelta(days=offset)
        if current in blacked_out:
            continue
        for band in bands_by_day.get(weekday_name(current), ()):
            suggestions.append(SlotSuggestion.for_date(current, band))
            if len(suggestions) >= max_results:
                return suggestions

    if not suggestions:
        logger.info(
            f"No open dates within {horizon_days} days for {len(overlapping)} shared weekly slot(s)."
        )
    return suggestions


def suggest_slots_for_profiles(
    subject: Profile,
    candidate: Profile,
    horizon_days: Optional[int] = None,
    max_results: Optional[int] = None,
    today: Optional[date] = None,
    config: Optional[SchedulingConfig] = None,
) -> List[SlotSuggestion]:
    """Suggest dates for two profiles, honouring both members' blackout dates."""
    config = config or SchedulingConfig()
    return suggest_slots(
        subject.availability,
        candidate.availability,
        blackout_dates=subject.blackout_dates | candidate.blackout_dates,
        horizon_days=config.horizon_days if horizon_days is None else horizon_days,
        max_results=config.max_results if max_results is None else max_results,
        today=today,
    )
