"""
Availability vocabulary — canonical weekdays, time bands and the helpers that
normalize raw availability grids into them.

A normalized availability is a dict keyed by all seven weekdays, each value a
tuple of time bands in Morning → Afternoon → Evening order.
"""
from __future__ import annotations
import logging
from collections.abc import Iterable, Mapping
from datetime import date, time
from typing import Dict, Optional, Tuple

from models.errors import ValidationError

logger = logging.getLogger(__name__)

WEEKDAYS: Tuple[str, ...] = (
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday",
)
TIME_BANDS: Tuple[str, ...] = ("Morning", "Afternoon", "Evening")

# (start hour, end hour) of each band
TIME_RANGES: Dict[str, Tuple[int, int]] = {
    "Morning": (9, 12),
    "Afternoon": (12, 17),
    "Evening": (17, 21),
}

REPRESENTATIVE_TIMES: Dict[str, time] = {
    band: time(start, 0) for band, (start, _end) in TIME_RANGES.items()
}

TIME_PERIOD_LABELS: Dict[str, str] = {
    "Morning": "9 AM - 12 PM",
    "Afternoon": "12 PM - 5 PM",
    "Evening": "5 PM - 9 PM",
}

_WEEKDAY_LOOKUP = {d.lower(): d for d in WEEKDAYS}
_BAND_LOOKUP = {b.lower(): b for b in TIME_BANDS}
_BAND_ORDER = {b: i for i, b in enumerate(TIME_BANDS)}

Availability = Dict[str, Tuple[str, ...]]


def normalize_weekday(name: str) -> Optional[str]:
    """Return the canonical weekday for ``name`` (any case), or None."""
    if not isinstance(name, str):
        return None
    return _WEEKDAY_LOOKUP.get(name.strip().lower())


def normalize_time_band(name: str) -> Optional[str]:
    """Return the canonical time band for ``name`` (any case), or None."""
    if not isinstance(name, str):
        return None
    return _BAND_LOOKUP.get(name.strip().lower())


def weekday_name(d: date) -> str:
    return WEEKDAYS[d.weekday()]


def empty_availability() -> Availability:
    return {day: () for day in WEEKDAYS}


def _bands_from_value(day: str, value) -> list:
    """Extract raw band names from one day's value (list-like or band→bool map)."""
    if value is None:
        return []
    if isinstance(value, Mapping):
        return [band for band, enabled in value.items() if enabled]
    if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
        raise ValidationError(
            f"Availability for {day} must be a collection of time bands, got {value!r}",
            field="availability",
        )
    return list(value)


def normalize_availability(raw) -> Availability:
    """
    Normalize a raw availability mapping.

    Weekday keys and band names are matched case-insensitively. Unknown
    weekdays and unknown bands are skipped with a warning; a value that is not
    a collection of band names raises ValidationError.
    """
    if raw is None:
        return empty_availability()
    if not isinstance(raw, Mapping):
        raise ValidationError(
            f"Availability must be a mapping of weekday to time bands, got {type(raw).__name__}",
            field="availability",
        )

    collected: Dict[str, set] = {day: set() for day in WEEKDAYS}
    for key, value in raw.items():
        day = normalize_weekday(key)
        if day is None:
            logger.warning(f"Ignoring unknown weekday in availability: {key!r}")
            continue
        for entry in _bands_from_value(day, value):
            if not isinstance(entry, str):
                raise ValidationError(
                    f"Time band for {day} must be a string, got {entry!r}",
                    field="availability",
                )
            band = normalize_time_band(entry)
            if band is None:
                logger.warning(f"Ignoring unknown time band {entry!r} on {day}")
                continue
            collected[day].add(band)

    return {
        day: tuple(sorted(bands, key=_BAND_ORDER.__getitem__))
        for day, bands in collected.items()
    }


def parse_availability(text: str) -> Dict[str, list]:
    """
    Parse the flat store encoding into a raw availability mapping.

    ``"Monday: Morning|Evening; Saturday: Afternoon"`` →
    ``{"Monday": ["Morning", "Evening"], "Saturday": ["Afternoon"]}``
    """
    if not text or str(text).strip() in ("", "–", "-", "nan", "None"):
        return {}
    result: Dict[str, list] = {}
    for segment in str(text).split(";"):
        segment = segment.strip()
        if not segment:
            continue
        if ":" not in segment:
            raise ValidationError(
                f"Malformed availability segment {segment!r}; expected 'Day: Band|Band'",
                field="availability",
            )
        day, bands = segment.split(":", 1)
        result.setdefault(day.strip(), []).extend(
            b.strip() for b in bands.split("|") if b.strip()
        )
    return result


def format_availability(availability: Availability) -> str:
    """Serialize a normalized availability back to the flat store encoding."""
    return "; ".join(
        f"{day}: {'|'.join(bands)}"
        for day, bands in availability.items()
        if bands
    )
