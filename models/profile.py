"""
Profile model — dataclass representing a member's matchable attributes.
"""
from __future__ import annotations
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import FrozenSet, Hashable, List
import logging
import math

from models.availability import (
    Availability,
    empty_availability,
    format_availability,
    normalize_availability,
    parse_availability,
)
from models.errors import ValidationError

logger = logging.getLogger(__name__)


def _is_blank(raw) -> bool:
    if raw is None:
        return True
    if isinstance(raw, float) and math.isnan(raw):
        return True
    return isinstance(raw, str) and raw.strip() in ("", "–", "-", "nan", "None")


def _parse_list(raw) -> List:
    """Accept a list-like or a comma-separated string; return a cleaned list."""
    if _is_blank(raw):
        return []
    if isinstance(raw, str):
        return [item.strip() for item in raw.split(",") if item.strip()]
    if not isinstance(raw, Iterable):
        return [raw]
    return list(raw)


def _parse_tag(tag: Hashable) -> Hashable:
    """Numeric strings become ints so "3" from a CSV equals 3 from a document."""
    if isinstance(tag, str) and tag.strip().lstrip("-").isdigit():
        return int(tag.strip())
    return tag


def parse_blackout_date(raw) -> date:
    """Parse an ISO date string (YYYY-MM-DD); datetimes are truncated to their date."""
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    try:
        return datetime.strptime(str(raw).strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid blackout date: {raw!r}", field="blackout_dates") from None


def _tag_set(raw, field_name: str) -> FrozenSet:
    if raw is None:
        return frozenset()
    if isinstance(raw, (str, bytes)) or not isinstance(raw, Iterable):
        raise ValidationError(
            f"{field_name} must be a collection, got {type(raw).__name__}", field=field_name
        )
    tags = set()
    for tag in raw:
        if isinstance(tag, str):
            tag = tag.strip()
            if not tag:
                continue
            # commas delimit tags in the flat store encoding
            if "," in tag:
                raise ValidationError(f"{field_name} entries cannot contain commas: {tag!r}", field=field_name)
        try:
            tags.add(tag)
        except TypeError:
            raise ValidationError(
                f"{field_name} entries must be hashable, got {type(tag).__name__}", field=field_name
            ) from None
    return frozenset(tags)


def _first_present(row: Mapping, *keys):
    for key in keys:
        value = row.get(key)
        if not _is_blank(value):
            return value
    return None


@dataclass
class Profile:
    id: str
    visual_preference_tags: FrozenSet[Hashable] = field(default_factory=frozenset)
    activity_tags: FrozenSet[str] = field(default_factory=frozenset)
    availability: Availability = field(default_factory=empty_availability)
    blackout_dates: FrozenSet[date] = field(default_factory=frozenset)
    name: str = ""

    def __post_init__(self):
        if self.id is None or not str(self.id).strip():
            raise ValidationError("Profile id is required", field="id")
        self.id = str(self.id).strip()
        self.visual_preference_tags = _tag_set(self.visual_preference_tags, "visual_preference_tags")
        self.activity_tags = _tag_set(self.activity_tags, "activity_tags")
        self.availability = normalize_availability(self.availability)
        if self.blackout_dates is None:
            self.blackout_dates = frozenset()
        elif isinstance(self.blackout_dates, (str, bytes)) or not isinstance(self.blackout_dates, Iterable):
            raise ValidationError("blackout_dates must be a collection of dates", field="blackout_dates")
        self.blackout_dates = frozenset(parse_blackout_date(d) for d in self.blackout_dates)

    @classmethod
    def from_dict(cls, row: Mapping) -> Profile:
        """
        Create a Profile from a store record.

        Accepts flat CSV/sheet rows (comma-separated tags, availability as
        ``"Monday: Morning|Evening; ..."``) as well as user documents with
        nested ``preferences`` / ``basicInfo`` objects.
        """
        if not isinstance(row, Mapping) and not hasattr(row, "get"):
            raise ValidationError(f"Profile record must be a mapping, got {type(row).__name__}")

        preferences = row.get("preferences")
        if not isinstance(preferences, Mapping):
            preferences = {}
        basic_info = row.get("basicInfo")
        if not isinstance(basic_info, Mapping):
            basic_info = {}

        visual = _first_present(row, "visual_preference_tags", "selectedFaces", "facePreferences")
        activities = _first_present(row, "activity_tags", "activities", "activityPreferences")
        if activities is None:
            activities = preferences.get("activities")
        availability = _first_present(row, "availability")
        if isinstance(availability, str):
            availability = parse_availability(availability)

        return cls(
            id=_first_present(row, "id", "uid", "user_id"),
            visual_preference_tags=[_parse_tag(t) for t in _parse_list(visual)],
            activity_tags=_parse_list(activities),
            availability=availability,
            blackout_dates=_parse_list(_first_present(row, "blackout_dates", "blackoutDates")),
            name=str(_first_present(row, "name") or basic_info.get("name") or "").strip(),
        )

    def to_dict(self) -> dict:
        """Serialize to a flat dict for CSV/Sheets writing."""
        return {
            "id": self.id,
            "name": self.name,
            "visual_preference_tags": ", ".join(str(t) for t in sorted(self.visual_preference_tags, key=str)),
            "activity_tags": ", ".join(sorted(self.activity_tags)),
            "availability": format_availability(self.availability),
            "blackout_dates": ", ".join(d.isoformat() for d in sorted(self.blackout_dates)),
        }

    @property
    def display_name(self) -> str:
        return self.name or self.id

    def is_blacked_out(self, day: date) -> bool:
        return day in self.blackout_dates
