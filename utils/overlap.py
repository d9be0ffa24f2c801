"""
Availability overlap — the (weekday, time band) intersection shared by the
matching and scheduling engines.
"""
from typing import List, Tuple

from models.availability import WEEKDAYS, normalize_availability


def find_overlapping_slots(availability_a, availability_b) -> List[Tuple[str, str]]:
    """
    Return the (weekday, band) pairs present in both availabilities.

    Both sides are normalized first, so names are case-insensitive and a
    missing weekday counts as unavailable. Order is Monday → Sunday, then
    Morning → Afternoon → Evening.
    """
    a = normalize_availability(availability_a)
    b = normalize_availability(availability_b)

    overlapping = []
    for day in WEEKDAYS:
        shared = set(b[day])
        overlapping.extend((day, band) for band in a[day] if band in shared)
    return overlapping
