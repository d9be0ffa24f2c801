"""
Conflict Engine — checks a proposed date request before it is booked.

Conflict types:
  1. Blackout — a participant has blacked out the requested date
  2. Double Booking — a participant already holds an active request for the same date and band
  3. Availability — the band is outside a participant's weekly availability
  4. Missing Profile — a participant's profile could not be found
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List

from models.date_request import DateRequest
from models.profile import Profile

logger = logging.getLogger(__name__)


@dataclass
class Conflict:
    """Represents a single detected conflict."""
    conflict_type: str    # "Blackout" | "Double Booking" | "Availability" | "Missing Profile"
    severity: str         # "Critical" | "Warning"
    profile_id: str
    request_id: str
    description: str

    @property
    def is_blocking(self) -> bool:
        return self.severity == "Critical"

    def __str__(self) -> str:
        return f"**{self.conflict_type}** [{self.severity}] — {self.description}"


def detect_booking_conflicts(
    request: DateRequest,
    profiles: Iterable[Profile],
    existing_requests: Iterable[DateRequest] = (),
) -> List[Conflict]:
    """Run all booking checks for one request and return a combined list."""
    profile_map: Dict[str, Profile] = {p.id: p for p in profiles}
    existing = list(existing_requests)

    conflicts: List[Conflict] = []
    for pid in (request.sender_id, request.recipient_id):
        profile = profile_map.get(pid)
        if profile is None:
            conflicts.append(Conflict(
                conflict_type="Missing Profile",
                severity="Warning",
                profile_id=pid,
                request_id=request.request_id,
                description=f"No profile found for {pid}; blackout and availability checks skipped.",
            ))
            continue
        conflicts.extend(_check_blackout(request, profile))
        conflicts.extend(_check_availability(request, profile))
        conflicts.extend(_check_double_booking(request, pid, existing))

    if conflicts:
        logger.info(f"Date request {request.request_id}: {len(conflicts)} conflict(s) detected.")
    return conflicts


def has_blocking_conflicts(conflicts: Iterable[Conflict]) -> bool:
    return any(c.is_blocking for c in conflicts)


# ---- 1. Blackout ----

def _check_blackout(request: DateRequest, profile: Profile) -> List[Conflict]:
    if not profile.is_blacked_out(request.slot.date):
        return []
    return [Conflict(
        conflict_type="Blackout",
        severity="Critical",
        profile_id=profile.id,
        request_id=request.request_id,
        description=f"{profile.display_name} is unavailable on {request.slot.date.isoformat()}.",
    )]


# ---- 2. Availability ----

def _check_availability(request: DateRequest, profile: Profile) -> List[Conflict]:
    slot = request.slot
    if slot.time_band in profile.availability.get(slot.weekday, ()):
        return []
    return [Conflict(
        conflict_type="Availability",
        severity="Warning",
        profile_id=profile.id,
        request_id=request.request_id,
        description=(
            f"{profile.display_name} is not usually free on {slot.weekday} {slot.time_band.lower()}s."
        ),
    )]


# ---- 3. Double Booking ----

def _check_double_booking(
    request: DateRequest, profile_id: str, existing: List[DateRequest]
) -> List[Conflict]:
    conflicts = []
    for other in existing:
        if other.request_id == request.request_id or not other.is_active:
            continue
        if not other.involves(profile_id):
            continue
        if other.slot.date == request.slot.date and other.slot.time_band == request.slot.time_band:
            conflicts.append(Conflict(
                conflict_type="Double Booking",
                severity="Critical",
                profile_id=profile_id,
                request_id=request.request_id,
                description=(
                    f"{profile_id} already has a {other.status} date on "
                    f"{other.slot.date.isoformat()} ({other.slot.time_band}) — request {other.request_id}."
                ),
            ))
    return conflicts
