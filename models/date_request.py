"""
DateRequest model — the record the booking layer persists once a member picks
one of the suggested slots for a match.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
import logging
import random
import uuid

from models.errors import ValidationError
from models.match import SlotSuggestion

logger = logging.getLogger(__name__)

STATUS_SCHEDULED = "scheduled"
STATUS_CONFIRMED = "confirmed"
STATUS_DECLINED = "declined"
STATUS_COMPLETED = "completed"

# Requests in these states still hold the participants' time
ACTIVE_STATUSES = (STATUS_SCHEDULED, STATUS_CONFIRMED)
ALL_STATUSES = ACTIVE_STATUSES + (STATUS_DECLINED, STATUS_COMPLETED)


def generate_confirmation_code(rng: Optional[random.Random] = None) -> str:
    """Random 6-digit code both participants exchange on the day."""
    rng = rng or random.Random()
    return str(rng.randint(100000, 999999))


@dataclass
class DateRequest:
    sender_id: str
    recipient_id: str
    slot: SlotSuggestion
    venue: str
    note: str = ""
    match_id: str = ""
    confirmation_code: str = field(default_factory=generate_confirmation_code)
    status: str = STATUS_SCHEDULED
    request_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        if not self.sender_id or not self.recipient_id:
            raise ValidationError("Date request needs both a sender and a recipient", field="recipient_id")
        if self.sender_id == self.recipient_id:
            raise ValidationError("Cannot send a date request to yourself", field="recipient_id")
        self.venue = (self.venue or "").strip()
        if not self.venue:
            raise ValidationError("Please enter a venue", field="venue")
        self.note = (self.note or "").strip()
        if self.status not in ALL_STATUSES:
            raise ValidationError(f"Unknown date request status: {self.status!r}", field="status")

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    def involves(self, profile_id: str) -> bool:
        return profile_id in (self.sender_id, self.recipient_id)

    def _transition(self, allowed_from: tuple, new_status: str) -> None:
        if self.status not in allowed_from:
            raise ValidationError(
                f"Cannot mark a {self.status} date request as {new_status}", field="status"
            )
        logger.info(f"Date request {self.request_id}: {self.status} → {new_status}")
        self.status = new_status

    def confirm(self) -> None:
        self._transition((STATUS_SCHEDULED,), STATUS_CONFIRMED)

    def decline(self) -> None:
        self._transition(ACTIVE_STATUSES, STATUS_DECLINED)

    def complete(self, code: str) -> None:
        """Mark the date as happened; the code shown to the other participant must match."""
        code = (code or "").strip()
        if not code:
            raise ValidationError("Please enter the confirmation code", field="confirmation_code")
        if code != self.confirmation_code:
            raise ValidationError("Invalid confirmation code", field="confirmation_code")
        self._transition(ACTIVE_STATUSES, STATUS_COMPLETED)

    @classmethod
    def from_dict(cls, row: dict) -> DateRequest:
        """Create a DateRequest from a CSV/sheet row dictionary."""
        try:
            day = datetime.strptime(str(row["date"]).strip(), "%Y-%m-%d").date()
            created_at = datetime.fromisoformat(str(row["created_at"]).strip())
        except (KeyError, ValueError) as e:
            raise ValidationError(f"Malformed date request record: {e}") from e
        return cls(
            sender_id=str(row.get("sender_id", "")).strip(),
            recipient_id=str(row.get("recipient_id", "")).strip(),
            slot=SlotSuggestion.for_date(day, str(row.get("time_band", "")).strip()),
            venue=str(row.get("venue", "")),
            note=str(row.get("note", "") or ""),
            match_id=str(row.get("match_id", "") or "").strip(),
            confirmation_code=str(row.get("confirmation_code", "")).strip(),
            status=str(row.get("status", "") or "").strip() or STATUS_SCHEDULED,
            request_id=str(row.get("request_id", "")).strip() or uuid.uuid4().hex,
            created_at=created_at,
        )

    def to_dict(self) -> dict:
        return {
            "request_id": self.request_id,
            "sender_id": self.sender_id,
            "recipient_id": self.recipient_id,
            "match_id": self.match_id,
            "date": self.slot.date.isoformat(),
            "weekday": self.slot.weekday,
            "time_band": self.slot.time_band,
            "time": self.slot.representative_time.strftime("%H:%M"),
            "venue": self.venue,
            "note": self.note,
            "confirmation_code": self.confirmation_code,
            "status": self.status,
            "created_at": self.created_at.isoformat(timespec="seconds"),
        }
