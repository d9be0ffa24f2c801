"""
Shared fixtures for the matching and scheduling test suite.

Provides:
- A fixed "today" (Monday 2026-10-19) so calendar walks are deterministic
- A profile factory with sensible defaults
- The hiking/coffee subject and candidate pair used across the scorer tests
"""
from datetime import date

import pytest

from models.profile import Profile

TODAY = date(2026, 10, 19)  # a Monday


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def make_profile():
    def _make(pid="user-1", visual=(), activities=(), availability=None, blackout=(), name=""):
        return Profile(
            id=pid,
            visual_preference_tags=visual,
            activity_tags=activities,
            availability=availability or {},
            blackout_dates=blackout,
            name=name,
        )
    return _make


@pytest.fixture
def subject(make_profile) -> Profile:
    return make_profile(
        pid="user-subject",
        visual={1, 3, 5},
        activities={"hiking", "coffee"},
        availability={"Monday": ["Morning"], "Saturday": ["Afternoon", "Evening"]},
    )


@pytest.fixture
def candidate(make_profile) -> Profile:
    return make_profile(
        pid="user-candidate",
        visual={2, 3, 4},
        activities={"hiking", "coffee", "yoga"},
        availability={"Monday": ["Morning"], "Saturday": ["Evening"]},
    )
