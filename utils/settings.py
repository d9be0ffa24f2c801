"""
Runtime settings for the matching and scheduling engines.

Defaults mirror the production weighting. Each config can be overridden from
``KNOCK_*`` environment variables (a local ``.env`` is honoured) or injected
directly, e.g. by tests that need different weights.
"""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from typing import List

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Invalid value for {name}: {raw!r} — using default {default}")
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Invalid value for {name}: {raw!r} — using default {default}")
        return default


@dataclass(frozen=True)
class ScoringConfig:
    visual_weight: float = 0.4
    activity_weight: float = 0.3
    availability_weight: float = 0.3
    saturation_slots: int = 5     # shared weekly slots that max out availability
    min_score: float = 0.5        # candidates must score strictly above this

    def validate(self) -> List[str]:
        """Return a list of problems (empty if the config is usable)."""
        issues = []
        weights = (self.visual_weight, self.activity_weight, self.availability_weight)
        if any(w < 0 for w in weights):
            issues.append(f"Weights must be non-negative, got {weights}")
        if abs(sum(weights) - 1.0) > 0.01:
            issues.append(f"Weights don't sum to 1: {sum(weights):.3f}")
        if self.saturation_slots <= 0:
            issues.append(f"saturation_slots must be positive, got {self.saturation_slots}")
        if not 0 <= self.min_score <= 1:
            issues.append(f"min_score must be in [0, 1], got {self.min_score}")
        return issues

    @classmethod
    def from_env(cls) -> ScoringConfig:
        load_dotenv()
        config = cls(
            visual_weight=_env_float("KNOCK_VISUAL_WEIGHT", cls.visual_weight),
            activity_weight=_env_float("KNOCK_ACTIVITY_WEIGHT", cls.activity_weight),
            availability_weight=_env_float("KNOCK_AVAILABILITY_WEIGHT", cls.availability_weight),
            saturation_slots=_env_int("KNOCK_SATURATION_SLOTS", cls.saturation_slots),
            min_score=_env_float("KNOCK_MIN_SCORE", cls.min_score),
        )
        issues = config.validate()
        if issues:
            logger.warning(f"Scoring config from environment is invalid ({'; '.join(issues)}) — using defaults.")
            return cls()
        return config


@dataclass(frozen=True)
class SchedulingConfig:
    horizon_days: int = 14
    max_results: int = 5

    @classmethod
    def from_env(cls) -> SchedulingConfig:
        load_dotenv()
        return cls(
            horizon_days=_env_int("KNOCK_HORIZON_DAYS", cls.horizon_days),
            max_results=_env_int("KNOCK_MAX_SUGGESTIONS", cls.max_results),
        )
