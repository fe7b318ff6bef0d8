from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

from ..core.constants import MAX_MATCH_CONFIDENCE, MIN_MATCH_CONFIDENCE


@dataclass(frozen=True)
class MatchResult:
    matched: bool
    confidence: float


class PhotoVerifier(Protocol):
    """Compares a captured photo against an employee's reference photos.

    Callers rely on nothing but this shape, so a real biometric comparator can
    replace the simulated one.
    """

    def verify(self, captured_photo: str, reference_photos: Sequence[str]) -> MatchResult:
        raise NotImplementedError


class SimulatedPhotoVerifier(PhotoVerifier):
    """Placeholder comparator: no image comparison is performed.

    Matches whenever reference photos exist, with a uniform random confidence
    in [70, 100]; otherwise confidence is 0.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()

    def verify(self, captured_photo: str, reference_photos: Sequence[str]) -> MatchResult:
        matched = len(reference_photos) > 0
        if not matched:
            return MatchResult(matched=False, confidence=0.0)
        confidence = self._rng.uniform(MIN_MATCH_CONFIDENCE, MAX_MATCH_CONFIDENCE)
        return MatchResult(matched=True, confidence=round(confidence, 2))
