"""Admission Point Score (APS) computation.

Converts NSC subject percentages into the 0-7 point scale and totals the best
six subjects, with Life Orientation scored separately and capped at 3 points.

Percent values are expected to be clamped to [0, 100] by the caller (see
``clamp_percent``); the engine does not re-validate the range.
"""

from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Dict, Iterable, List, Optional, Tuple

POINT_BANDS: list[tuple[int, int]] = [
    (80, 7),
    (70, 6),
    (60, 5),
    (50, 4),
    (40, 3),
    (30, 2),
    (1, 1),
]

TOP_SUBJECT_COUNT = 6
CAPPED_SUBJECT_KEY = "life orientation"
CAPPED_SUBJECT_MAX_POINTS = 3


@dataclass(frozen=True)
class SubjectEntry:
    name: str
    percent: int

    def to_dict(self) -> Dict:
        return {"name": self.name, "percent": self.percent}


@dataclass(frozen=True)
class ScoreBreakdownEntry:
    subject_name: str
    points: int

    def to_dict(self) -> Dict:
        return {"subjectName": self.subject_name, "points": self.points}


@dataclass(frozen=True)
class APSResult:
    total_score: int
    breakdown: Tuple[ScoreBreakdownEntry, ...] = ()
    subjects: Tuple[SubjectEntry, ...] = ()

    def to_dict(self) -> Dict:
        return {
            "totalScore": self.total_score,
            "breakdown": [entry.to_dict() for entry in self.breakdown],
            "subjects": [subject.to_dict() for subject in self.subjects],
        }


def clamp_percent(value: float) -> int:
    # Non-finite input counts as not entered; fractions are truncated.
    if not math.isfinite(value):
        return 0
    return max(0, min(100, int(value)))


def points_for_percent(percent: int) -> int:
    for lower_bound, points in POINT_BANDS:
        if percent >= lower_bound:
            return points
    return 0


def is_capped_subject(name: str) -> bool:
    return CAPPED_SUBJECT_KEY in name.lower()


def capped_points(percent: int) -> int:
    return min(CAPPED_SUBJECT_MAX_POINTS, points_for_percent(percent) // 2)


def _is_scorable(subject: SubjectEntry) -> bool:
    return bool(subject.name) and subject.percent > 0


def calculate_aps(subjects: Iterable[SubjectEntry]) -> APSResult:
    """
    Score a student's subjects.

    The first subject whose name contains "life orientation" (any case) is
    scored separately as floor(points / 2), at most 3, and always reported
    last in the breakdown. Any further matches compete in the general pool.
    The general pool is ranked by points (ties keep input order) and the top
    six count towards the total.
    """
    valid = tuple(s for s in subjects if _is_scorable(s))

    capped: Optional[SubjectEntry] = None
    pool: List[SubjectEntry] = []
    for subject in valid:
        if capped is None and is_capped_subject(subject.name):
            capped = subject
        else:
            pool.append(subject)

    scored = [(subject, points_for_percent(subject.percent)) for subject in pool]
    ranked = sorted(scored, key=lambda item: item[1], reverse=True)

    breakdown = [
        ScoreBreakdownEntry(subject_name=subject.name, points=points)
        for subject, points in ranked[:TOP_SUBJECT_COUNT]
    ]
    if capped is not None:
        breakdown.append(ScoreBreakdownEntry(subject_name=capped.name, points=capped_points(capped.percent)))

    return APSResult(
        total_score=sum(entry.points for entry in breakdown),
        breakdown=tuple(breakdown),
        subjects=valid,
    )
