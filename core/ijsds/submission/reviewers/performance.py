"""Summarize how a reviewer has performed over time."""

import math
from datetime import timedelta
from typing import Iterable, Optional

from dataclasses import dataclass

from ..domain.review import Review
from .quality import score_review

AVAILABLE = 'available'
BUSY = 'busy'
UNAVAILABLE = 'unavailable'


@dataclass
class ReviewerPerformance:
    """Aggregate reviewing statistics for one person."""

    reviewer_id: str
    total: int = 0
    completed: int = 0
    in_progress: int = 0
    avg_turnaround_days: Optional[int] = None
    on_time_percentage: int = 0
    avg_quality: float = 0.0

    @property
    def composite(self) -> float:
        return self.completed * 0.3 + self.on_time_percentage * 0.3 \
            + self.avg_quality * 0.4

    @property
    def rating(self) -> str:
        score = self.composite
        if score >= 8:
            return 'Excellent'
        if score >= 6:
            return 'Good'
        if score >= 4:
            return 'Average'
        return 'Needs improvement'

    @property
    def availability(self) -> str:
        if self.in_progress == 0:
            return AVAILABLE
        if self.in_progress <= 2:
            return BUSY
        return UNAVAILABLE


def turnaround_days(review: Review) -> Optional[int]:
    """Whole days (rounded up) from invitation to submission."""
    if review.submitted_at is None or review.invitation_sent_at is None:
        return None
    elapsed = review.submitted_at - review.invitation_sent_at
    return math.ceil(elapsed / timedelta(days=1))


def reviewer_performance(reviewer_id: str, reviews: Iterable[Review]) \
        -> ReviewerPerformance:
    """Compute :class:`.ReviewerPerformance` from a reviewer's reviews."""
    reviews = [r for r in reviews if r.reviewer_id == str(reviewer_id)]
    completed = [r for r in reviews if r.is_submitted]
    performance = ReviewerPerformance(
        reviewer_id=str(reviewer_id),
        total=len(reviews),
        completed=len(completed),
        in_progress=len([r for r in reviews
                         if r.is_accepted and not r.is_submitted])
    )
    if not completed:
        return performance

    turnarounds = [d for d in map(turnaround_days, completed) if d is not None]
    if turnarounds:
        performance.avg_turnaround_days = \
            round(sum(turnarounds) / len(turnarounds))
    on_time = [r for r in completed
               if r.deadline is None or r.submitted_at <= r.deadline]
    performance.on_time_percentage = \
        round(len(on_time) / len(completed) * 100)
    scores = [score_review(r).overall for r in completed]
    performance.avg_quality = sum(scores) / len(scores)
    return performance
