"""Per-round progress of peer review on a submission."""

from typing import List

from dataclasses import dataclass

from ..domain.submission import Submission

COMPLETED = 'completed'
ACTIVE = 'active'
PENDING = 'pending'


@dataclass
class RoundSummary:
    review_round: int
    total: int
    submitted: int

    @property
    def completion_rate(self) -> float:
        if self.total == 0:
            return 0.0
        return self.submitted / self.total * 100

    @property
    def status(self) -> str:
        if self.completion_rate >= 100:
            return COMPLETED
        if self.completion_rate > 0:
            return ACTIVE
        return PENDING


def round_summaries(submission: Submission) -> List[RoundSummary]:
    """Summarize each round of review that has at least one invitation."""
    rounds = sorted({r.review_round for r in submission.reviews.values()})
    summaries = []
    for review_round in rounds:
        reviews = submission.reviews_in_round(review_round)
        summaries.append(RoundSummary(
            review_round=review_round,
            total=len(reviews),
            submitted=len([r for r in reviews if r.is_submitted])
        ))
    return summaries


def current_round(submission: Submission) -> int:
    """The latest round that has reviews, or the submission's round."""
    rounds = [r.review_round for r in submission.reviews.values()]
    return max(rounds, default=submission.review_round)
