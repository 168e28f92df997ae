"""
Quality scores for submitted reviews.

Each review gets four scores out of ten, and their mean. None of these are
subtle; they are meant to flag reviews that an editor might want to look at
more closely, not to rank reviewers for their own sake.
"""

import re
from datetime import datetime
from typing import Optional

from dataclasses import dataclass

from ..domain.review import Review

HIGH = 'high'
MEDIUM = 'medium'
LOW = 'low'

SUGGESTION = re.compile(r"\b(suggest\w*|recommend\w*|consider\w*|could|"
                        r"should|might|would benefit)\b", re.I)
"""Language that indicates a reviewer is offering a way forward."""

PARAGRAPH_BREAK = re.compile(r"\n\s*\n")


@dataclass
class QualityScore:
    """Quality metrics for a single review."""

    review_id: Optional[str]
    thoroughness: int
    clarity: int
    constructiveness: int
    timeliness: int
    word_count: int

    @property
    def overall(self) -> float:
        """Mean of the four metrics."""
        return (self.thoroughness + self.clarity + self.constructiveness
                + self.timeliness) / 4

    @property
    def quality_band(self) -> str:
        return quality_band(self.overall)


def quality_band(score: float) -> str:
    """``high`` at eight or more, ``medium`` at six or more."""
    if score >= 8:
        return HIGH
    if score >= 6:
        return MEDIUM
    return LOW


def score_review(review: Review, now: Optional[datetime] = None) \
        -> QualityScore:
    """
    Score a review.

    Parameters
    ----------
    review : :class:`.Review`
    now : datetime
        Unused for submitted reviews; reviews that have not been submitted
        get the lowest timeliness score regardless.

    Returns
    -------
    :class:`.QualityScore`

    """
    to_author = review.comments_to_author or ''
    to_editor = review.comments_to_editor or ''
    length = len(to_author) + len(to_editor)
    return QualityScore(
        review_id=review.review_id,
        thoroughness=min(10, max(1, length // 50)),
        clarity=_clarity(to_author, to_editor),
        constructiveness=_constructiveness(review),
        timeliness=_timeliness(review),
        word_count=length // 6
    )


def _clarity(*comments: str) -> int:
    """Reviews organized into paragraphs are easier to act on."""
    if any(PARAGRAPH_BREAK.search(text) for text in comments):
        return 9
    return 7


def _constructiveness(review: Review) -> int:
    score = 7
    if SUGGESTION.search(review.comments_to_author or ''):
        score += 1
    if review.recommendation:
        score += 1
    return score


def _timeliness(review: Review) -> int:
    if review.submitted_at is None:
        return 5
    if review.deadline is None or review.submitted_at <= review.deadline:
        return 10
    return 8
