"""
Suggest reviewers for a manuscript.

Candidates are scored on how well their stated expertise (bio, affiliation)
fits the manuscript, and on their track record as reviewers. The score is a
plain sum of the rules below, clamped to 0-100; higher sorts first.

=====================================================  ======
Rule                                                   Points
=====================================================  ======
Each manuscript keyword that appears in the bio        +10
A subject area word appears in the affiliation         +20
More than five reviews                                 +15
Average review quality rating above 4 (of 5)           +10
Past comments to authors mention the subject area      +5
More than three reviews currently in hand              -20
=====================================================  ======
"""

from typing import Iterable, List, Mapping, Optional

from dataclasses import dataclass, field

from ..domain.profile import Profile
from ..domain.review import Review
from ..domain.submission import Submission
from ..domain.util import words
from .quality import score_review

MIN_WORD_LENGTH = 3
"""Words this short or shorter carry no signal."""

EXCELLENT = 'excellent'
GOOD = 'good'
FAIR = 'fair'


@dataclass
class ReviewHistory:
    """Summary of a candidate's past reviewing."""

    total_reviews: int = 0
    active_reviews: int = 0
    avg_rating: float = 0.0
    """Mean overall quality score of submitted reviews, on a 5-point scale."""

    on_time_percentage: float = 0.0

    @classmethod
    def from_reviews(cls, reviews: Iterable[Review]) -> 'ReviewHistory':
        reviews = list(reviews)
        submitted = [r for r in reviews if r.is_submitted]
        on_time = [r for r in submitted
                   if r.deadline is None or r.submitted_at <= r.deadline]
        ratings = [score_review(r).overall / 2 for r in submitted]
        return cls(
            total_reviews=len(reviews),
            active_reviews=len([r for r in reviews if r.is_active]),
            avg_rating=sum(ratings) / len(ratings) if ratings else 0.0,
            on_time_percentage=(len(on_time) / len(submitted) * 100
                                if submitted else 0.0)
        )


@dataclass
class ReviewerMatch:
    """A candidate reviewer, and how well they fit the manuscript."""

    reviewer: Profile
    score: int
    reasons: List[str] = field(default_factory=list)
    expertise_areas: List[str] = field(default_factory=list)
    history: ReviewHistory = field(default_factory=ReviewHistory)

    @property
    def reviewer_id(self) -> str:
        return self.reviewer.user_id

    @property
    def band(self) -> str:
        return match_band(self.score)


def match_band(score: float) -> str:
    """Describe a match score."""
    if score >= 70:
        return EXCELLENT
    if score >= 50:
        return GOOD
    return FAIR


def article_keywords(submission: Submission) -> List[str]:
    """
    Keywords, and words from the title and abstract, in order.

    Repeats are kept: a term that is both a keyword and in the title counts
    twice towards a bio match.
    """
    metadata = submission.metadata
    candidates = [k.lower() for k in metadata.keywords] \
        + words(metadata.title) + words(metadata.abstract)
    return [keyword for keyword in candidates
            if len(keyword) > MIN_WORD_LENGTH]


def match_reviewers(submission: Submission, candidates: Iterable[Profile],
                    histories: Optional[Mapping[str, List[Review]]] = None) \
        -> List[ReviewerMatch]:
    """
    Score candidate reviewers for a submission.

    Parameters
    ----------
    submission : :class:`.Submission`
    candidates : iterable
        Items are :class:`.Profile` instances of people willing to review.
    histories : dict
        Past (and current) reviews for each candidate, keyed by user id.

    Returns
    -------
    list
        Items are :class:`.ReviewerMatch`, best match first. Authors of the
        manuscript, and anyone already reviewing it in the current round, are
        left out.

    """
    histories = histories or {}
    keywords = article_keywords(submission)
    reviewing = {r.reviewer_id for r in submission.reviews_in_round()
                 if not r.is_declined}
    matches = []
    for candidate in candidates:
        if _is_author(candidate, submission) \
                or candidate.user_id in reviewing:
            continue
        matches.append(_score(candidate, submission, keywords,
                              histories.get(candidate.user_id, [])))
    return sorted(matches, key=lambda m: m.score, reverse=True)


def _is_author(candidate: Profile, submission: Submission) -> bool:
    if str(submission.owner.native_id) == candidate.user_id:
        return True
    return bool(candidate.email) \
        and candidate.email.lower() in submission.metadata.author_emails


def _score(candidate: Profile, submission: Submission, keywords: List[str],
           reviews: List[Review]) -> ReviewerMatch:
    score = 0
    reasons: List[str] = []
    expertise: List[str] = []

    bio_words = words(candidate.bio)
    common = [k for k in keywords if any(k in word for word in bio_words)]
    if common:
        score += 10 * len(common)
        reasons.append(f'Bio mentions {len(common)} relevant keywords')
        expertise.extend(common[:3])

    subject = words(submission.metadata.subject_area)
    affiliation = words(candidate.affiliation)
    if any(s in a for s in subject for a in affiliation):
        score += 20
        reasons.append('Subject area aligns with affiliation')

    history = ReviewHistory.from_reviews(reviews)
    if history.total_reviews > 5:
        score += 15
        reasons.append('Experienced reviewer')
    if history.avg_rating > 4.0:
        score += 10
        reasons.append('High-quality review history')

    area = (submission.metadata.subject_area or '').lower()
    if area and any(area in (r.comments_to_author or '').lower()
                    for r in reviews):
        score += 5
        reasons.append('Has reviewed similar topics')

    if history.active_reviews > 3:
        score -= 20
        reasons.append('Currently has many active reviews')

    return ReviewerMatch(reviewer=candidate, score=min(max(score, 0), 100),
                         reasons=reasons, expertise_areas=expertise,
                         history=history)
