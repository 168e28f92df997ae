"""Detect conflicts of interest between a reviewer and a manuscript."""

from typing import Iterable, List, Optional

from dataclasses import dataclass, field

from ..domain.profile import Profile
from ..domain.submission import Submission
from ..domain.util import words, email_domain

LOW = 'low'
MEDIUM = 'medium'
HIGH = 'high'


@dataclass
class ConflictReport:
    """Outcome of a conflict check for one reviewer."""

    reviewer_id: str
    reasons: List[str] = field(default_factory=list)
    risk_level: str = LOW

    @property
    def has_conflict(self) -> bool:
        return len(self.reasons) > 0

    def raise_to(self, level: str) -> None:
        """Raise the risk level; risk is never lowered."""
        if level == HIGH or (level == MEDIUM and self.risk_level == LOW):
            self.risk_level = level


def detect_conflicts(reviewer: Profile, submission: Submission,
                     history: Optional[Iterable[Submission]] = None) \
        -> ConflictReport:
    """
    Check a prospective reviewer against the authors of a submission.

    Parameters
    ----------
    reviewer : :class:`.Profile`
    submission : :class:`.Submission`
    history : iterable
        Submissions that ``reviewer`` has reviewed in the past.

    Returns
    -------
    :class:`.ConflictReport`

    """
    report = ConflictReport(reviewer_id=reviewer.user_id)
    authors = submission.metadata.authors
    author_emails = submission.metadata.author_emails
    reviewer_email = (reviewer.email or '').lower()

    domain = email_domain(reviewer_email)
    if domain and domain in {email_domain(e) for e in author_emails}:
        report.reasons.append('Same institutional email domain')
        report.raise_to(HIGH)

    if reviewer_email and reviewer_email in author_emails:
        report.reasons.append('Reviewer is an author')
        report.raise_to(HIGH)

    affiliation = set(words(reviewer.affiliation, 3))
    for author in authors:
        if len(affiliation & set(words(author.affiliation, 3))) >= 2:
            report.reasons.append(f'Similar affiliation to {author.name}')
            report.raise_to(MEDIUM)

    for previous in history or []:
        if previous.submission_id == submission.submission_id:
            continue
        if set(previous.metadata.author_emails) & set(author_emails):
            report.reasons.append('Previously reviewed work by same authors')
            report.raise_to(MEDIUM)
            break
    return report
