"""Helpers for building submissions by applying events."""

from datetime import datetime, timedelta
from typing import List

from pytz import UTC

from ...agent import User
from ...submission import Author, Submission
from ... import event as ev

START = datetime(2026, 2, 1, 9, 0, tzinfo=UTC)

AUTHOR = User('100', 'ama@ug.edu.gh', name='Ama Mensah',
              roles=[User.AUTHOR])
EDITOR = User('200', 'editor@ijsds.org', name='Efua Editor',
              roles=[User.AUTHOR, User.EDITOR])
REVIEWER = User('300', 'reviewer@uct.ac.za', name='Thabo Reviewer',
                roles=[User.AUTHOR, User.REVIEWER])
REVIEWER_2 = User('301', 'second@uonbi.ac.ke', name='Wanjiru Reviewer',
                  roles=[User.AUTHOR, User.REVIEWER])

ABSTRACT = 'We estimate the effect of microcredit on household consumption' \
    ' using a randomized rollout across 120 villages in northern Ghana.'


class Clock:
    """Hands out strictly increasing timestamps."""

    def __init__(self, start: datetime = START) -> None:
        self.now = start

    def __call__(self, **delta: int) -> datetime:
        self.now += timedelta(**delta) if delta else timedelta(minutes=1)
        return self.now


def apply_all(events: List[ev.Event], submission: Submission = None) \
        -> Submission:
    for event in events:
        submission = event.apply(submission)
    return submission


def draft(clock: Clock) -> Submission:
    """A complete, but not yet finalized, submission."""
    return apply_all([
        ev.CreateSubmission(creator=AUTHOR, created=clock()),
        ev.SetTitle(creator=AUTHOR, created=clock(),
                    title='Microcredit and consumption in northern Ghana'),
        ev.SetAbstract(creator=AUTHOR, created=clock(), abstract=ABSTRACT),
        ev.SetKeywords(creator=AUTHOR, created=clock(),
                       keywords=['microfinance', 'consumption']),
        ev.SetSubjectArea(creator=AUTHOR, created=clock(),
                          subject_area='Development economics'),
        ev.SetAuthors(creator=AUTHOR, created=clock(), authors=[
            Author(name='Ama Mensah', email='ama@ug.edu.gh',
                   affiliation='University of Ghana')
        ]),
        ev.AttachManuscript(creator=AUTHOR, created=clock(),
                            file_name='manuscript.pdf',
                            file_url='https://files.ijsds.org/1/v1.pdf')
    ])


def in_review(clock: Clock) -> Submission:
    """A submission with an accepted review invitation."""
    submission = apply_all([
        ev.FinalizeSubmission(creator=AUTHOR, created=clock()),
        ev.TransitionWorkflow(creator=EDITOR, created=clock(),
                              target=Submission.EDITORIAL_REVIEW),
        ev.TransitionWorkflow(creator=EDITOR, created=clock(),
                              target=Submission.REVIEWER_ASSIGNMENT),
        ev.TransitionWorkflow(creator=EDITOR, created=clock(),
                              target=Submission.PEER_REVIEW),
    ], draft(clock))
    invite = ev.InviteReviewer(creator=EDITOR, created=clock(),
                               reviewer=REVIEWER)
    submission = invite.apply(submission)
    return ev.AcceptInvitation(creator=REVIEWER, created=clock(),
                               review_id=invite.event_id).apply(submission)
