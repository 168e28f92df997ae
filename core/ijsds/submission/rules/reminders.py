"""
Remind reviewers of upcoming deadlines.

Each reviewer chooses (on their profile) how many days of warning they would
like. The worker checks for reviews that are coming due on a schedule; see
:const:`.config.REMINDER_SCHEDULE_HOURS`.
"""

from datetime import datetime
from typing import Optional

from flask import render_template

from .. import logging, config
from ..domain.review import Review
from ..domain.util import get_tzaware_utc_now
from ..services import store
from ..tasks import is_periodic
from .email_notifications import notify, email_is_enabled, \
    template_context

logger = logging.getLogger(__name__)


def reminder_is_due(review: Review, reminder_days: int,
                    now: datetime) -> bool:
    """An active review whose deadline falls within ``reminder_days``."""
    if not review.is_active or review.deadline is None:
        return False
    days = review.days_until_deadline(now)
    return days is not None and 0 <= days <= reminder_days


@is_periodic(hours=config.REMINDER_SCHEDULE_HOURS)
def send_deadline_reminders(now: Optional[datetime] = None) -> int:
    """
    E-mail reviewers whose reviews are coming due.

    Reviews on submissions that have been decided, or from a round that has
    been superseded, are passed over. A failure to reach one reviewer does
    not prevent the others from being reminded.

    Returns
    -------
    int
        The number of reminders sent.

    """
    if not email_is_enabled():
        return 0
    if now is None:
        now = get_tzaware_utc_now()
    sent = 0
    for review in store.get_active_reviews():
        profile = store.get_profile(review.reviewer_id)
        reminder_days = profile.deadline_reminder_days if profile else 3
        if not reminder_is_due(review, reminder_days, now):
            continue
        submission = store.get_submission_fast(review.submission_id)
        if not submission.is_under_consideration \
                or review.review_round < submission.review_round:
            logger.debug('Review %s is no longer needed', review.review_id)
            continue
        context = template_context(
            submission,
            reviewer_name=review.reviewer.name,
            deadline=review.deadline,
            days_remaining=review.days_until_deadline(now)
        )
        if notify(review.reviewer.email, "Review Deadline Reminder",
                  render_template("journal/deadline-reminder.html",
                                  **context),
                  notification_type='deadline_reminder',
                  user_id=review.reviewer_id,
                  submission_id=review.submission_id,
                  review_id=review.review_id):
            sent += 1
    logger.info('Sent %i deadline reminders', sent)
    return sent
