"""
Rules for sending e-mail notifications.

E-mail is sent by the platform's ``send-email-notification`` handler (see
:class:`.services.Functions`). Whenever we e-mail someone who has an account,
we also leave an in-app notification with a plain-text summary of the
message. Users who have switched off notifications on their profile get
neither.
"""

import re
from typing import Iterable, Optional

import bleach
from flask import render_template

from .. import logging
from ..context import get_application_config
from ..domain.event import Event, FinalizeSubmission, InviteReviewer, \
    AcceptSubmission, RejectSubmission, DeskReject, RequestRevision, Publish
from ..domain.submission import Submission
from ..domain.profile import Notification
from ..domain.agent import Agent
from ..services import Functions, store
from ..services.integration import RequestFailed, ConnectionFailed
from ..tasks import is_async

logger = logging.getLogger(__name__)

SUMMARY_LENGTH = 200


@FinalizeSubmission.bind()
@is_async
def confirm_submission(event: FinalizeSubmission, before: Submission,
                       after: Submission, creator: Agent,
                       task_id: Optional[str] = None,
                       **kwargs) -> Iterable[Event]:
    """Send a confirmation e-mail when the submission is finalized."""
    author = after.metadata.corresponding_author
    if email_is_enabled() and author is not None:
        context = template_context(after, author_name=author.name)
        notify(author.email, "Submission Received",
               render_template("journal/submission-received.html", **context),
               notification_type='submission_received',
               user_id=str(after.owner.native_id),
               submission_id=after.submission_id,
               level=Notification.SUCCESS)
    return []


@InviteReviewer.bind()
@is_async
def invite_reviewer(event: InviteReviewer, before: Submission,
                    after: Submission, creator: Agent,
                    task_id: Optional[str] = None,
                    **kwargs) -> Iterable[Event]:
    """Ask the reviewer to review the manuscript, and tell them when by."""
    review = after.reviews.get(event.event_id)
    if email_is_enabled() and review is not None:
        context = template_context(
            after, reviewer_name=review.reviewer.name,
            deadline=review.deadline
        )
        notify(review.reviewer.email,
               f"Review Invitation: {after.metadata.title}",
               render_template("journal/review-invitation.html", **context),
               notification_type='review_invitation',
               user_id=review.reviewer_id,
               submission_id=after.submission_id,
               review_id=review.review_id)
    return []


@AcceptSubmission.bind()
@RejectSubmission.bind()
@DeskReject.bind()
@RequestRevision.bind()
@is_async
def status_changed(event: Event, before: Submission, after: Submission,
                   creator: Agent, task_id: Optional[str] = None,
                   **kwargs) -> Iterable[Event]:
    """Let the corresponding author know about an editorial decision."""
    author = after.metadata.corresponding_author
    if email_is_enabled() and author is not None:
        context = template_context(
            after, author_name=author.name,
            status=after.status,
            status_label=after.status.replace('_', ' ').upper(),
            message=_editor_message(event)
        )
        notify(author.email, "Submission Status Update",
               render_template("journal/status-change.html", **context),
               notification_type='status_change',
               user_id=str(after.owner.native_id),
               submission_id=after.submission_id)
    return []


@Publish.bind()
@is_async
def article_published(event: Publish, before: Submission, after: Submission,
                      creator: Agent, task_id: Optional[str] = None,
                      **kwargs) -> Iterable[Event]:
    """Celebrate with the authors."""
    author = after.metadata.corresponding_author
    if email_is_enabled() and author is not None:
        context = template_context(after, author_name=author.name,
                                   publication=after.publication)
        notify(author.email, "Article Published",
               render_template("journal/published.html", **context),
               notification_type='article_published',
               user_id=str(after.owner.native_id),
               submission_id=after.submission_id,
               level=Notification.SUCCESS)
    return []


def notify(to: str, subject: str, html_content: str,
           notification_type: Optional[str] = None,
           user_id: Optional[str] = None,
           submission_id: Optional[int] = None,
           review_id: Optional[str] = None,
           level: str = Notification.INFO) -> bool:
    """
    Send an e-mail, and leave an in-app notification for the recipient.

    Returns
    -------
    bool
        ``False`` if the recipient has opted out of notifications, or if the
        e-mail could not be sent.

    """
    if user_id is not None:
        profile = store.get_profile(user_id)
        if profile is not None and not profile.email_notifications_enabled:
            logger.debug('%s has notifications disabled', user_id)
            return False
    try:
        Functions.current_session().send_email(
            to, subject, html_content,
            notification_type=notification_type,
            user_id=user_id,
            submission_id=submission_id,
            review_id=review_id
        )
    except (RequestFailed, ConnectionFailed) as e:
        logger.warning('Could not send "%s" to %s: %s', subject, to, e)
        return False
    if user_id is not None:
        store.add_notification(user_id, subject, summarize(html_content),
                               level)
    return True


def summarize(html_content: str) -> str:
    """Plain-text summary of an HTML message, for in-app notifications."""
    text = bleach.clean(html_content, tags=set(), strip=True)
    text = re.sub(r"\s+", " ", text).strip()
    return text[:SUMMARY_LENGTH] + '...'


def email_is_enabled() -> bool:
    """Determine whether or not email is enabled in this application."""
    return bool(int(get_application_config().get('EMAIL_ENABLED', '0')))


def _editor_message(event: Event) -> Optional[str]:
    if isinstance(event, RejectSubmission):
        return event.message or event.rationale
    if isinstance(event, RequestRevision):
        return event.request_details or event.rationale
    return getattr(event, 'rationale', None)


def template_context(submission: Submission, **extra) -> dict:
    config = get_application_config()
    context = {
        'submission_id': submission.submission_id,
        'submission': submission,
        'title': submission.metadata.title,
        'journal_name': config.get('JOURNAL_NAME', 'IJSDS'),
        'signin_url': config.get('SIGNIN_URL',
                                 'https://ijsds.org/auth/signin'),
    }
    context.update(extra)
    return context
