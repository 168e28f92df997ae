"""Controllers for the current user's profile and notifications."""

from http import HTTPStatus as status
from typing import Optional

from dataclasses import asdict
from werkzeug.exceptions import NotFound

from ijsds.submission.domain.profile import Profile
from ijsds.submission.services import store
from ijsds.submission.validation import PROFILE_FORM, validate_form

from .util import Agents, Response, invalid, parse_int, require_data

EDITABLE = ('full_name', 'email', 'affiliation', 'bio', 'orcid_id',
            'is_reviewer', 'email_notifications_enabled',
            'deadline_reminder_days')
"""Profile fields that users may change; the editor role is granted."""


def _profile_data(profile: Profile) -> dict:
    data = asdict(profile)
    data['roles'] = profile.roles
    return data


def get_profile(agents: Agents) -> Response:
    user = agents['creator']
    profile = store.get_profile(user.native_id)
    if profile is None:
        raise NotFound('You have not created a profile')
    return _profile_data(profile), status.OK, {}


def update_profile(data: Optional[dict], agents: Agents) -> Response:
    """Create or update the current user's profile."""
    data = require_data(data)
    user = agents['creator']
    profile = store.get_profile(user.native_id)
    created = profile is None
    if profile is None:
        profile = Profile(user_id=user.native_id, email=user.email,
                          full_name=user.name)
    changes = {key: value for key, value in data.items() if key in EDITABLE}
    errors = validate_form({**asdict(profile), **changes}, PROFILE_FORM)
    if errors:
        return invalid(errors)
    if 'deadline_reminder_days' in changes:
        changes['deadline_reminder_days'] = parse_int(
            changes['deadline_reminder_days'], 'deadline_reminder_days'
        ) or 0
    for key, value in changes.items():
        setattr(profile, key, value)
    store.store_profile(profile)
    code = status.CREATED if created else status.OK
    return _profile_data(profile), code, {}


def get_notifications(params: dict, agents: Agents) -> Response:
    unread_only = params.get('unread', '').lower() in ('1', 'true', 'yes')
    notifications = store.get_notifications(agents['creator'].native_id,
                                            unread_only=unread_only)
    return {'notifications': [asdict(n) for n in notifications]}, \
        status.OK, {}


def mark_read(notification_id: int, agents: Agents) -> Response:
    """Mark one of the current user's notifications as read."""
    mine = {n.notification_id for n
            in store.get_notifications(agents['creator'].native_id)}
    if notification_id not in mine:
        raise NotFound(f'No such notification: {notification_id}')
    notification = store.mark_notification_read(notification_id)
    return asdict(notification), status.OK, {}
