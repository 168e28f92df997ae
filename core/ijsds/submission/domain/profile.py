"""Data structures for user profiles and in-app notifications."""

from typing import Optional, List
from datetime import datetime

from dataclasses import dataclass, field

from .agent import User
from .util import coerce_datetime


@dataclass
class Profile:
    """A registered user of the journal platform."""

    user_id: str
    email: str = field(default_factory=str)
    full_name: str = field(default_factory=str)
    affiliation: str = field(default_factory=str)
    bio: str = field(default_factory=str)
    orcid_id: Optional[str] = None
    is_editor: bool = False
    is_reviewer: bool = False
    email_notifications_enabled: bool = True
    deadline_reminder_days: int = 3
    """How many days before a review deadline the reviewer is reminded."""

    @property
    def roles(self) -> List[str]:
        roles = [User.AUTHOR]
        if self.is_reviewer:
            roles.append(User.REVIEWER)
        if self.is_editor:
            roles.append(User.EDITOR)
        return roles

    def as_agent(self) -> User:
        """Get a :class:`.User` agent representing this profile."""
        return User(self.user_id, email=self.email, name=self.full_name,
                    affiliation=self.affiliation, orcid=self.orcid_id,
                    roles=self.roles)


@dataclass
class Notification:
    """An in-app notification for a user."""

    INFO = 'info'
    SUCCESS = 'success'
    WARNING = 'warning'

    user_id: str
    title: str
    message: str
    notification_type: str = INFO
    read: bool = False
    created: Optional[datetime] = None
    notification_id: Optional[int] = None

    def __post_init__(self) -> None:
        self.created = coerce_datetime(self.created)
