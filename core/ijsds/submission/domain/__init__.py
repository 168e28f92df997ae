"""Core data structures for the journal's editorial system."""

from .agent import User, System, Client, Agent, agent_factory
from .event import event_factory, Event
from .profile import Profile, Notification
from .review import Review
from .submission import Submission, ArticleMetadata, Author, \
    EditorialDecision, RevisionRequest, RejectionMessage, FileVersion, \
    Publication
from . import workflow
