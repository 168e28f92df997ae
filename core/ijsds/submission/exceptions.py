"""Exceptions raised while handling manuscript submission events."""

from typing import TypeVar

EventType = TypeVar('EventType')


class InvalidEvent(ValueError):
    """
    A command/event cannot be applied to the submission in its current state.

    The offending event is available on :attr:`.event`, and the human-readable
    reason on :attr:`.message`; the API layer passes the latter back to the
    client.
    """

    def __init__(self, event: EventType, message: str = '') -> None:
        self.event = event
        self.message = message
        name = getattr(event, 'event_type', type(event).__name__)
        super(InvalidEvent, self).__init__(f"Invalid {name}: {message}")


class NoSuchSubmission(Exception):
    """A submission was requested by an identifier that does not exist."""


class SaveError(RuntimeError):
    """Events or projected submission state could not be persisted."""


class NothingToDo(RuntimeError):
    """Asked to save, but no events were provided."""
