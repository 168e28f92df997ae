"""Provides the base event class."""

import copy
import hashlib
from collections import defaultdict
from datetime import datetime
from functools import wraps
from typing import Optional, Callable, Tuple, Iterable, List, ClassVar, \
    Mapping, Type, Any

from dataclasses import field

from ... import logging
from ...context import get_application_config
from ..agent import Agent, System, agent_factory
from ..submission import Submission
from ..util import coerce_datetime, get_tzaware_utc_now
from .util import dataclass

logger = logging.getLogger(__name__)

Events = Iterable['Event']
Condition = Callable[['Event', Optional[Submission], Submission], bool]
Callback = Callable[['Event', Optional[Submission], Submission, Agent],
                    Events]
Decorator = Callable[[Callable], Callable]
Rule = Tuple[Condition, Callback]
Store = Callable[['Event', Optional[Submission], Submission],
                 Tuple['Event', Submission]]


class EventType(type):
    """Metaclass for :class:`.Event`."""


@dataclass()
class Event(metaclass=EventType):
    """
    Base class for submission-related events/commands.

    An event represents a change to a :class:`.domain.submission.Submission`.
    Rather than changing submissions directly, an application should create
    (and store) events. Each event class must inherit from this base class,
    extend it with whatever data is needed for the event, and define methods
    for validation and projection (changing a submission):

    - ``validate(self, submission: Submission) -> None`` should raise
      :class:`.InvalidEvent` if the event instance has invalid data.
    - ``project(self, submission: Submission) -> Submission`` should perform
      changes to the :class:`.domain.submission.Submission` and return it.

    Neither method may consult the wall clock: events are replayed whenever a
    submission is loaded, so anything time-dependent must be derived from
    :attr:`created`.

    An event class also provides a hook for doing things automatically when the
    submission changes. To register a function that gets called when an event
    is committed, use the :func:`bind` method.
    """

    NAME = 'base event'
    NAMED = 'base event'

    creator: Agent
    """
    The agent responsible for the operation represented by this event.

    This is **not** necessarily the creator of the submission.
    """

    created: Optional[datetime] = field(default=None)
    """The timestamp when the event was originally committed."""

    proxy: Optional[Agent] = field(default=None)
    """The agent who facilitated the operation on behalf of the creator."""

    client: Optional[Agent] = field(default=None)
    """The client through which the :attr:`.creator` acted."""

    submission_id: Optional[int] = field(default=None)
    """
    The primary identifier of the submission being operated upon.

    This is defined as optional to support creation events, and to facilitate
    chaining of events with creation events in the same transaction.
    """

    committed: bool = field(default=False)
    """
    Indicates whether the event has been committed to the database.

    This should generally not be set from outside this package.
    """

    before: Optional[Submission] = None
    """The state of the submission prior to the event."""

    after: Optional[Submission] = None
    """The state of the submission after the event."""

    event_type: str = field(default_factory=str)
    event_version: str = field(default_factory=str)

    _hooks: ClassVar[Mapping[type, List[Rule]]] = defaultdict(list)

    def __post_init__(self) -> None:
        """Make sure data look right."""
        self.event_type = self.get_event_type()
        if not self.event_version:
            self.event_version = self.get_event_version()
        self.created = coerce_datetime(self.created)
        if self.client and isinstance(self.client, dict):
            self.client = agent_factory(**self.client)
        if self.creator and isinstance(self.creator, dict):
            self.creator = agent_factory(**self.creator)
        if self.proxy and isinstance(self.proxy, dict):
            self.proxy = agent_factory(**self.proxy)
        if self.before and isinstance(self.before, dict):
            self.before = Submission(**self.before)
        if self.after and isinstance(self.after, dict):
            self.after = Submission(**self.after)

    @staticmethod
    def get_event_version() -> str:
        return str(get_application_config().get('CORE_VERSION', '0.0.0'))

    @classmethod
    def get_event_type(cls) -> str:
        """Get the name of the event type."""
        return cls.__name__

    @property
    def event_id(self) -> str:
        """Unique ID for this event."""
        if not self.created:
            raise RuntimeError('Event not yet committed')
        return self.get_id(self.created, self.event_type, self.creator)

    @staticmethod
    def get_id(created: datetime, event_type: str, creator: Agent) -> str:
        h = hashlib.new('sha1')
        h.update(b'%s:%s:%s' % (created.isoformat().encode('utf-8'),
                                event_type.encode('utf-8'),
                                creator.agent_identifier.encode('utf-8')))
        return h.hexdigest()

    def apply(self, submission: Optional[Submission] = None) -> Submission:
        """Apply the projection for this :class:`.Event` instance."""
        self.before = copy.deepcopy(submission)
        # CreateSubmission is the only event that accepts ``None``.
        self.validate(submission)    # type: ignore
        if submission is not None:
            self.after = self.project(copy.deepcopy(submission))
        else:
            self.after = self.project(None)    # type: ignore
        assert self.after is not None
        self.after.updated = self.created

        # Make sure that the submission has its own ID, if we know what it is.
        if self.after.submission_id is None and self.submission_id is not None:
            self.after.submission_id = self.submission_id
        if self.submission_id is None and self.after.submission_id is not None:
            self.submission_id = self.after.submission_id
        return self.after

    @classmethod
    def bind(cls, condition: Optional[Condition] = None) -> Decorator:
        """
        Generate a decorator to bind a callback to an event type.

        To register a function that will be called whenever an event is
        committed, decorate it like so:

        .. code-block:: python

           @MyEvent.bind()
           def say_hello(event: MyEvent, before: Submission,
                         after: Submission, creator: Agent) -> Iterable[Event]:
               yield SomeOtherEvent(creator=creator, ...)

        The callback function will be passed the event that triggered it, the
        state of the submission before and after the triggering event was
        applied, and a :class:`.System` agent that should be used as the
        creator of subsequent events. It should return an iterable of other
        :class:`.Event` instances, either by yielding them, or by returning an
        iterable object of some kind.

        By default, callbacks will only be called if the creator of the
        trigger event is not a :class:`.System` instance. This makes it less
        easy to define infinite chains of callbacks. A custom condition with
        the signature ``(event, before, after) -> bool`` may be passed
        instead.

        Parameters
        ----------
        condition : Callable
            If this callable returns ``True``, the callback will be triggered
            when the event to which it is bound is saved.

        Returns
        -------
        Callable
            Decorator for a callback function.

        """
        if condition is None:
            def _creator_is_not_system(e: Event, *ar: Any, **kw: Any) -> bool:
                return type(e.creator) is not System
            condition = _creator_is_not_system

        def decorator(func: Callback) -> Callback:
            """Register a callback for an event type and condition."""
            name = f'{cls.__name__}::{func.__module__}.{func.__name__}'
            sys = System(name)

            @wraps(func)
            def do(event: Event, before: Submission, after: Submission,
                   creator: Agent = sys, **kwargs: Any) -> Iterable['Event']:
                """Perform the callback."""
                return func(event, before, after, creator)

            assert condition is not None
            cls._add_callback(condition, do)
            return do
        return decorator

    @classmethod
    def _add_callback(cls: Type['Event'], condition: Condition,
                      callback: Callback) -> None:
        cls._hooks[cls].append((condition, callback))

    def _get_callbacks(self) -> Iterable[Tuple[Condition, Callback]]:
        return ((condition, callback) for cls in type(self).__mro__[::-1]
                for condition, callback in self._hooks[cls])

    def _should_apply_callbacks(self) -> bool:
        config = get_application_config()
        return bool(int(config.get('ENABLE_CALLBACKS', '0')))

    def validate(self, submission: Submission) -> None:
        """Validate this event and its data against a submission."""
        raise NotImplementedError('Must be implemented by subclass')

    def project(self, submission: Submission) -> Submission:
        """Apply this event and its data to a submission."""
        raise NotImplementedError('Must be implemented by subclass')

    def commit(self, store: Store) -> Tuple[Submission, List['Event']]:
        """
        Persist this event instance using an injected store method.

        Parameters
        ----------
        store : Callable
            Should have signature ``(event, before, after) ->
            Tuple[Event, Submission]``.

        Returns
        -------
        :class:`Submission`
            State of the submission after storage, and after any events
            generated by callbacks have been applied.
        list
            Items are :class:`Event` instances generated by callbacks.

        """
        assert self.after is not None
        _, self.after = store(self, self.before, self.after)
        self.committed = True
        if not self._should_apply_callbacks():
            return self.after, []
        consequences: List[Event] = []
        for condition, callback in self._get_callbacks():
            assert self.after is not None
            if condition(self, self.before, self.after):
                for consequence in callback(self, self.before, self.after):
                    consequence.created = get_tzaware_utc_now()
                    logger.debug('%s generated %s', self.event_type,
                                 consequence.event_type)
                    self.after = consequence.apply(self.after)
                    consequences.append(consequence)
                    self.after, addl_consequences = consequence.commit(store)
                    consequences.extend(addl_consequences)
        assert self.after is not None
        return self.after, consequences


def _get_subclasses(klass: Type[Event]) -> List[Type[Event]]:
    _subclasses = klass.__subclasses__()
    if _subclasses:
        return _subclasses + [sub for klass in _subclasses
                              for sub in _get_subclasses(klass)]
    return _subclasses


def event_factory(event_type: str, created: datetime, **data: Any) -> Event:
    """
    Generate an :class:`Event` instance from raw event data.

    Parameters
    ----------
    event_type : str
        Should be the name of a :class:`.Event` subclass.
    created : datetime
        When the event was committed.
    data : kwargs
        Keyword parameters passed to the event constructor.

    Returns
    -------
    :class:`.Event`
        An instance of an :class:`.Event` subclass.

    """
    etypes = {klas.get_event_type(): klas for klas in _get_subclasses(Event)}
    if event_type not in etypes:
        raise RuntimeError('Unknown event type: %s' % event_type)
    klass = etypes[event_type]
    data = {k: v for k, v in data.items()
            if k in klass.__dataclass_fields__ and k != 'event_type'}
    data['created'] = created
    return klass(**data)
