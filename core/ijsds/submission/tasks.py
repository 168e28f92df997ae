"""Provides support for asynchronous tasks."""

from datetime import timedelta
from typing import Callable, Iterable, Optional
from functools import wraps

from celery import Celery, Task

from . import logging
from .context import get_application_config, get_application_global
from .domain.submission import Submission
from .domain.event import Event
from .domain.agent import Agent
from .core import save
from .exceptions import NothingToDo
from . import config

logger = logging.getLogger(__name__)
logger.propagate = False


def create_worker_app() -> Celery:
    """Initialize the worker application."""
    result_backend = config.RESULT_BACKEND
    broker = config.BROKER_URL
    celery_app = Celery('submission',
                        backend=result_backend,
                        broker=broker)
    celery_app.conf.update(
        accept_content=['ejson'],
        task_serializer='ejson',
        result_serializer='ejson',
        task_default_queue=config.QUEUE_NAME,
        worker_prefetch_multiplier=config.PREFETCH_MULTIPLIER,
        task_acks_late=config.TASK_ACKS_LATE
    )
    return celery_app


def get_or_create_worker_app() -> Celery:
    """
    Get the current worker app, or create one.

    Uses the Flask application global to keep track of the worker app.
    """
    g = get_application_global()
    if not g:
        return _worker_app
    if 'worker' not in g:
        g.worker = _worker_app
    return g.worker


_worker_app = create_worker_app()


def name_for_callback(func: Callable) -> str:
    """Produce a name for a function suitable for use as a task name."""
    parent = func.__module__.split('.')[-1]
    return f'{parent}.{func.__name__}'


def is_async(func: Callable) -> Callable:
    """
    Turn a function into an asynchronous task.

    Registers the function with the worker application, and decorates the
    function with logic to dispatch the function to the worker when called.
    When the decorated function is called, a task is added to the worker queue
    and an empty iterable is returned. If ``ENABLE_ASYNC=0`` on the app config,
    calls to the decorated function will execute in-thread and return normally.
    """
    worker_app = get_or_create_worker_app()
    name = name_for_callback(func)

    @wraps(func)
    def do_callback(self: Task, event: Event, before: Submission,
                    after: Submission, creator: Agent) -> None:
        """Run the callback, and save the results."""
        try:
            save(*func(event, before, after, creator, task_id=self.request.id),
                 submission_id=after.submission_id)
        except NothingToDo as e:
            logger.debug('No events to save, move along: %s', e)

    # Register the wrapped callback.
    worker_app.task(name=name, bind=True)(do_callback)

    @wraps(func)
    def execute_callback(event: Event, before: Submission,
                         after: Submission, creator: Agent) -> Iterable[Event]:
        """Execute the callback asynchronously."""
        config = get_application_config()
        if bool(int(config.get('ENABLE_ASYNC', '0'))):
            worker_app = get_or_create_worker_app()
            worker_app.send_task(name, (event, before, after, creator))
            return []
        return func(event, before, after, creator)
    return execute_callback


def is_periodic(hours: int) -> Callable[[Callable], Callable]:
    """
    Register a function as a task that the worker runs every ``hours``.

    The function is called without arguments by the scheduler. It is returned
    undecorated, so that it can still be called in-thread.
    """
    def decorator(func: Callable) -> Callable:
        worker_app = get_or_create_worker_app()
        name = name_for_callback(func)

        def do_periodic(*args: object) -> Optional[object]:
            logger.debug('Run periodic task %s', name)
            return func(*args)

        task = worker_app.task(name=name)(do_periodic)
        worker_app.add_periodic_task(timedelta(hours=hours), task.s(),
                                     name=name)
        return func
    return decorator
