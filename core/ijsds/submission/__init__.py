"""
Core event-centric data abstraction for the journal's editorial workflow.

This package provides an event-based API for mutating submissions. Instead of
representing manuscripts as objects and mutating them directly in web
controllers and other places, we represent a submission as a stream of
commands or events. This gives us a precise and complete record of what
happened to a manuscript on its way from the authors, through peer review and
editorial decision, to publication.

Overview
========

Event types are defined in :mod:`.domain.event`. The base class for all events
is :class:`.domain.event.base.Event`. Each event type defines additional
required data, and has ``validate`` and ``project`` methods that implement its
logic. Events operate on :class:`.domain.submission.Submission` instances.

.. code-block:: python

   from ijsds.submission import CreateSubmission, User
   user = User('9f1c', 'joe@uni.edu', roles=[User.AUTHOR])
   creation = CreateSubmission(creator=user)


:mod:`.core` defines the persistence API for submission data.
:func:`.core.save` is used to commit new events. :func:`.core.load` retrieves
events for a submission and plays them forward to get the current state,
whereas :func:`.core.load_fast` retrieves the latest projected state of the
submission (faster, theoretically less reliable).

.. code-block:: python

   from ijsds.submission import save, SetTitle
   submission, events = save(creation, SetTitle(creator=user, title='Title!'))


Watch out for :class:`.exceptions.InvalidEvent` to catch validation-related
problems (e.g. bad data, submission in wrong state). Watch for
:class:`.SaveError` to catch problems with persisting events.

Callbacks can be attached to event types in order to execute routines
automatically when specific events are committed, using
:func:`.domain.Event.bind`. The callbacks that ship with this package (e-mail
notifications, DOI registration) are defined in :mod:`.rules`.

Tools that help editors run peer review (reviewer matching, conflict of
interest checks, review quality scores) are in :mod:`.reviewers`; these are
plain functions that do not change submission state on their own.

"""
import os

from flask import Flask, Blueprint

from .domain.event import *
from .core import *
from .domain.submission import Submission, ArticleMetadata, Author
from .domain.agent import Agent, User, System, Client
from .domain import workflow
from .services import store, Functions


def init_app(app: Flask) -> None:
    """Configure an application to use the submission core."""
    core.init_app(app)
    Functions.init_app(app)
    app.config.setdefault('EMAIL_ENABLED', 1)
    app.config.setdefault('AUTO_REGISTER_DOI', 0)
    template_folder = os.path.join(os.path.dirname(os.path.realpath(__file__)),
                                   'templates')
    if 'submission-core' not in app.blueprints:
        app.register_blueprint(
            Blueprint('submission-core', __name__,
                      template_folder=template_folder)
        )
