"""Persistence for submission events."""

import copy
from datetime import datetime
from typing import Any, Dict

from dataclasses import asdict
from pytz import UTC

from sqlalchemy import Column, String, ForeignKey
from sqlalchemy.ext.indexable import index_property
from sqlalchemy.orm import relationship

from ...domain.event import Event, event_factory
from .models import Base
from .util import FriendlyJSON, PreciseDateTime


class DBEvent(Base):  # type: ignore
    """Database representation of an :class:`.Event`."""

    __tablename__ = 'submission_events'

    event_id = Column(String(40), primary_key=True)
    event_type = Column(String(255), index=True)
    event_version = Column(String(20), default='0.0.0')
    proxy = Column(FriendlyJSON)
    proxy_id = index_property('proxy', 'agent_identifier')
    client = Column(FriendlyJSON)
    client_id = index_property('client', 'agent_identifier')

    creator = Column(FriendlyJSON)
    creator_id = index_property('creator', 'agent_identifier')

    created = Column(PreciseDateTime, index=True)
    data = Column(FriendlyJSON)
    submission_id = Column(
        ForeignKey('submissions.submission_id'),
        index=True
    )

    submission = relationship("Submission")

    _skip = ['creator', 'proxy', 'client', 'submission_id', 'created',
             'event_type', 'event_version', 'before', 'after', 'committed']

    @staticmethod
    def event_data(event: Event) -> Dict[str, Any]:
        """
        Get the data of an :class:`.Event` for storage.

        The submission states before and after the event are left out; they
        can be regenerated by playing the events forward.
        """
        snapshot = copy.copy(event)
        snapshot.before = None
        snapshot.after = None
        data = asdict(snapshot)
        data.pop('before')
        data.pop('after')
        return data

    def to_event(self) -> Event:
        """
        Instantiate an :class:`.Event` using event data from this instance.

        Returns
        -------
        :class:`.Event`

        """
        data = {
            key: value for key, value in self.data.items()
            if key not in self._skip
        }
        data['committed'] = True     # Since we're loading from the DB.
        return event_factory(
            self.event_type,
            creator=self.creator,
            proxy=self.proxy,
            client=self.client,
            submission_id=self.submission_id,
            created=self.get_created(),
            event_version=self.event_version,
            **data
        )

    def get_created(self) -> datetime:
        """Get the UTC-localized creation time for this event."""
        return self.created.replace(tzinfo=UTC)
