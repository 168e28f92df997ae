"""Helpers for event classes."""

from typing import Any, Callable

from dataclasses import dataclass as base_dataclass


def event_hash(instance: Any) -> int:
    """Events are identified by :attr:`.Event.event_id`."""
    return hash(instance.event_id)


def event_eq(instance: Any, other: Any) -> bool:
    """Two events are the same event if they have the same id."""
    if not hasattr(other, 'event_id'):
        return False
    return instance.event_id == other.event_id


def dataclass(**kwargs: Any) -> Callable[[type], type]:
    """Make an event class a dataclass that is hashed on its id."""
    def inner(cls: type) -> type:
        new_cls = base_dataclass(**kwargs)(cls)
        setattr(new_cls, '__hash__', event_hash)
        setattr(new_cls, '__eq__', event_eq)
        return new_cls
    return inner
