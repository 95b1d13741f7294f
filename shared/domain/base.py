"""
Base Domain Classes

Building blocks shared by the booking engine's domain layer:
- Entity: objects with identity
- ValueObject: immutable objects compared by value
- Aggregate: consistency boundary that records domain events
- DomainEvent: something that happened, published after commit
"""

from abc import ABC
from dataclasses import dataclass, field, fields
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, List
from uuid import UUID, uuid4


@dataclass(kw_only=True)
class Entity(ABC):
    """
    Base class for entities

    Two entities are equal when their IDs are equal, whatever their state.
    """
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.now)

    def __eq__(self, other):
        if not isinstance(other, self.__class__):
            return False
        return self.id == other.id

    def __hash__(self):
        return hash(self.id)


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects

    Immutable, no identity, equal when all attributes are equal.
    """
    pass


@dataclass(eq=False, kw_only=True)
class Aggregate(Entity):
    """
    Base class for aggregate roots

    Events are collected here and handed to the unit of work, which
    publishes them only once the surrounding transaction has committed.
    """
    _events: List['DomainEvent'] = field(default_factory=list, repr=False, init=False, compare=False)

    def add_event(self, event: 'DomainEvent'):
        self._events.append(event)

    def clear_events(self):
        self._events.clear()

    @property
    def events(self) -> List['DomainEvent']:
        """Copy of the pending events"""
        return self._events.copy()


def _serialize(value: Any) -> Any:
    if isinstance(value, (UUID, Decimal)):
        return str(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, ValueObject):
        return {f.name: _serialize(getattr(value, f.name)) for f in fields(value)}
    return value


@dataclass(kw_only=True)
class DomainEvent:
    """
    Base class for domain events

    Subclasses add their payload as extra dataclass fields; ``to_dict``
    flattens them next to the envelope for logging and transport.
    """
    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=datetime.now)
    aggregate_id: UUID = None

    def to_dict(self) -> dict:
        payload = {
            'event_id': str(self.event_id),
            'event_type': self.__class__.__name__,
            'occurred_at': self.occurred_at.isoformat(),
            'aggregate_id': str(self.aggregate_id) if self.aggregate_id else None,
        }
        for f in fields(self):
            if f.name not in payload:
                payload[f.name] = _serialize(getattr(self, f.name))
        return payload
