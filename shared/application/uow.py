"""
Unit of Work Pattern

Wraps one database transaction and holds the domain events raised
inside it. Events reach the message bus only after the commit succeeds;
a rollback drops them.
"""

from abc import ABC, abstractmethod
from typing import List
import logging

from django.db import transaction

from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)


class AbstractUnitOfWork(ABC):
    """Abstract Unit of Work"""

    def __init__(self):
        self._events: List[DomainEvent] = []

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.commit()
        else:
            self.rollback()

    @abstractmethod
    def commit(self):
        pass

    def rollback(self):
        """Discard the collected events"""
        if self._events:
            logger.warning(f"Rolling back unit of work, discarding {len(self._events)} events")
        self._events.clear()

    def collect_events(self, aggregate):
        """
        Move pending events from an aggregate root into this unit of work
        """
        new_events = aggregate.events
        if new_events:
            self._events.extend(new_events)
            aggregate.clear_events()
            logger.debug(
                f"Collected {len(new_events)} events from "
                f"{aggregate.__class__.__name__} (ID: {aggregate.id})"
            )

    def _take_events(self) -> List[DomainEvent]:
        events = self._events.copy()
        self._events.clear()
        return events

    @staticmethod
    def _publish_events(events: List[DomainEvent]):
        from shared.application.message_bus import message_bus

        logger.info(f"Publishing {len(events)} domain events after commit")
        message_bus.publish_events(events)


class DjangoUnitOfWork(AbstractUnitOfWork):
    """
    Django implementation of Unit of Work

    Usage:
        with DjangoUnitOfWork() as uow:
            listing = Listing.objects.select_for_update().get(pk=listing_id)
            reservation = Reservation.open_pending(...)
            uow.collect_events(reservation)
            ...
        # transaction committed, events handed to transaction.on_commit()

    ``using`` selects the database alias. Nested use joins the outer
    transaction as a savepoint, like ``transaction.atomic``.
    """

    def __init__(self, using: str | None = None):
        super().__init__()
        self._transaction = transaction.atomic(using=using)
        self._using = using

    def __enter__(self):
        self._transaction.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            if exc_type is None:
                self.commit()
            else:
                self.rollback()
        finally:
            self._transaction.__exit__(exc_type, exc_val, exc_tb)

    def commit(self):
        """
        Schedule event publishing for after the outermost commit

        transaction.on_commit() drops the callback if the transaction is
        rolled back later, so events never describe data that was not saved.
        """
        events = self._take_events()
        logger.debug(f"Committing transaction with {len(events)} events")
        if events:
            transaction.on_commit(lambda: self._publish_events(events), using=self._using)
