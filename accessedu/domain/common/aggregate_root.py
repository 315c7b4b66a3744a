"""
Base class for Aggregate Roots.

Aggregate Roots are the entry point to an aggregate. All invariants are
enforced here, and state changes can be recorded as domain events.
"""

from dataclasses import dataclass, field
from typing import Generic

from .domain_event import DomainEvent
from .entity import Entity, IdType


@dataclass
class AggregateRoot(Entity[IdType], Generic[IdType]):
    """
    Base class for Aggregate Roots in the domain model.

    Domain events are collected on the aggregate and can be drained
    by the caller after the aggregate is persisted.
    """

    _events: list[DomainEvent] = field(
        default_factory=list, repr=False, compare=False, kw_only=True
    )

    def _record_event(self, event: DomainEvent) -> None:
        """Record a domain event to be dispatched later."""
        self._events.append(event)

    def collect_events(self) -> list[DomainEvent]:
        """Collect and clear all recorded domain events."""
        events = self._events.copy()
        self._events.clear()
        return events

    @property
    def pending_events(self) -> list[DomainEvent]:
        """Return pending events without clearing them."""
        return self._events.copy()
