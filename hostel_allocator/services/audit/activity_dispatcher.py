"""
Activity events for bed allocation and release.

Events are handed to subscribed handlers after the change they describe has
been committed. A failing handler is logged and skipped; it never undoes or
blocks the allocation.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional
from uuid import uuid4

import structlog

from hostel_allocator.core.logging import actor_email, get_logger
from hostel_allocator.models.base.enums import ActivityAction

ActivityHandler = Callable[["ActivityEvent"], None]


@dataclass
class ActivityEvent:
    """One activity-log record."""

    action: ActivityAction
    target_registration_id: str
    target_application_id: str
    details: Dict[str, Any] = field(default_factory=dict)
    actor: Optional[str] = None
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    event_id: str = field(default_factory=lambda: str(uuid4()))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_id": self.event_id,
            "action": self.action.value,
            "target_registration_id": self.target_registration_id,
            "target_application_id": self.target_application_id,
            "details": self.details,
            "actor": self.actor,
            "occurred_at": self.occurred_at.isoformat(),
        }

    @classmethod
    def bed_assignment(
        cls,
        registration_id: str,
        application_id: str,
        name: str,
        hostel: str,
    ) -> "ActivityEvent":
        return cls(
            action=ActivityAction.BED_ASSIGNMENT,
            target_registration_id=registration_id,
            target_application_id=application_id,
            details={"name": name, "hostel": hostel},
            actor=actor_email.get(),
        )

    @classmethod
    def bed_unassignment(
        cls,
        registration_id: str,
        application_id: str,
        name: str,
    ) -> "ActivityEvent":
        return cls(
            action=ActivityAction.BED_UNASSIGNMENT,
            target_registration_id=registration_id,
            target_application_id=application_id,
            details={"name": name},
            actor=actor_email.get(),
        )


@dataclass
class DispatchResult:
    """Aggregated result of handing one event to every handler."""

    event: ActivityEvent
    delivered: int = 0
    failed: int = 0
    errors: List[str] = field(default_factory=list)


def log_activity(event: ActivityEvent) -> None:
    """Default handler: one structured log line per event."""
    structlog.get_logger("hostel_allocator.activity").info(
        event.action.value,
        **event.to_dict(),
    )


class ActivityDispatcher:
    """Fan-out of activity events to registered handlers."""

    def __init__(self, handlers: Optional[List[ActivityHandler]] = None):
        self._handlers: List[ActivityHandler] = list(handlers or [])
        self._logger = get_logger("hostel_allocator.services.ActivityDispatcher")

    @property
    def handlers(self) -> List[ActivityHandler]:
        return list(self._handlers)

    def dispatch(self, event: ActivityEvent) -> DispatchResult:
        result = DispatchResult(event=event)
        for handler in self._handlers:
            try:
                handler(event)
                result.delivered += 1
            except Exception as e:
                result.failed += 1
                result.errors.append(str(e))
                self._logger.error(
                    f"Activity handler failed: {e}",
                    exc_info=True,
                    extra={
                        "event_type": event.action.value,
                        "event_id": event.event_id,
                        "handler": getattr(handler, "__name__", repr(handler)),
                    },
                )
        return result


activity_dispatcher = ActivityDispatcher(handlers=[log_activity])


def get_activity_dispatcher() -> ActivityDispatcher:
    return activity_dispatcher
