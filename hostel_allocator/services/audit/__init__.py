from hostel_allocator.services.audit.activity_dispatcher import (
    ActivityDispatcher,
    ActivityEvent,
    DispatchResult,
    activity_dispatcher,
    get_activity_dispatcher,
    log_activity,
)

__all__ = [
    "ActivityDispatcher",
    "ActivityEvent",
    "DispatchResult",
    "activity_dispatcher",
    "get_activity_dispatcher",
    "log_activity",
]
