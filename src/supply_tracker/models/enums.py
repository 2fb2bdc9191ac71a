from enum import IntEnum


class Classification(IntEnum):
    """Sensitivity tag on equipment. Display only, no access control."""

    UNCLASSIFIED = 0
    RESTRICTED = 1
    CONFIDENTIAL = 2
    SECRET = 3


class Priority(IntEnum):
    LOW = 1
    NORMAL = 2
    HIGH = 3
    CRITICAL = 4


class RequestStatus(IntEnum):
    PENDING = 0
    APPROVED = 1
    FULFILLED = 2
    DENIED = 3


class StockStatus(IntEnum):
    """Derived urgency; higher value = more urgent."""

    OK = 0
    WATCH = 1
    LOW = 2


# Allowed request status changes: PENDING -> {APPROVED, DENIED} -> FULFILLED
REQUEST_TRANSITIONS = {
    RequestStatus.PENDING: {RequestStatus.APPROVED, RequestStatus.DENIED},
    RequestStatus.APPROVED: {RequestStatus.FULFILLED},
    RequestStatus.FULFILLED: set(),
    RequestStatus.DENIED: set(),
}
