from .errors import InvalidInput, UnexpectedFailure, UpstreamUnavailable, WaybackError
from .models import (
    MessagingEvolution,
    PageSignals,
    ShiftResult,
    Snapshot,
    WaybackResponse,
    YearGroup,
    YearMessaging,
)

__all__ = [
    "InvalidInput",
    "UnexpectedFailure",
    "UpstreamUnavailable",
    "WaybackError",
    "MessagingEvolution",
    "PageSignals",
    "ShiftResult",
    "Snapshot",
    "WaybackResponse",
    "YearGroup",
    "YearMessaging",
]
