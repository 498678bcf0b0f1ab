"""Domain layer - 外部依存なしのドメインモデルとインターフェース定義"""

from audit_trail.domain.errors import (
    AuditTrailError,
    LogFetchError,
    TimeOffFetchError,
)
from audit_trail.domain.models import (
    NO_FILLED_BY,
    Action,
    DecodedDetails,
    LogDomain,
    LogEntry,
    LogQuery,
    MergedTimeOffRange,
    OperationFilter,
    TimelineFilters,
    TimeOffRange,
)
from audit_trail.domain.ports import AuditLogSource, TimeOffSource

__all__ = [
    # Models
    "NO_FILLED_BY",
    "Action",
    "LogDomain",
    "OperationFilter",
    "LogEntry",
    "DecodedDetails",
    "TimeOffRange",
    "MergedTimeOffRange",
    "LogQuery",
    "TimelineFilters",
    # Errors
    "AuditTrailError",
    "LogFetchError",
    "TimeOffFetchError",
    # Ports
    "AuditLogSource",
    "TimeOffSource",
]
