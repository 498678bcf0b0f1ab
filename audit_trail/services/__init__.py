"""Services layer - デコード・絞り込み・まとめ処理"""

from audit_trail.services.date_normalizer import normalize_date
from audit_trail.services.details_decoder import decode
from audit_trail.services.range_merger import merge_ranges, merge_ranges_by_coach
from audit_trail.services.timeline_filter import (
    filled_by_options,
    filter_and_group,
    filter_entries,
    group_by_day,
)
from audit_trail.services.timeline_service import AuditTimelineService

__all__ = [
    "decode",
    "normalize_date",
    "merge_ranges",
    "merge_ranges_by_coach",
    "filter_entries",
    "group_by_day",
    "filter_and_group",
    "filled_by_options",
    "AuditTimelineService",
]
