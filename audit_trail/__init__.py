"""Audit Trail - 予約監査ログのデコードと検索

画面側から使う関数:
    decode(details)                 details 文字列 → DecodedDetails
    normalize_date(fragment)        日付の表記ゆれ → MM/DD
    merge_ranges(ranges)            教練の不在期間をまとめる
    filter_and_group(entries, f)    絞り込み → 日別グルーピング
"""

from audit_trail.services import (
    AuditTimelineService,
    decode,
    filled_by_options,
    filter_and_group,
    merge_ranges,
    normalize_date,
)

__all__ = [
    "decode",
    "normalize_date",
    "merge_ranges",
    "filter_and_group",
    "filled_by_options",
    "AuditTimelineService",
]
