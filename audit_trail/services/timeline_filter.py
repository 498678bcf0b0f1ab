"""Timeline Filter - 取得済み監査ログの絞り込みと日別グルーピング

フィルター入力が変わるたびに全件を再計算する。デコード結果はキャッシュせず、
1回の絞り込みパスの中でだけ各エントリを1度デコードする。
"""

from __future__ import annotations

from datetime import date

from audit_trail.domain.models import (
    NO_FILLED_BY,
    DecodedDetails,
    LogDomain,
    LogEntry,
    TimelineFilters,
)
from audit_trail.services.date_normalizer import extract_dates, normalize_date
from audit_trail.services.details_decoder import decode


class _DecodePass:
    """1回の絞り込みパスの間だけ有効なデコード結果の置き場"""

    def __init__(self) -> None:
        self._decoded: dict[int, DecodedDetails] = {}

    def __call__(self, entry: LogEntry) -> DecodedDetails:
        key = id(entry)
        if key not in self._decoded:
            self._decoded[key] = decode(entry.details)
        return self._decoded[key]


def _matches_booking_date(
    entry: LogEntry, decoded: DecodedDetails, normalized: str, original: str
) -> bool:
    # 排班記錄は預約日期を持たない
    if entry.domain is LogDomain.COACH_ASSIGNMENT:
        return False
    if not entry.details:
        return False
    if decoded.booking_date and normalized in decoded.booking_date:
        return True
    for item in decoded.booking_list or []:
        if normalized in item or normalized in extract_dates(item):
            return True
    return normalized in entry.details or original in entry.details


def _matches_filled_by(entry: LogEntry, decoded: DecodedDetails, selected: str) -> bool:
    # 排班記錄には填表人がないので、特定の填表人を選んだら除外する
    if entry.domain is LogDomain.COACH_ASSIGNMENT:
        return False
    if selected == NO_FILLED_BY:
        return not decoded.filled_by
    return decoded.filled_by == selected


def _matches_query(entry: LogEntry, decoded: DecodedDetails, query: str) -> bool:
    candidates = (
        entry.details,
        entry.actor_email,
        decoded.filled_by,
        decoded.member,
        decoded.boat,
        decoded.time,
        decoded.coach,
        decoded.driver,
        decoded.activity_types,
        decoded.notes,
    )
    return any(value and query in value.lower() for value in candidates)


def filter_entries(entries: list[LogEntry], filters: TimelineFilters) -> list[LogEntry]:
    """
    預約日期 → 填表人 → キーワード の順でフィルターを適用する。

    Args:
        entries: created_at 降順の監査ログ
        filters: 画面のフィルター入力

    Returns:
        list[LogEntry]: 条件を満たすエントリ（元の順序を保持）
    """
    decoded = _DecodePass()
    filtered = list(entries)

    booking_date = filters.booking_date.strip()
    if booking_date:
        normalized = normalize_date(booking_date)
        filtered = [
            e
            for e in filtered
            if _matches_booking_date(e, decoded(e), normalized, booking_date)
        ]

    if filters.filled_by is not None:
        filtered = [
            e for e in filtered if _matches_filled_by(e, decoded(e), filters.filled_by)
        ]

    query = filters.query.strip().lower()
    if query:
        filtered = [e for e in filtered if _matches_query(e, decoded(e), query)]

    return filtered


def group_by_day(entries: list[LogEntry]) -> list[tuple[date, list[LogEntry]]]:
    """
    created_at の日付で分け、新しい日から並べる。

    日内の順序は入力順のまま。created_at のないエントリは除外する。
    """
    groups: dict[date, list[LogEntry]] = {}
    for entry in entries:
        if entry.created_at is None:
            continue
        groups.setdefault(entry.created_at.date(), []).append(entry)
    return sorted(groups.items(), key=lambda item: item[0], reverse=True)


def filter_and_group(
    entries: list[LogEntry], filters: TimelineFilters
) -> list[tuple[date, list[LogEntry]]]:
    """filter_entries() と group_by_day() をまとめて適用する"""
    return group_by_day(filter_entries(entries, filters))


def filled_by_options(entries: list[LogEntry]) -> list[str]:
    """
    填表人フィルターの選択肢。

    預約のエントリから重複なしで昇順に並べ、填表人のないエントリがあれば
    先頭に NO_FILLED_BY を置く。
    """
    names: set[str] = set()
    has_empty = False
    for entry in entries:
        if entry.domain is LogDomain.COACH_ASSIGNMENT:
            continue
        filled_by = decode(entry.details).filled_by if entry.details else None
        if filled_by:
            names.add(filled_by)
        else:
            has_empty = True

    options = sorted(names)
    if has_empty:
        options.insert(0, NO_FILLED_BY)
    return options
