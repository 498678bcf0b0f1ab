"""教練の不在期間を表示用にまとめる"""

from __future__ import annotations

from collections import defaultdict
from datetime import date

from audit_trail.domain.models import MergedTimeOffRange, TimeOffRange

# 前のレンジの終了日と次の開始日の差がこの日数以内なら連続とみなす
MAX_GAP_DAYS = 1


def _reason_key(reason: str | None) -> str | None:
    """空文字列の理由は「理由なし」と同じ扱い"""
    if reason is None:
        return None
    return reason.strip() or None


def _short_date(value: date) -> str:
    return f"{value.month}/{value.day}"


def format_range(start: date, end: date) -> str:
    """"3/10 - 3/12"。開始と終了が同じ日なら "3/10" """
    if start == end:
        return _short_date(start)
    return f"{_short_date(start)} - {_short_date(end)}"


def _close(group: list[TimeOffRange], end: date) -> MergedTimeOffRange:
    first = group[0]
    return MergedTimeOffRange(
        id=first.id,
        coach_id=first.coach_id,
        start_date=first.start_date,
        end_date=end,
        display_text=format_range(first.start_date, end),
        reason=first.reason,
        source_ids=[r.id for r in group],
    )


def merge_ranges(ranges: list[TimeOffRange]) -> list[MergedTimeOffRange]:
    """
    同じ理由で隣接（間隔1日以内）する不在期間を1つにまとめる。

    Args:
        ranges: 1人の教練の不在期間（順不同）

    Returns:
        list[MergedTimeOffRange]: 開始日昇順のまとめ済みレンジ
    """
    merged: list[MergedTimeOffRange] = []
    group: list[TimeOffRange] = []
    group_end: date | None = None

    for current in sorted(ranges, key=lambda r: r.start_date):
        if group and group_end is not None:
            head = group[0]
            joins = (
                current.coach_id == head.coach_id
                and _reason_key(current.reason) == _reason_key(head.reason)
                and (current.start_date - group_end).days <= MAX_GAP_DAYS
            )
            if joins:
                group.append(current)
                group_end = max(group_end, current.end_date)
                continue
            merged.append(_close(group, group_end))

        group = [current]
        group_end = current.end_date

    if group and group_end is not None:
        merged.append(_close(group, group_end))
    return merged


def merge_ranges_by_coach(
    ranges: list[TimeOffRange],
) -> dict[str, list[MergedTimeOffRange]]:
    """教練ごとに分けてから merge_ranges() を適用する"""
    by_coach: dict[str, list[TimeOffRange]] = defaultdict(list)
    for time_off in ranges:
        by_coach[time_off.coach_id].append(time_off)
    return {coach_id: merge_ranges(items) for coach_id, items in by_coach.items()}
