"""タイムライン表示用のラベル・要約・期間プリセット"""

from __future__ import annotations

import re
from datetime import date, timedelta

from audit_trail.domain.models import (
    Action,
    DecodedDetails,
    LogDomain,
    LogEntry,
    LogQuery,
    OperationFilter,
)

_ACTION_LABELS = {
    Action.CREATE: "新增",
    Action.UPDATE: "修改",
    Action.DELETE: "刪除",
}

_BATCH_PREFIXES = ("批次修改", "批次刪除", "重複預約")

_WEEKDAYS = ("一", "二", "三", "四", "五", "六", "日")  # date.weekday() 順

_QUICK_RANGE_DAYS = {
    "today": 0,
    "7days": 7,
    "30days": 30,
    "90days": 90,
}

_PREVIEW_RE = re.compile(r"^(.+?)\s*\((\d{1,2}/\d{1,2})")

_ASSIGNMENT_PREFIX = "教練排班: "


def operation_label(entry: LogEntry) -> str:
    """エントリの操作名（排班 / 批次修改 / 新增預約 など）"""
    if entry.domain is LogDomain.COACH_ASSIGNMENT:
        return "排班"
    details = entry.details or ""
    for prefix in _BATCH_PREFIXES:
        if details.startswith(prefix):
            return prefix
    return _ACTION_LABELS.get(entry.action, _ACTION_LABELS[Action.UPDATE]) + "預約"


def format_day_header(day: date, today: date) -> str:
    """日別グループの見出し: "今天 04/03" / "昨天 04/02" / "04/01 (二)" """
    month_day = f"{day.month:02d}/{day.day:02d}"
    if day == today:
        return f"今天 {month_day}"
    if day == today - timedelta(days=1):
        return f"昨天 {month_day}"
    return f"{month_day} ({_WEEKDAYS[day.weekday()]})"


def _booking_preview(item: str) -> str:
    """"Ming (04/03 08:30)" → "Ming 04/03" """
    match = _PREVIEW_RE.match(item)
    if match:
        return f"{match.group(1)} {match.group(2)}"
    return item[:15]


def entry_summary(entry: LogEntry, decoded: DecodedDetails) -> str:
    """
    タイムラインの1行要約。

    - 排班: details から "教練排班: " を除いたもの
    - 批次: 筆數 · 變更內容 · [先頭2件のプレビュー +残り件数]
    - 修改: 時間 · 會員 · 改<変更項目>
    - その他: 時間 · 船 · 會員 · <教練>教練
    """
    details = entry.details or ""
    if entry.domain is LogDomain.COACH_ASSIGNMENT:
        return details.replace(_ASSIGNMENT_PREFIX, "") or "排班調整"

    if details.startswith(("批次修改", "批次刪除")):
        parts: list[str] = []
        if decoded.member:
            parts.append(decoded.member)
        if decoded.change_summary:
            parts.append(decoded.change_summary)
        if decoded.booking_list:
            previews = ", ".join(_booking_preview(i) for i in decoded.booking_list[:2])
            rest = len(decoded.booking_list) - 2
            more = f" +{rest}" if rest > 0 else ""
            parts.append(f"[{previews}{more}]")
        if parts:
            return " · ".join(parts)
        return "刪除" if details.startswith("批次刪除") else "修改"

    if entry.action is Action.UPDATE and decoded.change_summary:
        parts = [p for p in (decoded.time, decoded.member) if p]
        parts.append(f"改{decoded.change_summary}")
        return " · ".join(parts)

    parts = [p for p in (decoded.time, decoded.boat, decoded.member) if p]
    if decoded.coach:
        parts.append(f"{decoded.coach}教練")
    return " · ".join(parts) or operation_label(entry)


def quick_range(
    preset: str, today: date, operation: OperationFilter | None = None
) -> LogQuery:
    """
    期間プリセットから取得条件を作る。

    Args:
        preset: "today" | "7days" | "30days" | "90days"
        today: 基準日（終了日になる）
        operation: 操作種別フィルター

    Raises:
        ValueError: 未知のプリセット
    """
    if preset not in _QUICK_RANGE_DAYS:
        raise ValueError(f"Unknown date range preset: {preset}")
    start = today - timedelta(days=_QUICK_RANGE_DAYS[preset])
    return LogQuery(start_date=start, end_date=today, operation=operation)


def default_query(today: date, days: int = 7) -> LogQuery:
    """画面を開いたときの既定の取得条件（直近 days 日）"""
    return LogQuery(start_date=today - timedelta(days=days), end_date=today)
