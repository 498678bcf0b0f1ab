"""ドメインモデル - 外部依存なしのデータ構造"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

# 填表人が記録されていないエントリを選択するための番兵値
NO_FILLED_BY = "（無填表人）"


class Action(Enum):
    """監査ログの操作種別（粗いカテゴリ）"""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class LogDomain(Enum):
    """監査ログの対象テーブル"""

    BOOKINGS = "bookings"
    COACH_ASSIGNMENT = "coach_assignment"


class OperationFilter(Enum):
    """取得時の操作種別フィルター"""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    SCHEDULE = "schedule"


@dataclass(frozen=True)
class LogEntry:
    """監査ログ1行（Log Source から取得、読み取り専用）"""

    id: int
    action: Action
    domain: LogDomain
    details: str | None = None  # 例: "新增預約：2025/11/20 14:45 60分 G23 小楊 | 小胖教練"
    actor_email: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class DecodedDetails:
    """details 文字列から復元した構造化フィールド（永続化しない）"""

    raw_text: str  # 元の details そのまま
    member: str | None = None
    boat: str | None = None
    coach: str | None = None  # 複数は "/" 区切り
    driver: str | None = None
    time: str | None = None  # 例: "2025/11/20 14:45" or "04/03 08:30"
    booking_date: str | None = None  # MM/DD
    duration: str | None = None  # 例: "60分"
    activity_types: str | None = None  # 例: "WB+WS"
    notes: str | None = None
    change_summary: str | None = None
    filled_by: str | None = None
    booking_list: list[str] | None = None
    total_count: int | None = None


@dataclass(frozen=True)
class TimeOffRange:
    """教練の不在期間"""

    id: int
    coach_id: str
    start_date: date
    end_date: date
    reason: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class MergedTimeOffRange:
    """連続した不在期間をまとめた表示用レンジ"""

    id: int  # グループ先頭のレンジID
    coach_id: str
    start_date: date
    end_date: date
    display_text: str  # 例: "3/10 - 3/12" or "3/10"
    reason: str | None = None
    source_ids: list[int] = field(default_factory=list)


@dataclass(frozen=True)
class LogQuery:
    """Log Source への取得条件"""

    start_date: date
    end_date: date  # この日の 23:59:59 まで含む
    operation: OperationFilter | None = None  # None = すべて


@dataclass(frozen=True)
class TimelineFilters:
    """取得済みエントリに対するクライアント側フィルター"""

    booking_date: str = ""  # 例: "04/03", "0403", "2025-4-3"
    filled_by: str | None = None  # None = すべて, NO_FILLED_BY = 填表人なし
    query: str = ""
