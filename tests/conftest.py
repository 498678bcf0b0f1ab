"""共通テストフィクスチャ

全テストから利用可能なモックオブジェクトとサンプルデータを提供。

モックの作成:
- MagicMock(spec=ABC) でABCのメソッドシグネチャを保持
"""

from datetime import date, datetime
from unittest.mock import MagicMock

import pytest
from audit_trail.domain.models import (
    Action,
    LogDomain,
    LogEntry,
    TimeOffRange,
)
from audit_trail.domain.ports import AuditLogSource, TimeOffSource

# ========== サンプルデータ ==========


@pytest.fixture
def create_entry() -> LogEntry:
    """新增預約（填表人あり）"""
    return LogEntry(
        id=101,
        action=Action.CREATE,
        domain=LogDomain.BOOKINGS,
        details="新增預約：2025/04/03 08:30 60分 G23 Ming | Papa教練 [WB+WS] (填表人: L)",
        actor_email="staff@example.com",
        created_at=datetime(2025, 4, 1, 10, 15),
    )


@pytest.fixture
def update_entry() -> LogEntry:
    """修改預約（填表人なし）"""
    return LogEntry(
        id=102,
        action=Action.UPDATE,
        domain=LogDomain.BOOKINGS,
        details="修改預約：2025/04/05 14:45 小楊，變更：時間: 14:00 → 14:45、船隻: G21 → G23",
        actor_email="admin@example.com",
        created_at=datetime(2025, 4, 1, 9, 0),
    )


@pytest.fixture
def batch_entry() -> LogEntry:
    """批次修改（先頭2件のみ列挙）"""
    return LogEntry(
        id=103,
        action=Action.UPDATE,
        domain=LogDomain.BOOKINGS,
        details="批次修改 8 筆：時長→90分鐘 [Ming (04/03 08:30), John (04/03 09:00) 等8筆] (填表人: Admin)",
        actor_email="admin@example.com",
        created_at=datetime(2025, 3, 31, 18, 0),
    )


@pytest.fixture
def assignment_entry() -> LogEntry:
    """排班記錄（details に 04/03 を含む）"""
    return LogEntry(
        id=104,
        action=Action.UPDATE,
        domain=LogDomain.COACH_ASSIGNMENT,
        details="排班：2025/04/03 08:30 G23 Ming，變更：教練: Papa → Sky",
        actor_email="coach@example.com",
        created_at=datetime(2025, 4, 1, 8, 0),
    )


@pytest.fixture
def sample_entries(create_entry, update_entry, batch_entry, assignment_entry) -> list[LogEntry]:
    """created_at 降順に並んだ混在エントリ"""
    return [create_entry, update_entry, assignment_entry, batch_entry]


@pytest.fixture
def sample_time_off() -> list[TimeOffRange]:
    """同じ理由で連続する2件 + 離れた1件"""
    return [
        TimeOffRange(
            id=3,
            coach_id="coach-papa",
            start_date=date(2025, 3, 20),
            end_date=date(2025, 3, 20),
            reason="比賽",
        ),
        TimeOffRange(
            id=1,
            coach_id="coach-papa",
            start_date=date(2025, 3, 10),
            end_date=date(2025, 3, 10),
            reason="休假",
        ),
        TimeOffRange(
            id=2,
            coach_id="coach-papa",
            start_date=date(2025, 3, 11),
            end_date=date(2025, 3, 12),
            reason="休假",
        ),
    ]


# ========== モックフィクスチャ ==========


@pytest.fixture
def mock_log_source(sample_entries) -> MagicMock:
    """AuditLogSource のモック"""
    mock = MagicMock(spec=AuditLogSource)
    mock.fetch.return_value = sample_entries
    return mock


@pytest.fixture
def mock_time_off_source(sample_time_off) -> MagicMock:
    """TimeOffSource のモック"""
    mock = MagicMock(spec=TimeOffSource)
    mock.list_time_off.return_value = sample_time_off
    return mock
