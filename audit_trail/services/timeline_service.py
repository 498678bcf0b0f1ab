"""AuditTimelineService - 監査ログタイムラインの取得と再計算

Log Source からの取得だけが非同期境界。取得条件が変わるたびに再取得し、
後から発行された取得が既に反映済みなら古い結果は捨てる（世代番号で比較、
キャンセルはしない）。取得の失敗はここで捕まえてログに残し、空のリストとして扱う。
"""

from __future__ import annotations

import logging
import threading
from datetime import date

from audit_trail.domain.models import (
    LogEntry,
    LogQuery,
    MergedTimeOffRange,
    TimelineFilters,
)
from audit_trail.domain.ports import AuditLogSource, TimeOffSource
from audit_trail.services.range_merger import merge_ranges
from audit_trail.services.timeline_filter import filled_by_options, filter_and_group

logger = logging.getLogger(__name__)

DEFAULT_FETCH_LIMIT = 500


class AuditTimelineService:
    """
    監査ログ画面のデータ側をまとめる。

    処理フロー:
    1. refresh(query) で期間・操作種別に合うログを取得（最大 limit 件）
    2. timeline(filters) で絞り込み・日別グルーピング（毎回再計算）
    3. coach_time_off(coach_id) で教練の不在期間をまとめて返す
    """

    def __init__(
        self,
        log_source: AuditLogSource,
        time_off_source: TimeOffSource | None = None,
        limit: int = DEFAULT_FETCH_LIMIT,
    ) -> None:
        """
        Args:
            log_source: 監査ログの取得元（Firestore等）
            time_off_source: 不在期間の取得元（省略可）
            limit: 1回の取得で読む最大件数
        """
        self._log_source = log_source
        self._time_off_source = time_off_source
        self._limit = limit
        self._lock = threading.Lock()
        self._issued = 0
        self._applied = 0
        self._entries: list[LogEntry] = []
        self._query: LogQuery | None = None

    @property
    def entries(self) -> list[LogEntry]:
        """現在反映されている取得結果"""
        return list(self._entries)

    @property
    def query(self) -> LogQuery | None:
        """現在の取得結果に対応する取得条件"""
        return self._query

    def refresh(self, query: LogQuery) -> bool:
        """
        監査ログを取得し直す。

        Args:
            query: 取得条件

        Returns:
            bool: 結果を反映した場合 True、より新しい取得が反映済みで捨てた場合 False
        """
        with self._lock:
            self._issued += 1
            generation = self._issued

        logger.info(
            "Fetching audit logs: %s..%s operation=%s (generation=%d)",
            query.start_date,
            query.end_date,
            query.operation.value if query.operation else "all",
            generation,
        )
        try:
            entries = self._log_source.fetch(query, self._limit)
        except Exception as e:
            logger.exception("Failed to fetch audit logs: %s", e)
            entries = []

        with self._lock:
            if generation < self._applied:
                logger.info(
                    "Discarding stale audit log result (generation=%d, applied=%d)",
                    generation,
                    self._applied,
                )
                return False
            self._applied = generation
            self._entries = list(entries)
            self._query = query

        logger.info("Loaded %d audit log entries", len(entries))
        return True

    def timeline(
        self, filters: TimelineFilters | None = None
    ) -> list[tuple[date, list[LogEntry]]]:
        """現在の取得結果を絞り込み、日別（新しい日順）に返す"""
        return filter_and_group(self._entries, filters or TimelineFilters())

    def filled_by_options(self) -> list[str]:
        """填表人フィルターの選択肢"""
        return filled_by_options(self._entries)

    def coach_time_off(self, coach_id: str) -> list[MergedTimeOffRange]:
        """
        教練の不在期間を連続ごとにまとめて返す。

        取得元が未設定、または取得に失敗した場合は空リスト。
        """
        if self._time_off_source is None:
            logger.warning("Time-off source is not configured")
            return []
        try:
            ranges = self._time_off_source.list_time_off(coach_id)
        except Exception as e:
            logger.exception("Failed to fetch time-off ranges for %s: %s", coach_id, e)
            return []
        return merge_ranges(ranges)
