"""Firestore Log Source Adapter

AuditLogSource と TimeOffSource の Firestore 実装（読み取り専用）。

Firestore コレクション構造:
  audit_log/{docId}         ← 監査ログ（id, user_email, action, table_name, details, created_at）
  coach_time_off/{docId}    ← 教練の不在期間（id, coach_id, start_date, end_date, reason, notes）

created_at は Firestore Timestamp（SERVER_TIMESTAMP で書き込まれる）として保存されている前提。
期間の絞り込みは設定されたタイムゾーンの 00:00:00 〜 23:59:59.999999 を Timestamp で指定し、
読み出した値もそのタイムゾーンに変換する。移行データなどの ISO 文字列も読めるが、
期間フィルターには一致しない。
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time, tzinfo
from typing import Any
from zoneinfo import ZoneInfo

from google.api_core import exceptions as google_exceptions
from google.cloud import firestore

from audit_trail.domain.errors import LogFetchError, TimeOffFetchError
from audit_trail.domain.models import (
    Action,
    LogDomain,
    LogEntry,
    LogQuery,
    OperationFilter,
    TimeOffRange,
)
from audit_trail.domain.ports import AuditLogSource, TimeOffSource

logger = logging.getLogger(__name__)

_AUDIT_LOG = "audit_log"
_TIME_OFF = "coach_time_off"

# 画面が扱う対象テーブル
_TIMELINE_DOMAINS = [LogDomain.BOOKINGS.value, LogDomain.COACH_ASSIGNMENT.value]


def _to_int_id(doc_id: str, data: dict) -> int | None:
    """ドキュメント内の id、なければ数値のドキュメントIDを使う"""
    raw = data.get("id", doc_id)
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


class FirestoreAuditLogSource(AuditLogSource):
    """
    Firestore を使った AuditLogSource 実装。

    audit_log コレクションを期間・操作種別で絞り込み、created_at 降順で返す。
    """

    def __init__(
        self,
        db: firestore.Client,
        collection: str = _AUDIT_LOG,
        timezone: tzinfo | None = None,
    ) -> None:
        """
        Args:
            db: 初期化済みの Firestore クライアント
            collection: 監査ログのコレクション名
            timezone: Timestamp を暦日に直すときのタイムゾーン
        """
        self._db = db
        self._collection = collection
        self._tz = timezone or ZoneInfo("Asia/Taipei")

    def fetch(self, query: LogQuery, limit: int) -> list[LogEntry]:
        """期間・操作種別で絞り込んだ監査ログを取得"""
        q = self._db.collection(self._collection)

        if query.operation is None:
            q = q.where("table_name", "in", _TIMELINE_DOMAINS)
        elif query.operation is OperationFilter.SCHEDULE:
            q = q.where("table_name", "==", LogDomain.COACH_ASSIGNMENT.value)
        else:
            q = q.where("action", "==", query.operation.value).where(
                "table_name", "==", LogDomain.BOOKINGS.value
            )

        q = (
            q.where("created_at", ">=", self._day_start(query.start_date))
            .where("created_at", "<=", self._day_end(query.end_date))
            .order_by("created_at", direction=firestore.Query.DESCENDING)
            .limit(limit)
        )

        try:
            snaps = list(q.stream())
        except google_exceptions.GoogleAPIError as e:
            raise LogFetchError(f"Failed to query {self._collection}: {e}") from e

        entries: list[LogEntry] = []
        for snap in snaps:
            entry = self._dict_to_entry(snap.id, snap.to_dict() or {})
            if entry is not None:
                entries.append(entry)
        logger.debug(
            "Fetched %d audit log rows (%d skipped)",
            len(entries),
            len(snaps) - len(entries),
        )
        return entries

    # ── 変換ヘルパー ──────────────────────────────────────────────────────────

    def _day_start(self, day: date) -> datetime:
        """その日の 00:00:00（設定タイムゾーン）"""
        return datetime.combine(day, time.min, tzinfo=self._tz)

    def _day_end(self, day: date) -> datetime:
        """その日の 23:59:59.999999（設定タイムゾーン）"""
        return datetime.combine(day, time.max, tzinfo=self._tz)

    def _dict_to_entry(self, doc_id: str, data: dict) -> LogEntry | None:
        entry_id = _to_int_id(doc_id, data)
        if entry_id is None:
            logger.warning("Skipping audit log without numeric id: doc_id=%s", doc_id)
            return None
        try:
            action = Action(data.get("action"))
            domain = LogDomain(data.get("table_name"))
        except ValueError:
            logger.warning(
                "Skipping audit log with unknown action/table: doc_id=%s, action=%s, table=%s",
                doc_id,
                data.get("action"),
                data.get("table_name"),
            )
            return None
        return LogEntry(
            id=entry_id,
            action=action,
            domain=domain,
            details=data.get("details"),
            actor_email=data.get("user_email"),
            created_at=self._parse_created_at(doc_id, data.get("created_at")),
        )

    def _parse_created_at(self, doc_id: str, value: Any) -> datetime | None:
        if value is None:
            return None
        if isinstance(value, datetime):
            if value.tzinfo is None:
                return value
            return value.astimezone(self._tz)
        if isinstance(value, str):
            try:
                parsed = datetime.fromisoformat(value)
            except ValueError:
                logger.warning("Invalid created_at: doc_id=%s, value=%s", doc_id, value)
                return None
            if parsed.tzinfo is None:
                return parsed
            return parsed.astimezone(self._tz)
        logger.warning("Unsupported created_at type: doc_id=%s, type=%s", doc_id, type(value))
        return None


class FirestoreTimeOffSource(TimeOffSource):
    """Firestore を使った TimeOffSource 実装"""

    def __init__(self, db: firestore.Client, collection: str = _TIME_OFF) -> None:
        self._db = db
        self._collection = collection

    def list_time_off(self, coach_id: str) -> list[TimeOffRange]:
        """指定教練の不在期間を取得"""
        q = self._db.collection(self._collection).where("coach_id", "==", coach_id)
        try:
            snaps = list(q.stream())
        except google_exceptions.GoogleAPIError as e:
            raise TimeOffFetchError(f"Failed to query {self._collection}: {e}") from e

        ranges: list[TimeOffRange] = []
        for snap in snaps:
            time_off = self._dict_to_range(snap.id, snap.to_dict() or {})
            if time_off is not None:
                ranges.append(time_off)
        return ranges

    @staticmethod
    def _dict_to_range(doc_id: str, data: dict) -> TimeOffRange | None:
        range_id = _to_int_id(doc_id, data)
        try:
            start = date.fromisoformat(str(data.get("start_date", ""))[:10])
            end = date.fromisoformat(str(data.get("end_date", ""))[:10])
        except ValueError:
            logger.warning("Skipping time-off with invalid dates: doc_id=%s", doc_id)
            return None
        if range_id is None:
            logger.warning("Skipping time-off without numeric id: doc_id=%s", doc_id)
            return None
        return TimeOffRange(
            id=range_id,
            coach_id=data.get("coach_id", ""),
            start_date=start,
            end_date=end,
            reason=data.get("reason"),
            notes=data.get("notes"),
        )
