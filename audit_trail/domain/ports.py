"""Ports - 外部データソースのインターフェース定義（ABC）

Adapter はこれらのABCを継承し、全ての抽象メソッドを実装する必要があります。
どちらも読み取り専用で、書き込み経路はこのパッケージの対象外。
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from audit_trail.domain.models import LogEntry, LogQuery, TimeOffRange


class AuditLogSource(ABC):
    """監査ログの読み込み（Firestore等）"""

    @abstractmethod
    def fetch(self, query: LogQuery, limit: int) -> list[LogEntry]:
        """
        期間・操作種別で絞り込んだ監査ログを created_at 降順で返す。

        Raises:
            LogFetchError: 取得に失敗した場合
        """
        pass


class TimeOffSource(ABC):
    """教練の不在期間の読み込み"""

    @abstractmethod
    def list_time_off(self, coach_id: str) -> list[TimeOffRange]:
        """指定教練の不在期間一覧を取得"""
        pass
