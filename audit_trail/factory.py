"""Factory - 依存性注入の組み立て

Firestore Adapter を組み立て、AuditTimelineService を生成する。
"""

import logging
from datetime import date
from zoneinfo import ZoneInfo

from google.cloud import firestore

from audit_trail.adapters.firestore_audit_log import (
    FirestoreAuditLogSource,
    FirestoreTimeOffSource,
)
from audit_trail.config import AppConfig
from audit_trail.domain.models import LogQuery
from audit_trail.services.timeline_labels import default_query
from audit_trail.services.timeline_service import AuditTimelineService

logger = logging.getLogger(__name__)


def create_timeline_service(
    config: AppConfig | None = None,
    db: firestore.Client | None = None,
) -> AuditTimelineService:
    """
    AuditTimelineService を生成（全依存を組み立て）。

    Args:
        config: アプリケーション設定（Noneの場合は環境変数から読み込み）
        db: Firestore クライアント（Noneの場合は config.project_id で生成）

    Returns:
        AuditTimelineService: 取得前のサービス（refresh() で読み込む）

    Raises:
        ValueError: 必須設定が不足している場合
    """
    if config is None:
        config = AppConfig.from_env()

    logger.info(
        "Creating timeline service: project_id=%s, collection=%s, limit=%d",
        config.project_id,
        config.audit_log_collection,
        config.fetch_limit,
    )

    if db is None:
        db = firestore.Client(project=config.project_id)

    log_source = FirestoreAuditLogSource(
        db,
        collection=config.audit_log_collection,
        timezone=ZoneInfo(config.timezone),
    )
    time_off_source = FirestoreTimeOffSource(db, collection=config.time_off_collection)

    return AuditTimelineService(
        log_source=log_source,
        time_off_source=time_off_source,
        limit=config.fetch_limit,
    )


def initial_query(config: AppConfig, today: date | None = None) -> LogQuery:
    """画面を開いたときの取得条件（直近 default_range_days 日）"""
    if today is None:
        today = date.today()
    return default_query(today, days=config.default_range_days)
