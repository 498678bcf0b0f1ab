"""設定管理 - 環境変数の型安全な読み込み"""

import os
from dataclasses import dataclass
from dotenv import load_dotenv


@dataclass(frozen=True)
class AppConfig:
    """アプリケーション設定"""
    project_id: str
    audit_log_collection: str = "audit_log"
    time_off_collection: str = "coach_time_off"
    fetch_limit: int = 500
    default_range_days: int = 7
    timezone: str = "Asia/Taipei"

    @classmethod
    def from_env(cls) -> "AppConfig":
        """環境変数から設定を読み込む"""
        load_dotenv()

        project_id = os.getenv("PROJECT_ID")
        if not project_id:
            raise ValueError("PROJECT_ID is not set in environment")

        fetch_limit = _int_env("AUDIT_LOG_FETCH_LIMIT", 500)
        if fetch_limit <= 0:
            raise ValueError("AUDIT_LOG_FETCH_LIMIT must be positive")

        return cls(
            project_id=project_id,
            audit_log_collection=os.getenv("AUDIT_LOG_COLLECTION", "audit_log"),
            time_off_collection=os.getenv("TIME_OFF_COLLECTION", "coach_time_off"),
            fetch_limit=fetch_limit,
            default_range_days=_int_env("AUDIT_LOG_DEFAULT_DAYS", 7),
            timezone=os.getenv("APP_TIMEZONE", "Asia/Taipei"),
        )


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer: {raw!r}") from None
