"""logging_config モジュールのテスト"""

import json
import logging
import sys
from unittest.mock import patch

from audit_trail.logging_config import (
    CloudLoggingFormatter,
    is_cloud_environment,
    setup_logging,
)


class TestCloudLoggingFormatter:
    """CloudLoggingFormatter の単体テスト"""

    def _make_record(
        self,
        message: str = "test message",
        level: int = logging.INFO,
        exc_info=None,
    ) -> logging.LogRecord:
        """テスト用の LogRecord を生成するヘルパー"""
        return logging.LogRecord(
            name="audit_trail.services.timeline_service",
            level=level,
            pathname="",
            lineno=0,
            msg=message,
            args=(),
            exc_info=exc_info,
        )

    def test_format_returns_valid_json(self):
        """フォーマット結果が有効なJSONであること"""
        formatter = CloudLoggingFormatter()
        parsed = json.loads(formatter.format(self._make_record("Loaded 3 audit log entries")))

        assert parsed["message"] == "Loaded 3 audit log entries"
        assert parsed["logger"] == "audit_trail.services.timeline_service"
        assert "timestamp" in parsed

    def test_standard_levels_map_to_severity(self):
        """標準レベルはそのまま severity になること"""
        formatter = CloudLoggingFormatter()
        for level in (logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR, logging.CRITICAL):
            parsed = json.loads(formatter.format(self._make_record(level=level)))
            assert parsed["severity"] == logging.getLevelName(level)

    def test_custom_level_maps_to_default(self):
        """独自レベルは severity=DEFAULT"""
        formatter = CloudLoggingFormatter()
        parsed = json.loads(formatter.format(self._make_record(level=25)))

        assert parsed["severity"] == "DEFAULT"

    def test_exception_info_included(self):
        """例外情報が exception フィールドとして含まれること"""
        formatter = CloudLoggingFormatter()
        try:
            raise ValueError("firestore unavailable")
        except ValueError:
            exc_info = sys.exc_info()

        parsed = json.loads(formatter.format(self._make_record(exc_info=exc_info)))

        assert "ValueError" in parsed["exception"]
        assert "firestore unavailable" in parsed["exception"]

    def test_no_exception_field_when_no_exception(self):
        formatter = CloudLoggingFormatter()
        parsed = json.loads(formatter.format(self._make_record()))

        assert "exception" not in parsed

    def test_extra_fields_are_merged(self):
        """extra_fields はトップレベルに展開される"""
        formatter = CloudLoggingFormatter()
        record = self._make_record()
        record.extra_fields = {"generation": 3, "collection": "audit_log"}

        parsed = json.loads(formatter.format(record))

        assert parsed["generation"] == 3
        assert parsed["collection"] == "audit_log"

    def test_non_ascii_message_kept(self):
        """中国語メッセージがエスケープされないこと"""
        formatter = CloudLoggingFormatter()
        output = formatter.format(self._make_record("新增預約：04/03 08:30"))

        assert "新增預約：04/03 08:30" in output


class TestSetupLogging:
    """setup_logging() の動作テスト"""

    def test_uses_json_formatter_in_cloud_run_job_env(self):
        """CLOUD_RUN_JOB 環境変数がある場合、JSON フォーマッタが使われること"""
        with patch.dict("os.environ", {"CLOUD_RUN_JOB": "audit-trail-dev"}, clear=False):
            setup_logging()

        root_logger = logging.getLogger()
        assert len(root_logger.handlers) == 1
        assert isinstance(root_logger.handlers[0].formatter, CloudLoggingFormatter)

    def test_uses_text_formatter_in_local_env(self):
        """Cloud Run 環境変数がない場合、テキスト フォーマッタが使われること"""
        with patch.dict("os.environ", {}, clear=True):
            assert is_cloud_environment() is False
            setup_logging()

        root_logger = logging.getLogger()
        assert not isinstance(root_logger.handlers[0].formatter, CloudLoggingFormatter)

    def test_log_level_from_env(self):
        """LOG_LEVEL 環境変数が反映されること"""
        with patch.dict("os.environ", {"LOG_LEVEL": "DEBUG"}, clear=False):
            setup_logging()

        assert logging.getLogger().level == logging.DEBUG

    def test_explicit_level_wins(self):
        with patch.dict("os.environ", {"LOG_LEVEL": "DEBUG"}, clear=False):
            setup_logging("warning")

        assert logging.getLogger().level == logging.WARNING

    def test_firestore_client_loggers_are_quieted(self):
        setup_logging("DEBUG")

        assert logging.getLogger("google.api_core").level == logging.WARNING

    def test_handlers_cleared_on_reinitialize(self):
        """setup_logging() を複数回呼んでもハンドラが重複しないこと"""
        setup_logging()
        setup_logging()

        assert len(logging.getLogger().handlers) == 1
