"""ドメイン固有の例外クラス"""


class AuditTrailError(Exception):
    """Audit Trail の基底例外"""

    pass


class LogFetchError(AuditTrailError):
    """監査ログ取得エラー（Firestore等）"""

    pass


class TimeOffFetchError(AuditTrailError):
    """不在期間取得エラー（Firestore等）"""

    pass
