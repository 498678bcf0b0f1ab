"""日付の表記ゆれを MM/DD に正規化する"""

from __future__ import annotations

import re

# 判定順が意味を持つ（"0403" は M-D より先に MMDD として扱う）
_DATE_PATTERNS = (
    re.compile(r"(?P<month>\d{2})(?P<day>\d{2})"),  # 0403
    re.compile(r"(?P<month>\d{1,2})-(?P<day>\d{1,2})"),  # 4-3
    re.compile(r"\d{4}/(?P<month>\d{1,2})/(?P<day>\d{1,2})"),  # 2025/4/3
    re.compile(r"\d{4}-(?P<month>\d{1,2})-(?P<day>\d{1,2})"),  # 2025-4-3
    re.compile(r"(?P<month>\d{1,2})/(?P<day>\d{1,2})"),  # 4/3
)


# 文中の日付トークン。年付きの場合は年を読み飛ばす（"2025/04/03" を 25/04 と読まない）
_MONTH_DAY_RE = re.compile(r"(?:\d{4}/)?(\d{1,2})/(\d{1,2})")


def format_month_day(month: str, day: str) -> str:
    """月・日をゼロ埋めした MM/DD にする"""
    return f"{int(month):02d}/{int(day):02d}"


def extract_dates(text: str) -> list[str]:
    """文字列中の M/D（または YYYY/M/D）トークンを出現順に MM/DD で返す"""
    return [format_month_day(m, d) for m, d in _MONTH_DAY_RE.findall(text)]


def normalize_date(fragment: str) -> str:
    """
    ユーザー入力やログ中の日付断片を MM/DD に正規化する。

    認識できない入力はそのまま返す（呼び出し側は部分一致にフォールバックする）。

    Examples:
        >>> normalize_date("0403")
        '04/03'
        >>> normalize_date("2025/4/3")
        '04/03'
        >>> normalize_date("next week")
        'next week'
    """
    text = fragment.strip()
    for pattern in _DATE_PATTERNS:
        match = pattern.fullmatch(text)
        if match:
            return format_month_day(match.group("month"), match.group("day"))
    return fragment
