"""監査ログ details デコーダ

予約操作ごとに1行書かれる自由文の details を、構造化フィールドに戻す。

対応する書式（先頭キーワードで振り分け）:
    新增預約：2025/11/20 14:45 60分 G23 小楊 | 小胖教練、Ivan教練 [WB+WS] [備註] (填表人: xxx)
    修改預約：2025/11/20 14:45 小楊，變更：時間: 14:00 → 14:45、船隻: G21 → G23 (填表人: xxx)
    刪除預約：2025/11/20 14:45 60分 G23 小楊 | 小胖教練 | 🚤阿明 [WB] [備註] (填表人: xxx)
    批次修改 3 筆：時長→90分鐘 [Ming (04/03 08:30), John (04/03 09:00) 等3筆] (填表人: xxx)
    批次刪除 2 筆：[Ming (04/03 08:30), John (04/03 09:00)]
    重複預約 3 筆：G23 60分 Queenie | Papa教練 [SUP] [04/03 10:00, 04/04 10:00, 04/05 10:00]

旧書式の [活動: SUP] [備註: xxx] も読める。

decode() は純粋関数で、どんな文字列に対しても例外を投げずログも出さない。
読めなかったフィールドは None のまま残り、raw_text には常に元の文字列が入る。
"""

from __future__ import annotations

import re
from typing import Any, Callable

from audit_trail.domain.models import DecodedDetails
from audit_trail.services.date_normalizer import extract_dates, format_month_day

Fields = dict[str, Any]

# ── 共通トークン ─────────────────────────────────────────────────────────────

_TIME_RE = re.compile(r"(?:\d{4}/)?(?P<month>\d{1,2})/(?P<day>\d{1,2})\s+\d{1,2}:\d{2}")
_DURATION_RE = re.compile(r"(\d{1,9})\s*分")
_BRACKET_RE = re.compile(r"\[([^\]]+)\]")
_FILLED_BY_RE = re.compile(r"[(（](?:填表人|課堂人)[:：]\s*([^)）]+)[)）]")
_FILLED_BY_STRIP_RE = re.compile(r"\s*[(（](?:填表人|課堂人)[:：][^)）]*[)）]\s*")

# ── 角括弧の振り分け ─────────────────────────────────────────────────────────

_LEGACY_ACTIVITY_RE = re.compile(r"^活動[:：]\s*")
_LEGACY_NOTES_RE = re.compile(r"^備註[:：]\s*")
_BRACKET_FILLED_BY_RE = re.compile(r"^(?:填表人|課堂人)[:：]")
_ACTIVITY_CODE_RE = re.compile(r"^(?:WB|WS)(?:\+|$)")

# ── 人名 ─────────────────────────────────────────────────────────────────────

_COACH_RE = re.compile(r"([\u4e00-\u9fa5A-Za-z0-9\s]+?)(?:教練|老師)")
_COACH_TOKEN_RE = re.compile(r"([\u4e00-\u9fa5A-Za-z0-9]+)(?:教練|老師)")
_DRIVER_GLYPHS = ("🚤", "🚗")
_DRIVER_LABEL_RE = re.compile(r"^駕駛[:：]\s*(.+)$")
_DRIVER_SUFFIX_RE = re.compile(r"^(.+?)\s*駕駛$")

# ── 修改預約 ─────────────────────────────────────────────────────────────────

_UPDATE_MEMBER_RE = re.compile(r"\d{1,2}:\d{2}\s+([^，]+?)，變更")
_CHANGES_RE = re.compile(r"變更[:：]\s*(.+?)(?:\s*[(（](?:填表人|課堂人)|$)", re.DOTALL)
_BOAT_CHANGE_RE = re.compile(r"船隻[:：]\s*([^→]+?)\s*→\s*([^，、]+)")
_CONTACT_CHANGE_RE = re.compile(r"聯絡人?[:：]\s*([^→]+?)\s*→\s*([^，、]+)")

# ── 批次・重複預約 ───────────────────────────────────────────────────────────

_COUNT_RE = re.compile(r"^(?:批次修改|批次刪除|重複預約)\s*(\d{1,9})\s*筆")
_BATCH_CLAUSE_RE = re.compile(r"筆[:：]\s*([^\[]*)")
_MORE_SUFFIX_RE = re.compile(r"\s*等\s*(\d{1,9})\s*筆\s*$")
_LIST_SEPARATOR_RE = re.compile(r"[,，]\s*")


def _collapse(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


def _coach_names(segment: str) -> list[str]:
    """"Papa教練、Sky老師" → ["Papa", "Sky"]"""
    return [name.strip() for name in _COACH_RE.findall(segment) if name.strip()]


def _take_coach_tokens(text: str) -> tuple[str, list[str]]:
    """区切りのない文から教練トークンを抜き出し、残りの文と教練名を返す"""
    coaches = _COACH_TOKEN_RE.findall(text)
    return _collapse(_COACH_TOKEN_RE.sub(" ", text)), coaches


def _boat_and_member(segment: str) -> Fields:
    """最初の空白で 船 / 會員 に分ける"""
    segment = _collapse(segment)
    if not segment:
        return {}
    boat, _, member = segment.partition(" ")
    fields: Fields = {"boat": boat}
    if member.strip():
        fields["member"] = member.strip()
    return fields


def _classify_brackets(contents: list[str]) -> Fields:
    """
    角括弧の中身を activity_types / notes に振り分ける。

    ラベルのない新書式では区別のための記号がないため、
    "+" を含むか WB/WS で始まるものを活動、最初に残ったものを備註とする。
    この順序を変えると過去のログの読み方が変わる。
    """
    fields: Fields = {}
    for raw in contents:
        content = raw.strip()
        if _LEGACY_ACTIVITY_RE.match(content):
            fields["activity_types"] = _LEGACY_ACTIVITY_RE.sub("", content).strip()
        elif _LEGACY_NOTES_RE.match(content):
            fields["notes"] = _LEGACY_NOTES_RE.sub("", content).strip()
        elif _BRACKET_FILLED_BY_RE.match(content):
            # 角括弧に入った課堂人タグは活動でも備註でもない
            continue
        else:
            is_activity = "+" in content or bool(_ACTIVITY_CODE_RE.match(content))
            if is_activity and "activity_types" not in fields:
                fields["activity_types"] = content
            elif "notes" not in fields:
                fields["notes"] = content
    return fields


def _booking_fields(details: str) -> Fields:
    """単一操作に共通する 時間 / 預約日期 / 時長 / 活動 / 備註 を取り出す"""
    fields: Fields = {}
    time_match = _TIME_RE.search(details)
    if time_match:
        fields["time"] = time_match.group(0)
        fields["booking_date"] = format_month_day(
            time_match.group("month"), time_match.group("day")
        )
    duration_match = _DURATION_RE.search(details)
    if duration_match:
        fields["duration"] = f"{duration_match.group(1)}分"
    fields.update(_classify_brackets(_BRACKET_RE.findall(details)))
    return fields


def _strip_booking_text(details: str, prefix: str) -> str:
    """先頭キーワード・時間・時長・填表人・角括弧を取り除いた残りの文"""
    text = re.sub(rf"^{prefix}[:：]?\s*", "", details)
    text = _TIME_RE.sub(" ", text, count=1)
    text = _DURATION_RE.sub(" ", text, count=1)
    text = _FILLED_BY_STRIP_RE.sub(" ", text)
    text = _BRACKET_RE.sub(" ", text)
    return _collapse(text)


def _driver_name(part: str) -> str | None:
    for glyph in _DRIVER_GLYPHS:
        if part.startswith(glyph):
            return part[len(glyph):].strip()
    for pattern in (_DRIVER_LABEL_RE, _DRIVER_SUFFIX_RE):
        match = pattern.match(part)
        if match:
            return match.group(1).strip()
    return None


# ── 文法ごとのパーサ ─────────────────────────────────────────────────────────


def _parse_generic(details: str) -> Fields:
    """未知の書式（排班など）: 共通トークンだけ拾う"""
    return _booking_fields(details)


def _parse_create(details: str) -> Fields:
    fields = _booking_fields(details)
    text = _strip_booking_text(details, "新增預約")

    if "|" in text:
        head, tail = text.split("|", 1)
        coaches = _coach_names(tail)
    else:
        head, coaches = _take_coach_tokens(text)

    if coaches:
        fields["coach"] = "/".join(coaches)
    fields.update(_boat_and_member(head))
    return fields


def _parse_update(details: str) -> Fields:
    fields = _booking_fields(details)

    member_match = _UPDATE_MEMBER_RE.search(details)
    if member_match:
        fields["member"] = member_match.group(1).strip()

    changes_match = _CHANGES_RE.search(details)
    if not changes_match:
        return fields
    changes = changes_match.group(1).strip()

    def has_label(label: str) -> bool:
        return f"{label}:" in changes or f"{label}：" in changes

    items: list[str] = []
    if has_label("時間"):
        items.append("時間")
    boat_change = _BOAT_CHANGE_RE.search(changes)
    if boat_change:
        old, new = boat_change.group(1).strip(), boat_change.group(2).strip()
        fields["boat"] = new
        items.append(f"船 {old}→{new}")
    for label in ("教練", "駕駛"):
        if has_label(label):
            items.append(label)
    contact_change = _CONTACT_CHANGE_RE.search(changes)
    if contact_change:
        fields["member"] = contact_change.group(2).strip()
        items.append("聯絡人")
    for label in ("備註", "時長", "活動"):
        if has_label(label):
            items.append(label)

    if items:
        fields["change_summary"] = "、".join(items)
    return fields


def _parse_delete(details: str) -> Fields:
    fields = _booking_fields(details)
    text = _strip_booking_text(details, "刪除預約")

    coaches: list[str] = []
    if "|" in text:
        head, tail = text.split("|", 1)
        for part in (p.strip() for p in tail.split("|")):
            driver = _driver_name(part)
            if driver is not None:
                if driver:
                    fields["driver"] = driver
            else:
                coaches.extend(_coach_names(part))
    else:
        head, coaches = _take_coach_tokens(text)

    if coaches:
        fields["coach"] = "/".join(coaches)
    fields.update(_boat_and_member(head))
    return fields


def _batch_clause(details: str) -> str:
    """"N 筆：" と最初の "[" の間の文"""
    match = _BATCH_CLAUSE_RE.search(details)
    if not match:
        return ""
    return _collapse(_FILLED_BY_STRIP_RE.sub(" ", match.group(1)))


def _batch_common(details: str) -> Fields:
    """批次・重複預約に共通する 筆數 と 預約列表"""
    fields: Fields = {}
    count_match = _COUNT_RE.search(details)
    if count_match:
        fields["member"] = f"{count_match.group(1)}筆"
        fields["total_count"] = int(count_match.group(1))

    brackets = _BRACKET_RE.findall(details)
    if not brackets:
        return fields
    listing = brackets[-1].strip()
    dates = extract_dates(listing)
    if not dates:
        return fields

    more = _MORE_SUFFIX_RE.search(listing)
    if more:
        listing = listing[: more.start()]
        fields.setdefault("total_count", int(more.group(1)))

    booking_list = [item.strip() for item in _LIST_SEPARATOR_RE.split(listing) if item.strip()]
    fields["booking_list"] = booking_list
    fields["booking_date"] = dates[0]
    if fields.get("total_count") is not None:
        fields["total_count"] = max(fields["total_count"], len(booking_list))
    return fields


def _parse_batch(details: str) -> Fields:
    fields = _batch_common(details)
    clause = _batch_clause(details)
    if clause:
        fields["change_summary"] = clause
    return fields


def _parse_repeat(details: str) -> Fields:
    fields = _batch_common(details)
    clause = _batch_clause(details)
    if not clause:
        return fields

    parts = [p.strip() for p in clause.split("|")]
    tokens = parts[0].split()
    if len(tokens) >= 3:
        fields["boat"] = tokens[0]
        fields["duration"] = tokens[1]
        fields["member"] = " ".join(tokens[2:])

    coaches = [name for part in parts[1:] for name in _coach_names(part)]
    if coaches:
        fields["coach"] = "/".join(coaches)
    return fields


_GRAMMARS: tuple[tuple[str, Callable[[str], Fields]], ...] = (
    ("批次修改", _parse_batch),
    ("批次刪除", _parse_batch),
    ("重複預約", _parse_repeat),
    ("新增預約", _parse_create),
    ("修改預約", _parse_update),
    ("刪除預約", _parse_delete),
)


def parser_for(details: str) -> Callable[[str], Fields]:
    """先頭キーワードに対応するパーサを返す"""
    for prefix, parser in _GRAMMARS:
        if details.startswith(prefix):
            return parser
    return _parse_generic


def decode(details: str | None) -> DecodedDetails:
    """
    details 文字列を構造化フィールドに分解する。

    Args:
        details: 監査ログの details（None は空文字列として扱う）

    Returns:
        DecodedDetails: 読めたフィールドのみ埋まった結果。raw_text は常に元の文字列
    """
    if details is None:
        details = ""
    elif not isinstance(details, str):
        details = str(details)

    fields = parser_for(details)(details)

    filled_by = _FILLED_BY_RE.search(details)
    if filled_by and filled_by.group(1).strip():
        fields["filled_by"] = filled_by.group(1).strip()

    return DecodedDetails(raw_text=details, **fields)
