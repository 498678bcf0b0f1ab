"""range_merger のテスト"""

from datetime import date

from audit_trail.domain.models import TimeOffRange
from audit_trail.services.range_merger import (
    format_range,
    merge_ranges,
    merge_ranges_by_coach,
)


def _range(range_id, start, end, reason="休假", coach_id="coach-papa"):
    return TimeOffRange(
        id=range_id,
        coach_id=coach_id,
        start_date=start,
        end_date=end,
        reason=reason,
    )


class TestMergeRanges:
    """merge_ranges() のテスト"""

    def test_adjacent_ranges_with_same_reason_are_merged(self, sample_time_off):
        """3/10 と 3/11-3/12 は1つ、3/20 は別"""
        # Act
        merged = merge_ranges(sample_time_off)

        # Assert
        assert len(merged) == 2
        assert merged[0].display_text == "3/10 - 3/12"
        assert merged[0].start_date == date(2025, 3, 10)
        assert merged[0].end_date == date(2025, 3, 12)
        assert merged[0].source_ids == [1, 2]
        assert merged[0].id == 1
        assert merged[0].reason == "休假"
        assert merged[1].display_text == "3/20"
        assert merged[1].source_ids == [3]

    def test_different_reasons_are_not_merged(self):
        """理由が違えば隣接していてもまとめない"""
        merged = merge_ranges(
            [
                _range(1, date(2025, 3, 10), date(2025, 3, 10), reason="休假"),
                _range(2, date(2025, 3, 11), date(2025, 3, 11), reason="比賽"),
            ]
        )

        assert [m.display_text for m in merged] == ["3/10", "3/11"]

    def test_gap_of_two_days_is_not_merged(self):
        """間に1日空くと別レンジ"""
        merged = merge_ranges(
            [
                _range(1, date(2025, 3, 10), date(2025, 3, 10)),
                _range(2, date(2025, 3, 12), date(2025, 3, 12)),
            ]
        )

        assert len(merged) == 2

    def test_overlapping_range_keeps_the_latest_end(self):
        """内側に含まれるレンジで終了日が縮まない"""
        merged = merge_ranges(
            [
                _range(1, date(2025, 3, 1), date(2025, 3, 10)),
                _range(2, date(2025, 3, 3), date(2025, 3, 4)),
                _range(3, date(2025, 3, 11), date(2025, 3, 11)),
            ]
        )

        assert len(merged) == 1
        assert merged[0].display_text == "3/1 - 3/11"

    def test_none_and_empty_reason_are_the_same(self):
        merged = merge_ranges(
            [
                _range(1, date(2025, 3, 10), date(2025, 3, 10), reason=None),
                _range(2, date(2025, 3, 11), date(2025, 3, 11), reason=""),
            ]
        )

        assert len(merged) == 1

    def test_different_coaches_are_not_merged(self):
        merged = merge_ranges(
            [
                _range(1, date(2025, 3, 10), date(2025, 3, 10), coach_id="a"),
                _range(2, date(2025, 3, 11), date(2025, 3, 11), coach_id="b"),
            ]
        )

        assert len(merged) == 2

    def test_empty_input(self):
        assert merge_ranges([]) == []

    def test_input_is_not_modified(self, sample_time_off):
        before = list(sample_time_off)

        merge_ranges(sample_time_off)

        assert sample_time_off == before


class TestMergeRangesByCoach:
    def test_groups_by_coach(self):
        result = merge_ranges_by_coach(
            [
                _range(1, date(2025, 3, 10), date(2025, 3, 10), coach_id="a"),
                _range(2, date(2025, 3, 11), date(2025, 3, 11), coach_id="b"),
                _range(3, date(2025, 3, 11), date(2025, 3, 11), coach_id="a"),
            ]
        )

        assert set(result) == {"a", "b"}
        assert [m.display_text for m in result["a"]] == ["3/10 - 3/11"]
        assert [m.display_text for m in result["b"]] == ["3/11"]


class TestFormatRange:
    def test_single_day(self):
        assert format_range(date(2025, 3, 10), date(2025, 3, 10)) == "3/10"

    def test_span(self):
        assert format_range(date(2025, 12, 30), date(2026, 1, 2)) == "12/30 - 1/2"
