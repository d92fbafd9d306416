from datetime import date, datetime, timezone as dt_timezone

import pytest
from django.utils import timezone

from targets.periods import (
    InvalidPeriodError,
    MonthlyPeriod,
    QuarterlyPeriod,
    TargetType,
    YearlyPeriod,
    generate_target_period,
    normalize_period,
    parse_period,
    period_date_range,
    period_for_date,
)


class TestGenerateTargetPeriod:
    def test_monthly(self):
        assert generate_target_period(TargetType.MONTHLY, date(2025, 1, 15)) == "2025-01"

    def test_quarterly(self):
        assert generate_target_period(TargetType.QUARTERLY, date(2025, 4, 1)) == "2025-Q2"

    def test_yearly(self):
        assert generate_target_period(TargetType.YEARLY, date(2025, 12, 31)) == "2025"

    @pytest.mark.parametrize("month, quarter", [(1, 1), (3, 1), (4, 2), (6, 2), (7, 3), (9, 3), (10, 4), (12, 4)])
    def test_quarter_boundaries(self, month, quarter):
        assert generate_target_period(TargetType.QUARTERLY, date(2024, month, 10)) == f"2024-Q{quarter}"

    def test_unknown_type_falls_back_to_monthly(self):
        assert generate_target_period("WEEKLY", date(2025, 3, 9)) == "2025-03"

    def test_defaults_to_today(self):
        assert generate_target_period(TargetType.MONTHLY) == timezone.localdate().strftime("%Y-%m")

    def test_aware_datetime_uses_local_day(self):
        # 2025-01-31 20:00 UTC is already February in Asia/Jakarta (UTC+7).
        moment = datetime(2025, 1, 31, 20, 0, tzinfo=dt_timezone.utc)
        assert generate_target_period(TargetType.MONTHLY, moment) == "2025-02"


class TestParsePeriod:
    def test_monthly_round_trip(self):
        for month in range(1, 13):
            text = generate_target_period(TargetType.MONTHLY, date(2025, month, 1))
            assert parse_period(text, TargetType.MONTHLY) == MonthlyPeriod(2025, month)
            assert str(parse_period(text, TargetType.MONTHLY)) == text

    def test_quarterly(self):
        assert parse_period("2025-Q3", TargetType.QUARTERLY) == QuarterlyPeriod(2025, 3)

    def test_yearly(self):
        assert parse_period("2025", TargetType.YEARLY) == YearlyPeriod(2025)

    @pytest.mark.parametrize("value", ["2025-13", "2025-00"])
    def test_out_of_range_month_rejected(self, value):
        with pytest.raises(InvalidPeriodError):
            parse_period(value, TargetType.MONTHLY)

    @pytest.mark.parametrize("value", ["2025-Q5", "2025-Q0"])
    def test_out_of_range_quarter_rejected(self, value):
        with pytest.raises(InvalidPeriodError):
            parse_period(value, TargetType.QUARTERLY)

    @pytest.mark.parametrize(
        "value, target_type",
        [
            ("2025-Q1", TargetType.MONTHLY),
            ("2025-01", TargetType.QUARTERLY),
            ("2025-01", TargetType.YEARLY),
            ("januari", TargetType.MONTHLY),
            ("", TargetType.YEARLY),
        ],
    )
    def test_format_must_match_type(self, value, target_type):
        with pytest.raises(InvalidPeriodError):
            parse_period(value, target_type)

    def test_unknown_type_rejected(self):
        with pytest.raises(InvalidPeriodError):
            parse_period("2025-01", "WEEKLY")

    def test_normalize_pads_month(self):
        assert normalize_period("2025-1", TargetType.MONTHLY) == "2025-01"
        assert normalize_period("2025-q2", TargetType.QUARTERLY) == "2025-Q2"


class TestPeriodDateRange:
    def test_february_non_leap(self):
        assert period_date_range("2025-02", TargetType.MONTHLY) == (date(2025, 2, 1), date(2025, 2, 28))

    def test_february_leap(self):
        assert period_date_range("2024-02", TargetType.MONTHLY) == (date(2024, 2, 1), date(2024, 2, 29))

    def test_first_quarter(self):
        assert period_date_range("2025-Q1", TargetType.QUARTERLY) == (date(2025, 1, 1), date(2025, 3, 31))

    def test_fourth_quarter(self):
        assert period_date_range("2025-Q4", TargetType.QUARTERLY) == (date(2025, 10, 1), date(2025, 12, 31))

    def test_year(self):
        assert period_date_range("2025", TargetType.YEARLY) == (date(2025, 1, 1), date(2025, 12, 31))

    def test_unknown_type_has_no_range(self):
        assert period_date_range("2025-01", "WEEKLY") is None

    def test_malformed_period_raises(self):
        with pytest.raises(InvalidPeriodError):
            period_date_range("2025-Q9", TargetType.QUARTERLY)

    def test_period_contains_its_own_dates(self):
        period = period_for_date(TargetType.QUARTERLY, date(2025, 5, 20))
        assert period.contains(date(2025, 4, 1))
        assert period.contains(date(2025, 6, 30))
        assert not period.contains(date(2025, 7, 1))
