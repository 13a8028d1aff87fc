"""Tests for CalendarValue construction, arithmetic and formatting."""

from datetime import datetime, timezone
from unittest.mock import patch
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import pytest
from loguru import logger

from timetrackr.config.models import Settings, TimeTrackrConfig
from timetrackr.core.calendar_value import CalendarValue
from timetrackr.core.models import ParseOutcome, Unit

FMT = "Y-m-d H:i:s"
FROZEN = datetime(2024, 6, 1, 12, 30, 45, tzinfo=ZoneInfo("UTC"))


def at(text: str, tz: str = "UTC") -> CalendarValue:
    return CalendarValue.on(FMT, text, tz)


class TestConstruction:
    """Test now() and on()."""

    def test_now_uses_given_timezone(self):
        value = CalendarValue.now("Asia/Kuala_Lumpur")
        assert value.timezone == "Asia/Kuala_Lumpur"
        assert value.outcome is ParseOutcome.NOW

    def test_now_is_current_time(self):
        value = CalendarValue.now("UTC")
        wall = datetime.now(timezone.utc).timestamp()
        assert abs(value.timestamp - wall) <= 2

    def test_now_uses_configured_timezone(self, isolated_config):
        isolated_config.save(Settings(timetrackr=TimeTrackrConfig(timezone="Asia/Tokyo")))
        assert CalendarValue.now().timezone == "Asia/Tokyo"
        assert at("2020-01-01 00:00:00", None).timezone == "Asia/Tokyo"

    def test_default_timezone_is_utc(self):
        assert CalendarValue.now().timezone == "UTC"

    def test_on_parses_text(self):
        value = CalendarValue.on("d/m/Y H:i", "14/03/2021 09:05", "UTC")
        assert str(value) == "2021-03-14 09:05:00"
        assert value.outcome is ParseOutcome.PARSED

    def test_on_date_only_is_midnight(self):
        assert str(CalendarValue.on("d/m/Y", "14/03/2021", "UTC")) == "2021-03-14 00:00:00"

    def test_on_twelve_hour_clock(self):
        value = CalendarValue.on("Y-m-d h:i A", "2021-03-14 04:05 PM", "UTC")
        assert value.to_string() == "2021-03-14 16:05:00"

    def test_on_native_pattern(self):
        value = CalendarValue.on("%Y/%m/%d %H:%M", "2021/03/14 09:05", "UTC")
        assert str(value) == "2021-03-14 09:05:00"

    def test_on_epoch_seconds(self):
        assert str(CalendarValue.on("U", "1615680000", "UTC")) == "2021-03-14 00:00:00"

    def test_on_is_wall_clock_in_timezone(self):
        value = at("2021-03-14 08:00:00", "Asia/Kuala_Lumpur")
        assert value.timestamp == 1615680000
        assert str(value) == "2021-03-14 08:00:00"

    def test_on_with_offset_converts_to_timezone(self):
        value = CalendarValue.on("Y-m-d H:i:s P", "2021-03-14 08:00:00 +08:00", "UTC")
        assert str(value) == "2021-03-14 00:00:00"

    def test_on_unparseable_falls_back_to_now(self):
        with patch("timetrackr.core.engine.current_instant", return_value=FROZEN):
            value = CalendarValue.on("d/m/Y", "not-a-date", "UTC")

        assert value.outcome is ParseOutcome.FALLBACK_TO_NOW
        assert str(value) == "2024-06-01 12:30:45"

    def test_on_unparseable_matches_now(self):
        value = CalendarValue.on("d/m/Y", "not-a-date", "UTC")
        assert abs(value.timestamp - CalendarValue.now("UTC").timestamp) <= 2

    @pytest.mark.parametrize(
        "format,text",
        [
            ("Y-m-d", "2021-02-30"),
            ("Y-m-d", "2021-03-14 trailing"),
            ("jS F Y", "14th March 2021"),
            ("U", "soon"),
            ("Y-m-d", None),
        ],
    )
    def test_on_never_raises_on_bad_input(self, format, text):
        value = CalendarValue.on(format, text, "UTC")
        assert value.outcome is ParseOutcome.FALLBACK_TO_NOW

    def test_fallback_is_logged(self):
        messages = []
        handler_id = logger.add(messages.append, level="WARNING")
        try:
            CalendarValue.on("d/m/Y", "not-a-date", "UTC")
        finally:
            logger.remove(handler_id)
        assert any("not-a-date" in message for message in messages)

    def test_invalid_timezone_raises(self):
        with pytest.raises(ZoneInfoNotFoundError):
            CalendarValue.now("Mars/Olympus")
        with pytest.raises(ZoneInfoNotFoundError):
            CalendarValue.on(FMT, "2020-01-01 00:00:00", "Mars/Olympus")

    def test_wraps_naive_datetime(self):
        value = CalendarValue(datetime(2021, 3, 14, 8), "Asia/Kuala_Lumpur")
        assert value.timestamp == 1615680000

    def test_wraps_aware_datetime_in_own_timezone(self):
        value = CalendarValue(datetime(2021, 3, 14, tzinfo=ZoneInfo("UTC")), "Asia/Kuala_Lumpur")
        assert str(value) == "2021-03-14 08:00:00"

    def test_equality_is_to_the_second(self):
        assert at("2021-03-14 08:00:00", "Asia/Kuala_Lumpur") == at("2021-03-14 00:00:00")
        assert at("2021-03-14 00:00:01") != at("2021-03-14 00:00:00")


class TestArithmetic:
    """Test the add family."""

    def test_add_returns_self_for_chaining(self):
        value = at("2020-01-01 00:00:00")
        assert value.add_day().add_hours(2).add_minute() is value
        assert str(value) == "2020-01-02 02:01:00"

    @pytest.mark.parametrize(
        "method,expected",
        [
            ("add_second", "2020-01-01 00:00:01"),
            ("add_minute", "2020-01-01 00:01:00"),
            ("add_hour", "2020-01-01 01:00:00"),
            ("add_day", "2020-01-02 00:00:00"),
            ("add_week", "2020-01-08 00:00:00"),
            ("add_year", "2021-01-01 00:00:00"),
            ("add_decade", "2030-01-01 00:00:00"),
            ("add_century", "2120-01-01 00:00:00"),
            ("add_millennium", "3020-01-01 00:00:00"),
        ],
    )
    def test_single_unit(self, method, expected):
        value = at("2020-01-01 00:00:00")
        getattr(value, method)()
        assert str(value) == expected

    def test_fractional_hours(self):
        assert str(at("2020-01-01 00:00:00").add_hours(1.5)) == "2020-01-01 01:30:00"

    def test_fractional_days(self):
        assert str(at("2020-01-01 00:00:00").add_days(0.25)) == "2020-01-01 06:00:00"

    def test_fractional_years_use_whole_months(self):
        assert str(at("2020-01-01 00:00:00").add_years(0.5)) == "2020-07-01 00:00:00"
        # 0.7 years is 8.4 months
        assert str(at("2020-01-01 00:00:00").add_years(0.7)) == "2020-09-01 00:00:00"

    def test_negative_amounts(self):
        value = at("2020-01-01 00:00:00").add_weeks(-1).add_seconds(-30)
        assert str(value) == "2019-12-24 23:59:30"

    def test_repeated_days_equal_sum(self):
        once = at("2020-02-28 12:00:00").add_days(2)
        twice = at("2020-02-28 12:00:00").add_days(1).add_days(1)
        assert once == twice
        assert str(once) == "2020-03-01 12:00:00"

    def test_leap_day_plus_year_clamps(self):
        assert str(at("2020-02-29 00:00:00").add_year()) == "2021-02-28 00:00:00"

    def test_year_multiples(self):
        base = "2020-02-29 10:00:00"
        assert at(base).add_decade() == at(base).add_years(10)
        assert at(base).add_century() == at(base).add_years(100)
        assert at(base).add_millennium() == at(base).add_years(1000)
        assert at(base).add_decades(2) == at(base).add_years(20)
        assert at(base).add_centuries(3) == at(base).add_years(300)
        assert at(base).add_millennia(2) == at(base).add_years(2000)

    @pytest.mark.parametrize(
        "method,amount,years",
        [
            ("add_decades", 0.7, 7),
            ("add_decades", 0.3, 3),
            ("add_centuries", 0.07, 7),
            ("add_millennia", 0.007, 7),
        ],
    )
    def test_fractional_year_multiples(self, method, amount, years):
        base = "2020-01-01 00:00:00"
        assert getattr(at(base), method)(amount) == at(base).add_years(years)

    def test_generic_add_accepts_names(self):
        assert str(at("2020-01-01 00:00:00").add(3, "days")) == "2020-01-04 00:00:00"
        assert str(at("2020-01-01 00:00:00").add(1, "Minute")) == "2020-01-01 00:01:00"
        assert str(at("2020-01-01 00:00:00").add(2, Unit.HOUR)) == "2020-01-01 02:00:00"
        assert str(at("2020-01-01 00:00:00").add("2", "centuries")) == "2220-01-01 00:00:00"

    def test_generic_add_rejects_unknown_unit(self):
        with pytest.raises(ValueError):
            at("2020-01-01 00:00:00").add(1, "fortnight")

    def test_add_seconds_keeps_timezone(self):
        value = at("2021-03-14 08:00:00", "Asia/Kuala_Lumpur").add_seconds(90)
        assert value.timezone == "Asia/Kuala_Lumpur"
        assert str(value) == "2021-03-14 08:01:30"


class TestFormatting:
    """Test to_string(), format() and to_array()."""

    def test_to_string_is_canonical(self):
        assert at("2021-03-04 05:06:07").to_string() == "2021-03-04 05:06:07"

    def test_format(self):
        value = at("2021-03-04 16:06:07")
        assert value.format("l, jS F Y g:i a") == "Thursday, 4th March 2021 4:06 pm"
        assert value.format("\\Y\\e\\a\\r: Y") == "Year: 2021"

    def test_to_array(self):
        fields = at("2021-03-14 16:05:07").to_array()
        assert fields == {
            "r": "Sun, 14 Mar 2021 16:05:07 +0000",
            "D": "Sun",
            "d": "14",
            "S": "th",
            "m": "03",
            "M": "Mar",
            "F": "March",
            "y": "21",
            "Y": "2021",
            "h": "04",
            "H": "16",
            "i": "05",
            "s": "07",
            "A": "PM",
            "a": "pm",
        }

    def test_to_array_uses_bound_timezone(self):
        fields = at("2021-03-14 08:00:00", "Asia/Kuala_Lumpur").to_array()
        assert fields["r"] == "Sun, 14 Mar 2021 08:00:00 +0800"
        assert fields["A"] == "AM"

    def test_repr(self):
        assert repr(at("2021-03-14 00:00:00")) == "CalendarValue('2021-03-14 00:00:00', timezone='UTC')"


class TestDaylightSaving:
    """Hours, minutes and seconds are elapsed time; days keep the time of day."""

    TZ = "America/New_York"

    def test_hours_across_fall_back(self):
        value = at("2021-11-07 00:30:00", self.TZ)
        start = value.timestamp
        value.add_hours(2)
        assert value.timestamp - start == 7200
        assert str(value) == "2021-11-07 01:30:00"
        assert value.format("T") == "EST"

    def test_hour_across_spring_forward(self):
        value = at("2021-03-14 01:30:00", self.TZ)
        start = value.timestamp
        value.add_hour()
        assert str(value) == "2021-03-14 03:30:00"
        assert value.timestamp - start == 3600

    def test_minutes_and_seconds_are_elapsed(self):
        value = at("2021-03-14 01:59:00", self.TZ).add_minute()
        assert str(value) == "2021-03-14 03:00:00"
        value = at("2021-03-14 01:59:59", self.TZ).add_second()
        assert str(value) == "2021-03-14 03:00:00"

    def test_day_keeps_time_of_day(self):
        value = at("2021-03-13 12:00:00", self.TZ)
        start = value.timestamp
        value.add_day()
        assert str(value) == "2021-03-14 12:00:00"
        assert value.timestamp - start == 23 * 3600
