from datetime import datetime

from utils.business_time import (
    DAY_MS,
    business_day_start,
    current_week_range,
    format_date,
    format_time,
    from_millis,
    is_same_business_day,
    iso_utc,
    to_millis,
    trailing_business_days,
    weekday_initial,
)


def ms(*args) -> int:
    return to_millis(datetime(*args))


def test_business_day_after_six_is_same_date():
    assert business_day_start(datetime(2024, 1, 10, 6, 1)) == ms(2024, 1, 10, 6)
    assert business_day_start(datetime(2024, 1, 10, 6, 0)) == ms(2024, 1, 10, 6)
    assert business_day_start(datetime(2024, 1, 10, 23, 59, 59)) == ms(2024, 1, 10, 6)


def test_business_day_before_six_belongs_to_previous_date():
    assert business_day_start(datetime(2024, 1, 10, 5, 30)) == ms(2024, 1, 9, 6)
    assert business_day_start(datetime(2024, 1, 10, 0, 0)) == ms(2024, 1, 9, 6)
    # month and leap-day rollover
    assert business_day_start(datetime(2024, 3, 1, 2, 0)) == ms(2024, 2, 29, 6)
    assert business_day_start(datetime(2024, 1, 1, 1, 0)) == ms(2023, 12, 31, 6)


def test_business_day_accepts_epoch_millis():
    assert business_day_start(ms(2024, 1, 10, 5, 59, 59)) == ms(2024, 1, 9, 6)


def test_business_day_is_idempotent():
    for t in (ms(2024, 1, 10, 5, 30), ms(2024, 1, 10, 6, 0), ms(2024, 1, 10, 18, 45)):
        start = business_day_start(t)
        assert business_day_start(start) == start


def test_is_same_business_day():
    assert is_same_business_day(ms(2024, 1, 9, 22, 0), ms(2024, 1, 10, 3, 0))
    assert not is_same_business_day(ms(2024, 1, 10, 5, 59), ms(2024, 1, 10, 6, 0))


def test_display_formatting_uses_business_date():
    assert format_date(ms(2024, 1, 10, 5, 30)) == "09/01/2024"
    assert format_date(ms(2024, 1, 10, 6, 1)) == "10/01/2024"
    assert format_time(ms(2024, 1, 10, 5, 30)) == "05:30"


def test_iso_utc_shape():
    assert iso_utc(0) == "1970-01-01T00:00:00.000Z"


def test_week_range_on_saturday():
    week = current_week_range(datetime(2024, 1, 13, 12, 0))
    assert week["start"] == ms(2024, 1, 12, 6)
    assert week["end"] == ms(2024, 1, 15, 6) - 1


def test_week_range_midweek_points_to_previous_friday():
    week = current_week_range(datetime(2024, 1, 10, 12, 0))
    assert week["start"] == ms(2024, 1, 5, 6)


def test_week_range_early_monday_still_in_weekend():
    assert current_week_range(datetime(2024, 1, 15, 3, 0))["start"] == ms(2024, 1, 12, 6)
    assert current_week_range(datetime(2024, 1, 15, 7, 0))["start"] == ms(2024, 1, 12, 6)


def test_week_range_early_friday_belongs_to_thursday():
    assert current_week_range(datetime(2024, 1, 12, 5, 0))["start"] == ms(2024, 1, 5, 6)
    assert current_week_range(datetime(2024, 1, 12, 6, 0))["start"] == ms(2024, 1, 12, 6)


def test_week_range_length_and_anchor():
    for day in range(8, 22):
        week = current_week_range(datetime(2024, 1, day, 14, 0))
        assert week["end"] - week["start"] == 3 * DAY_MS - 1
        start = from_millis(week["start"])
        assert start.weekday() == 4
        assert (start.hour, start.minute, start.second, start.microsecond) == (6, 0, 0, 0)


def test_trailing_business_days():
    days = trailing_business_days(datetime(2024, 1, 10, 3, 0))
    assert len(days) == 7
    assert days[-1] == ms(2024, 1, 9, 6)
    assert days[0] == ms(2024, 1, 3, 6)
    assert days == sorted(days)


def test_weekday_initial():
    assert weekday_initial(ms(2024, 1, 14, 10, 0)) == "D"
    assert weekday_initial(ms(2024, 1, 15, 3, 0)) == "D"
    assert weekday_initial(ms(2024, 1, 12, 20, 0)) == "S"
