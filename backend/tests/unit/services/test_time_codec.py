"""미팅 시간 변환 단위 테스트"""

import pytest

from review_agenda.core.exceptions import FormatError
from review_agenda.services.agenda.time_codec import (
    TimeFormat,
    detect_format,
    format_time,
    is_valid_meeting_time,
    parse_time,
)


# ===== detect_format =====


@pytest.mark.parametrize(
    "text,expected",
    [
        ("10:30 AM ET", TimeFormat.TWELVE_HOUR),
        ("1:30 PM ET", TimeFormat.TWELVE_HOUR),
        ("9:00 am", TimeFormat.TWELVE_HOUR),
        ("10:30 CET", TimeFormat.TWENTY_FOUR_HOUR),
        ("13:30", TimeFormat.TWENTY_FOUR_HOUR),
    ],
)
def test_detect_format(text, expected):
    """AM/PM 포함 여부(대소문자 무시)로 형식 판별"""
    assert detect_format(text) == expected


# ===== parse_time =====


def test_parse_twelve_hour_pm():
    """오후 시간은 12를 더함"""
    assert parse_time("1:45 PM", TimeFormat.TWELVE_HOUR) == 13.75


def test_parse_twelve_hour_am_with_timezone():
    """타임존 토큰은 무시"""
    assert parse_time("10:30 AM ET", TimeFormat.TWELVE_HOUR) == 10.5


def test_parse_twelve_hour_noon_not_adjusted():
    """12시는 PM이어도 보정하지 않음"""
    assert parse_time("12:15 PM", TimeFormat.TWELVE_HOUR) == 12.25


def test_parse_twelve_hour_lowercase_meridiem():
    """소문자 pm도 인식"""
    assert parse_time("2:00 pm", TimeFormat.TWELVE_HOUR) == 14.0


def test_parse_twenty_four_hour():
    """24시간제는 그대로"""
    assert parse_time("13:45 CET", TimeFormat.TWENTY_FOUR_HOUR) == 13.75


def test_parse_twenty_four_hour_ignores_pm_adjustment():
    """24시간제 형식이면 두 번째 토큰을 보지 않음"""
    assert parse_time("09:00", TimeFormat.TWENTY_FOUR_HOUR) == 9.0


@pytest.mark.parametrize("text", ["", "   ", "930 AM", "9-30", "a:bc PM", "9:30:00 AM"])
def test_parse_invalid_hhmm_raises(text):
    """H:MM 토큰이 없거나 숫자가 아니면 FormatError"""
    with pytest.raises(FormatError):
        parse_time(text, TimeFormat.TWELVE_HOUR)


def test_parse_twelve_hour_without_meridiem_raises():
    """12시간제인데 AM/PM 토큰이 없으면 FormatError"""
    with pytest.raises(FormatError) as exc_info:
        parse_time("9:30", TimeFormat.TWELVE_HOUR)

    assert exc_info.value.error_code == "INVALID_TIME_FORMAT"


# ===== format_time =====


def test_format_twelve_hour_has_no_suffix():
    """12시간제 출력은 13시 이상에서 12를 빼고 AM/PM을 붙이지 않음"""
    assert format_time(13.75, TimeFormat.TWELVE_HOUR) == "1:45"


def test_format_twelve_hour_noon_unchanged():
    assert format_time(12.5, TimeFormat.TWELVE_HOUR) == "12:30"


def test_format_twenty_four_hour():
    assert format_time(13.75, TimeFormat.TWENTY_FOUR_HOUR) == "13:45"


def test_format_pads_minutes_not_hours():
    """분은 두 자리, 시는 패딩 없음"""
    assert format_time(9.05, TimeFormat.TWENTY_FOUR_HOUR) == "9:03"
    assert format_time(9.0, TimeFormat.TWELVE_HOUR) == "9:00"


def test_format_rounds_to_nearest_minute():
    """20분 = 0.333...시간 누적 오차는 반올림으로 정리"""
    hours = 9.0 + 20 / 60 + 20 / 60 + 20 / 60
    assert format_time(hours, TimeFormat.TWENTY_FOUR_HOUR) == "10:00"


def test_format_minute_sixty_rolls_over():
    """반올림 결과 60분이면 다음 시로 넘어감"""
    assert format_time(9.9999, TimeFormat.TWENTY_FOUR_HOUR) == "10:00"


def test_parse_format_round_trip():
    """parse → format 왕복 (12시간제는 접미사 없이)"""
    hours = parse_time("1:45 PM", TimeFormat.TWELVE_HOUR)

    assert hours == 13.75
    assert format_time(hours, TimeFormat.TWELVE_HOUR) == "1:45"


# ===== is_valid_meeting_time =====


@pytest.mark.parametrize(
    "text",
    [None, "", "9:00 AM ET", "09:00 AM", "12:30 PM", "08:15 CET", "13:30", "23:59 UTC"],
)
def test_valid_meeting_times(text):
    assert is_valid_meeting_time(text) is True


@pytest.mark.parametrize("text", ["9:00", "24:00", "9:60 AM", "noon", "9:00AM"])
def test_invalid_meeting_times(text):
    assert is_valid_meeting_time(text) is False
