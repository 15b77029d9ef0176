"""미팅 시간 문자열 ⇄ 시(hour) 실수 변환

미팅 시간은 12시간제("h:mm AM|PM ...") 또는 24시간제("HH:mm ...") 문자열이다.
    "10:30 AM ET" / "10:30 CET"
    "1:45 PM ET"  / "13:45 CET"  ==> 13.75

format_time()은 12시간제에서도 AM/PM을 붙이지 않는다 ("1:45").
기존 아젠다의 표시값이 바뀌지 않도록 이 동작을 유지한다.
"""

import re
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from review_agenda.core.exceptions import FormatError


class TimeFormat(str, Enum):
    """미팅 시간 표기 형식"""

    TWELVE_HOUR = "12h"
    TWENTY_FOUR_HOUR = "24h"


# 아젠다 meeting_time 입력 검증 규칙 (공백 허용)
MEETING_TIME_PATTERNS = [
    re.compile(r"^0*[1-9]:[0-5][0-9] (AM|PM).*$"),
    re.compile(r"^1[0-2]:[0-5][0-9] (AM|PM).*$"),
    re.compile(r"^0[0-9]:[0-5][0-9].*$"),
    re.compile(r"^1[0-9]:[0-5][0-9].*$"),
    re.compile(r"^2[0-3]:[0-5][0-9].*$"),
]


def is_valid_meeting_time(text: str | None) -> bool:
    """아젠다 meeting_time 입력값 검증"""
    if text is None or not text.strip():
        return True
    return any(pattern.match(text) for pattern in MEETING_TIME_PATTERNS)


def detect_format(text: str) -> TimeFormat:
    """AM/PM 포함 여부로 형식 판별 (대소문자 무시)"""
    upper = text.upper()
    if "AM" in upper or "PM" in upper:
        return TimeFormat.TWELVE_HOUR
    return TimeFormat.TWENTY_FOUR_HOUR


def parse_time(text: str, time_format: TimeFormat) -> float:
    """시간 문자열을 시(hour) 실수로 변환

    Args:
        text: "h:mm [AM|PM] ..." 형식 문자열
        time_format: detect_format()으로 판별한 형식

    Returns:
        예: "1:45 PM" ==> 13.75

    Raises:
        FormatError: "H:MM" 토큰이 없거나 숫자가 아님, 12시간제에 AM/PM 없음
    """
    # [hh:mm, AM, ET]
    parts = text.split()
    if not parts:
        raise FormatError(f"Empty time string: {text!r}")

    # [hh, mm]
    hhmm = parts[0].split(":")
    if len(hhmm) != 2:
        raise FormatError(f"Time must start with 'H:MM': {text!r}")
    try:
        hours = int(hhmm[0])
        minutes = int(hhmm[1])
    except ValueError as e:
        raise FormatError(f"Time must start with 'H:MM': {text!r}") from e

    if time_format == TimeFormat.TWELVE_HOUR:
        meridiem = parts[1].upper() if len(parts) > 1 else None
        if meridiem not in ("AM", "PM"):
            raise FormatError(f"12-hour time must be followed by AM or PM: {text!r}")
        # 12시는 보정하지 않음
        if hours < 12 and meridiem == "PM":
            hours += 12

    return hours + minutes / 60


def format_time(hours: float, time_format: TimeFormat) -> str:
    """시(hour) 실수를 "H:MM" 문자열로 변환

    예: 13.75 ==> "1:45" (12시간제), "13:45" (24시간제)
    """
    value = Decimal(repr(hours))
    hour = int(value)
    minute = int(((value - hour) * 60).quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    if minute == 60:
        minute = 0
        hour += 1

    if time_format == TimeFormat.TWELVE_HOUR and hour >= 13:
        hour -= 12

    return f"{hour}:{minute:02d}"
