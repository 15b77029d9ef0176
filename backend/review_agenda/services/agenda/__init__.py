"""아젠다 순서/시간 계산 엔진 모듈"""

from review_agenda.services.agenda.item import AgendaItem
from review_agenda.services.agenda.sequence import AgendaItemSequence
from review_agenda.services.agenda.time_codec import (
    TimeFormat,
    detect_format,
    format_time,
    parse_time,
)

__all__ = [
    "AgendaItem",
    "AgendaItemSequence",
    "TimeFormat",
    "detect_format",
    "format_time",
    "parse_time",
]
