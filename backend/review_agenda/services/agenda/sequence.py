"""아젠다 아이템 시퀀스

한 아젠다의 아이템 목록을 order 순으로 보유하고, 순서 불변식 유지(shift/compress)와
시작/종료 시간 재계산을 수행한다. 작업 1회마다 새로 로드하고 작업 후 버린다.
"""

import logging
from typing import TYPE_CHECKING

from review_agenda.core.telemetry import get_agenda_metrics
from review_agenda.services.agenda.item import AgendaItem
from review_agenda.services.agenda.time_codec import (
    TimeFormat,
    detect_format,
    format_time,
    parse_time,
)

if TYPE_CHECKING:
    from review_agenda.repositories.agenda.interface import IAgendaRepository

logger = logging.getLogger(__name__)


def _order_key(item: AgendaItem) -> tuple[bool, int]:
    # null order는 마지막 (안정 정렬)
    return (item.order is None, item.order or 0)


class AgendaItemSequence:
    """아젠다 아이템 시퀀스

    모든 알고리즘은 items가 order 오름차순으로 정렬되어 있다고 가정한다.
    """

    def __init__(
        self,
        agenda_id: str,
        items: list[AgendaItem],
        repository: "IAgendaRepository",
    ):
        self.agenda_id = agenda_id
        self.items = items
        self.repository = repository
        self.time_format: TimeFormat | None = None

    @classmethod
    async def load(
        cls, repository: "IAgendaRepository", agenda_id: str
    ) -> "AgendaItemSequence":
        """저장소에서 아젠다 아이템을 order 순으로 로드"""
        items = await repository.load_items_for_agenda(agenda_id)
        return cls(agenda_id, items, repository)

    @property
    def changed_items(self) -> list[AgendaItem]:
        return [item for item in self.items if item.dirty]

    def _find(self, item_id: str) -> AgendaItem | None:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    # =========================================================================
    # 순서 알고리즘
    # =========================================================================

    def shift_down_after(self, item_id: str) -> None:
        """앵커 아이템이 차지한 order 자리부터 뒤쪽 아이템을 한 칸씩 밀어냄 (order 증가)

        삽입되었거나 더 앞 순서로 이동한 아이템에 사용한다.
        연속된 구간이 끝나는(빈 번호가 나오는) 지점에서 멈춘다.
        """
        anchor = self._find(item_id)
        if anchor is None:
            logger.warning(
                "Anchor item not found: agenda_id=%s, item_id=%s", self.agenda_id, item_id
            )
            return
        if anchor.order is None:
            return

        cursor = anchor.order
        for item in self.items:
            if item.order is None or item == anchor:
                continue
            if item.order < cursor:
                continue
            if item.order == cursor:
                item.set_order(cursor + 1)
                cursor += 1
            else:
                break

    def shift_up_before(self, item_id: str) -> None:
        """앵커 아이템 order 자리부터 앞쪽 아이템을 한 칸씩 당김 (order 감소)

        더 뒤 순서로 이동한 아이템에 사용한다. 뒤에서부터 역순으로 순회한다.
        """
        anchor = self._find(item_id)
        if anchor is None:
            logger.warning(
                "Anchor item not found: agenda_id=%s, item_id=%s", self.agenda_id, item_id
            )
            return
        if anchor.order is None:
            return

        cursor = anchor.order
        for item in reversed(self.items):
            if item.order is None or item == anchor:
                continue
            if item.order > cursor:
                continue
            if item.order == cursor:
                item.set_order(cursor - 1)
                cursor -= 1
            else:
                break

    def compress_agenda_item_ordering(self) -> None:
        """order 번호의 빈 칸 제거 (1부터 연속, 상대 순서 유지)"""
        expected = 1
        for item in self.items:
            if item.order is None:
                continue
            if item.order > expected:
                item.set_order(expected)
            expected += 1

    # =========================================================================
    # 시간 재계산
    # =========================================================================

    def update_start_end_times(self, meeting_time: str | None) -> None:
        """미팅 시간과 duration으로 아이템별 시작/종료 시간 재계산

        duration이 없는 아이템을 만나면 그 아이템과 이후 모든 아이템의 시간을 비운다.
        order가 없는 아이템은 시간을 비우고 누적 시간에 영향을 주지 않는다.

        Raises:
            FormatError: meeting_time 형식 오류
        """
        # 호출자가 직전에 order를 바꿨을 수 있음
        self.items.sort(key=_order_key)

        if meeting_time is None:
            for item in self.items:
                item.clear_times()
            return

        self.time_format = detect_format(meeting_time)
        current = parse_time(meeting_time, self.time_format)

        stop_calculating = False
        for item in self.items:
            if item.order is None:
                item.clear_times()
                continue
            if item.duration is None:
                stop_calculating = True

            if stop_calculating:
                item.clear_times()
            else:
                item.set_start_time(format_time(current, self.time_format))
                current += item.duration / 60
                item.set_end_time(format_time(current, self.time_format))

    # =========================================================================
    # 저장
    # =========================================================================

    async def save_changed_records(self) -> int:
        """변경된 아이템만 한 번에 저장

        Returns:
            저장한 아이템 수 (변경이 없으면 0, 저장소 호출 없음)

        Raises:
            PersistenceError: 저장 실패 (부분 저장 없음)
        """
        changed = self.changed_items
        if not changed:
            return 0

        await self.repository.save_items(changed)
        logger.info(
            "Agenda items saved: agenda_id=%s, count=%d", self.agenda_id, len(changed)
        )

        metrics = get_agenda_metrics()
        if metrics:
            metrics.saved_items.add(len(changed), {"agenda_id": self.agenda_id})

        return len(changed)
