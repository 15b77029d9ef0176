"""아젠다 변경 이벤트 코디네이터

아이템/아젠다 변경 알림을 받아 어떤 시퀀스 작업을 수행할지 결정한다.

재진입 방지:
    시퀀스 저장이 다시 아이템 변경 알림을 발생시키므로, RequestContext의 플래그로
    트랜잭션당 최초 알림 1건만 처리한다. 플래그는 트랜잭션 안에서 해제하지 않는다.
"""

import logging

from review_agenda.core.constants import AGENDA_ITEM_SEMAPHORE
from review_agenda.core.request_context import RequestContext
from review_agenda.repositories.agenda.interface import IAgendaRepository
from review_agenda.schemas.agenda_events import (
    AgendaChangeNotification,
    ItemChange,
    ItemChangeNotification,
)
from review_agenda.services.agenda.sequence import AgendaItemSequence

logger = logging.getLogger(__name__)


class ChangeEventCoordinator:
    """변경 알림 → 시퀀스 작업 디스패처"""

    def __init__(self, repository: IAgendaRepository, context: RequestContext):
        self.repository = repository
        self.context = context

    def subscribe(self) -> None:
        """저장소 이벤트 버스에 핸들러 등록"""
        self.repository.events.subscribe_item_changes(self.handle_item_change)
        self.repository.events.subscribe_agenda_changes(self.handle_agenda_change)

    # =========================================================================
    # 아이템 변경
    # =========================================================================

    async def handle_item_change(self, notification: ItemChangeNotification) -> None:
        """아이템 INSERT/UPDATE/DELETE 알림 처리

        Raises:
            FormatError: 미팅 시간 형식 오류
            PersistenceError: 저장 실패
        """
        if not self.context.acquire_semaphore(AGENDA_ITEM_SEMAPHORE):
            logger.debug(
                "Nested item change suppressed: event=%s, records=%d",
                notification.event.value,
                len(notification.changes),
            )
            return

        # 단일 레코드 작업만 지원 (예외 없이 무시)
        if len(notification.changes) != 1:
            logger.debug(
                "Multi-record item change ignored: event=%s, records=%d",
                notification.event.value,
                len(notification.changes),
            )
            return

        await self._dispatch(notification.changes[0])

    async def _dispatch(self, change: ItemChange) -> None:
        old_order, new_order = change.old_order, change.new_order
        old_duration, new_duration = change.old_duration, change.new_duration

        # 새로 배치됨
        if old_order is None and new_order is not None:
            sequence = await AgendaItemSequence.load(self.repository, change.agenda_id)
            sequence.shift_down_after(change.item_id)
            await self._recompute_and_save(sequence, save_always=True)
            logger.info(
                "Agenda item placed: agenda_id=%s, item_id=%s, order=%s",
                change.agenda_id,
                change.item_id,
                new_order,
            )
            return

        # 순서 변경
        if old_order is not None and new_order is not None and old_order != new_order:
            sequence = await AgendaItemSequence.load(self.repository, change.agenda_id)
            if new_order < old_order:
                sequence.shift_down_after(change.item_id)
            else:
                sequence.shift_up_before(change.item_id)
            await self._recompute_and_save(sequence, save_always=True)
            logger.info(
                "Agenda item reordered: agenda_id=%s, item_id=%s, order=%s->%s",
                change.agenda_id,
                change.item_id,
                old_order,
                new_order,
            )
            return

        # 순서에서 빠짐
        if old_order is not None and new_order is None:
            if old_duration is not None:
                sequence = await AgendaItemSequence.load(self.repository, change.agenda_id)
                await self._recompute_and_save(sequence)
            return

        # 순서는 그대로, duration만 변경
        if old_duration != new_duration:
            sequence = await AgendaItemSequence.load(self.repository, change.agenda_id)
            await self._recompute_and_save(sequence)

    async def _recompute_and_save(
        self, sequence: AgendaItemSequence, save_always: bool = False
    ) -> None:
        """미팅 시간이 있으면 시간 재계산 후 저장

        save_always=False면 미팅 시간이 없을 때 저장도 하지 않는다.
        """
        meeting_time = await self.repository.get_meeting_time(sequence.agenda_id)
        if meeting_time is not None:
            sequence.update_start_end_times(meeting_time)
        elif not save_always:
            return
        await sequence.save_changed_records()

    # =========================================================================
    # 아젠다 변경
    # =========================================================================

    async def handle_agenda_change(self, notification: AgendaChangeNotification) -> None:
        """아젠다 미팅 시간 변경 알림 처리 (재진입 플래그와 무관)

        Raises:
            FormatError: 새 미팅 시간 형식 오류
            PersistenceError: 저장 실패
        """
        if len(notification.changes) != 1:
            logger.debug("Multi-record agenda change ignored: records=%d", len(notification.changes))
            return

        change = notification.changes[0]
        if change.old_meeting_time == change.new_meeting_time:
            return

        sequence = await AgendaItemSequence.load(self.repository, change.agenda_id)
        sequence.update_start_end_times(change.new_meeting_time)
        saved = await sequence.save_changed_records()
        logger.info(
            "Agenda meeting time changed: agenda_id=%s, %r->%r, items=%d",
            change.agenda_id,
            change.old_meeting_time,
            change.new_meeting_time,
            saved,
        )
