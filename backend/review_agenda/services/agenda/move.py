"""아젠다 간 아이템 이동

대상 아젠다에 아이템을 새로 만들고(동기), 원래 아이템을 삭제한 뒤
원래 아젠다의 순서 압축/시간 재계산은 비동기 태스크로 미룬다.
"""

import logging

from review_agenda.core.constants import (
    AGENDA_ID,
    AGENDA_ITEM_RECALC_TASK,
    AGENDA_ITEM_SEMAPHORE,
    AGENDA_MEETING_TIME,
)
from review_agenda.core.exceptions import InvalidOperation
from review_agenda.core.request_context import RequestContext
from review_agenda.repositories.agenda.interface import IAgendaRepository
from review_agenda.schemas.agenda import MoveAgendaItemResponse
from review_agenda.services.agenda.dispatch import TaskDispatcher

logger = logging.getLogger(__name__)


class AgendaItemMover:
    """Cross-Agenda Move"""

    def __init__(
        self,
        repository: IAgendaRepository,
        context: RequestContext,
        dispatcher: TaskDispatcher,
    ):
        self.repository = repository
        self.context = context
        self.dispatcher = dispatcher

    async def move_item(
        self,
        item_id: str,
        from_agenda_id: str,
        to_agenda_id: str,
        move_request_id: str | None = None,
    ) -> MoveAgendaItemResponse:
        """아이템을 다른 아젠다로 이동

        Args:
            item_id: 이동할 원본 아이템 ID
            from_agenda_id: 원래 아젠다 ID
            to_agenda_id: 대상 아젠다 ID
            move_request_id: 처리 후 삭제할 이동 요청 레코드 ID

        Returns:
            이동 결과 (item_id는 대상 아젠다에 새로 생성된 아이템 ID)

        Raises:
            InvalidOperation: 같은 아젠다로 이동 (변경 전 거부)
            ValueError: AGENDA_ITEM_NOT_FOUND
        """
        if from_agenda_id == to_agenda_id:
            raise InvalidOperation("Select a different Agenda", "SAME_AGENDA")

        item = await self.repository.get_item(item_id)
        if not item or item.agenda_id != from_agenda_id:
            raise ValueError("AGENDA_ITEM_NOT_FOUND")

        # 대상 아젠다에 추가 (order 없이 생성 → 일반 INSERT 경로가 시간 계산)
        new_item = await self.repository.create_item(
            to_agenda_id,
            {
                "duration": item.duration,
                "topic": item.topic,
                "project_owner": item.project_owner,
                "document_owner": item.document_owner,
                "document_id": item.document_id,
            },
        )

        if item.document_id:
            await self.repository.replace_document_agenda(
                item.document_id, from_agenda_id, to_agenda_id
            )

        # 아래 삭제가 원래 아젠다를 동기 재계산하지 않도록 플래그를 직접 설정
        self.context.set(AGENDA_ITEM_SEMAPHORE, True)

        await self.repository.delete_item(item.id)

        meeting_time = await self.repository.get_meeting_time(from_agenda_id)
        recalc_scheduled = meeting_time is not None
        if recalc_scheduled:
            await self.dispatcher.schedule(
                AGENDA_ITEM_RECALC_TASK,
                {AGENDA_ID: from_agenda_id, AGENDA_MEETING_TIME: meeting_time},
            )

        if move_request_id:
            await self.repository.delete_move_request(move_request_id)

        logger.info(
            f"Agenda item moved: item={item.id} -> {new_item.id}, "
            f"agenda={from_agenda_id} -> {to_agenda_id}, recalc_scheduled={recalc_scheduled}"
        )
        return MoveAgendaItemResponse(
            item_id=new_item.id,
            from_agenda_id=from_agenda_id,
            to_agenda_id=to_agenda_id,
            recalc_scheduled=recalc_scheduled,
        )
