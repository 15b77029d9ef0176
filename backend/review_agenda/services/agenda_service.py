"""아젠다 서비스

아젠다/아이템 CRUD, 순서 압축, 아젠다 간 이동, 재계산 작업 처리.
쓰기는 저장소 이벤트 버스를 통해 ChangeEventCoordinator로 전달된다.
"""

import logging
from datetime import date
from typing import Any

from review_agenda.core.constants import AGENDA_ITEM_SEMAPHORE
from review_agenda.core.request_context import RequestContext
from review_agenda.repositories.agenda.interface import IAgendaRepository
from review_agenda.schemas.agenda import (
    AgendaItemListResponse,
    AgendaItemResponse,
    AgendaRecord,
    AgendaResponse,
    CompressOrderingResponse,
    CreateAgendaItemRequest,
    MoveAgendaItemRequest,
    MoveAgendaItemResponse,
    UpdateAgendaItemRequest,
    UpdateAgendaRequest,
)
from review_agenda.services.agenda.coordinator import ChangeEventCoordinator
from review_agenda.services.agenda.dispatch import InMemoryTaskDispatcher, TaskDispatcher
from review_agenda.services.agenda.move import AgendaItemMover
from review_agenda.services.agenda.sequence import AgendaItemSequence

logger = logging.getLogger(__name__)


class AgendaService:
    """아젠다 서비스

    인스턴스 하나가 비즈니스 트랜잭션 하나(요청 1건 / 작업 1회)에 대응한다.
    """

    def __init__(
        self,
        repository: IAgendaRepository,
        context: RequestContext | None = None,
        dispatcher: TaskDispatcher | None = None,
    ):
        self.repository = repository
        self.context = context or RequestContext()
        self.dispatcher = dispatcher or InMemoryTaskDispatcher()

        self.coordinator = ChangeEventCoordinator(repository, self.context)
        self.coordinator.subscribe()

    # ===== Agenda =====

    async def get_agenda(self, agenda_id: str) -> AgendaResponse:
        agenda = await self._require_agenda(agenda_id)
        return AgendaResponse.model_validate(agenda.model_dump())

    async def update_agenda(self, agenda_id: str, data: UpdateAgendaRequest) -> AgendaResponse:
        """아젠다 수정 (미팅 시간이 바뀌면 아이템 시간 재계산)"""
        await self._require_agenda(agenda_id)

        values = data.model_dump(exclude_unset=True)
        # 빈 문자열은 미팅 시간 없음으로 취급
        if "meeting_time" in values and not (values["meeting_time"] or "").strip():
            values["meeting_time"] = None

        agenda = await self.repository.update_agenda(agenda_id, values)
        logger.info(f"Agenda updated: agenda={agenda_id}, fields={sorted(values)}")
        return AgendaResponse.model_validate(agenda.model_dump())

    async def compress_item_ordering(self, agenda_id: str) -> CompressOrderingResponse:
        """order 번호 빈 칸 제거 ("2, 3, 6" → "1, 2, 3")"""
        await self._require_agenda(agenda_id)

        sequence = await AgendaItemSequence.load(self.repository, agenda_id)
        sequence.compress_agenda_item_ordering()
        updated = await sequence.save_changed_records()

        logger.info(f"Agenda item ordering compressed: agenda={agenda_id}, updated={updated}")
        return CompressOrderingResponse(agenda_id=agenda_id, updated_count=updated)

    async def recalculate_agenda(self, agenda_id: str, meeting_time: str | None) -> int:
        """순서 압축 + 시작/종료 시간 재계산 (이동 후 원래 아젠다 정리용)

        아이템 저장으로 인한 변경 알림은 처리하지 않는다.

        Returns:
            저장한 아이템 수

        Raises:
            FormatError: meeting_time 형식 오류
            PersistenceError: 저장 실패
        """
        self.context.set(AGENDA_ITEM_SEMAPHORE, True)

        sequence = await AgendaItemSequence.load(self.repository, agenda_id)
        sequence.compress_agenda_item_ordering()
        sequence.update_start_end_times(meeting_time)
        return await sequence.save_changed_records()

    async def deactivate_past_agendas(self, today: date) -> list[AgendaRecord]:
        """meeting_date가 오늘 이전인 활성 아젠다 비활성화"""
        agendas = await self.repository.deactivate_agendas_before(today)
        if not agendas:
            logger.info("No past Agendas found.")
        for agenda in agendas:
            logger.info(f"Deactivated agenda: {agenda.name} ({agenda.id})")
        return agendas

    # ===== AgendaItem =====

    async def list_items(self, agenda_id: str) -> AgendaItemListResponse:
        await self._require_agenda(agenda_id)
        items = await self.repository.list_items(agenda_id)
        return AgendaItemListResponse(
            items=[AgendaItemResponse.model_validate(item.model_dump()) for item in items]
        )

    async def create_item(
        self, agenda_id: str, data: CreateAgendaItemRequest
    ) -> AgendaItemResponse:
        """아이템 생성

        order를 지정하면 해당 자리 이후 아이템이 밀려나고 시간이 재계산된다.
        """
        await self._require_agenda(agenda_id)

        values = data.model_dump(exclude_unset=True)
        if values.get("document_id"):
            await self._apply_document_info(values, values["document_id"])

        created = await self.repository.create_item(agenda_id, values)
        logger.info(f"Agenda item created: agenda={agenda_id}, item={created.id}")
        return await self._item_response(created.id)

    async def update_item(self, item_id: str, data: UpdateAgendaItemRequest) -> AgendaItemResponse:
        """아이템 수정 (보낸 필드만 반영)"""
        item = await self.repository.get_item(item_id)
        if not item:
            raise ValueError("AGENDA_ITEM_NOT_FOUND")

        values = data.model_dump(exclude_unset=True)
        if "document_id" in values:
            new_document_id = values["document_id"]
            if new_document_id and new_document_id != item.document_id:
                await self._apply_document_info(values, new_document_id)
            elif not new_document_id and item.document_id:
                # 문서 연결 해제: PM은 비우고 topic은 유지
                values["project_owner"] = None

        await self.repository.update_item(item_id, values)
        return await self._item_response(item_id)

    async def delete_item(self, item_id: str) -> None:
        await self.repository.delete_item(item_id)
        logger.info(f"Agenda item deleted: item={item_id}")

    async def move_item(
        self, item_id: str, data: MoveAgendaItemRequest
    ) -> MoveAgendaItemResponse:
        """아이템을 다른 아젠다로 이동

        원래 아젠다 재계산은 dispatcher로 예약된다 (커밋 후 실행).
        """
        item = await self.repository.get_item(item_id)
        if not item:
            raise ValueError("AGENDA_ITEM_NOT_FOUND")

        mover = AgendaItemMover(self.repository, self.context, self.dispatcher)
        if item.agenda_id != data.agenda_id:
            await self._require_agenda(data.agenda_id)
            move_request_id = await self.repository.create_move_request(item_id, data.agenda_id)
        else:
            # 같은 아젠다는 mover가 거부
            move_request_id = None

        return await mover.move_item(item_id, item.agenda_id, data.agenda_id, move_request_id)

    # ===== Helpers =====

    async def _require_agenda(self, agenda_id: str) -> AgendaRecord:
        agenda = await self.repository.get_agenda(agenda_id)
        if not agenda:
            raise ValueError("AGENDA_NOT_FOUND")
        return agenda

    async def _item_response(self, item_id: str) -> AgendaItemResponse:
        # 변경 알림 처리 중 order/시간이 바뀌었을 수 있으므로 다시 조회
        item = await self.repository.get_item(item_id)
        if not item:
            raise ValueError("AGENDA_ITEM_NOT_FOUND")
        return AgendaItemResponse.model_validate(item.model_dump())

    async def _apply_document_info(self, values: dict[str, Any], document_id: str) -> None:
        """문서 정보로 topic/project_owner/document_owner 채우기"""
        document = await self.repository.get_document(document_id)
        if not document:
            raise ValueError("DOCUMENT_NOT_FOUND")

        values["topic"] = document.document_number
        if document.project_manager is not None:
            values["project_owner"] = document.project_manager
        if document.project_manager is None or document.owner != document.project_manager:
            values["document_owner"] = document.owner
