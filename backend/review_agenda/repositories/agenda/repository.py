"""Agenda Repository (SQLAlchemy)

PostgreSQL 기반 아젠다/아이템 저장소. 세션의 트랜잭션 경계는 호출자가 관리한다.
"""

import logging
import uuid
from datetime import date
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from review_agenda.core.constants import AgendaStatus
from review_agenda.core.exceptions import PersistenceError
from review_agenda.models.agenda import Agenda, AgendaItem, AgendaItemMove
from review_agenda.models.document import Document
from review_agenda.schemas.agenda import AgendaItemRecord, AgendaRecord, DocumentRecord
from review_agenda.schemas.agenda_events import (
    AgendaChange,
    AgendaChangeNotification,
    ItemChange,
    ItemChangeNotification,
    ItemSnapshot,
    RecordEvent,
)
from review_agenda.services.agenda.events import RecordEventBus
from review_agenda.services.agenda.item import AgendaItem as AgendaItemState

logger = logging.getLogger(__name__)

SAVE_ERROR_PREFIX = "An error occurred saving one or more records: "


def _parse_uuid(value: str | None) -> uuid.UUID | None:
    if value is None:
        return None
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


def _item_record(item: AgendaItem) -> AgendaItemRecord:
    return AgendaItemRecord(
        id=str(item.id),
        agenda_id=str(item.agenda_id),
        order=item.order,
        duration=item.duration,
        start_time=item.start_time,
        end_time=item.end_time,
        topic=item.topic,
        project_owner=item.project_owner,
        document_owner=item.document_owner,
        document_id=str(item.document_id) if item.document_id else None,
    )


def _agenda_record(agenda: Agenda) -> AgendaRecord:
    return AgendaRecord(
        id=str(agenda.id),
        name=agenda.name,
        meeting_time=agenda.meeting_time,
        meeting_date=agenda.meeting_date,
        status=agenda.status,
    )


def _snapshot(item: AgendaItem) -> ItemSnapshot:
    return ItemSnapshot(order=item.order, duration=item.duration)


class AgendaRepository:
    """Agenda Repository (SQLAlchemy AsyncSession)"""

    def __init__(self, db: AsyncSession, events: RecordEventBus | None = None):
        self.db = db
        self.events = events or RecordEventBus()

    # =========================================================================
    # 엔진용
    # =========================================================================

    async def load_items_for_agenda(self, agenda_id: str) -> list[AgendaItemState]:
        """아젠다 아이템 로드 (order 오름차순, null 마지막)"""
        # order by 절은 shift/compress 알고리즘의 전제 조건
        query = (
            select(AgendaItem)
            .where(AgendaItem.agenda_id == _parse_uuid(agenda_id))
            .order_by(AgendaItem.order.asc().nulls_last(), AgendaItem.created_at.asc())
        )
        result = await self.db.execute(query)

        return [
            AgendaItemState(
                str(row.id),
                order=row.order,
                duration=row.duration,
                start_time=row.start_time,
                end_time=row.end_time,
            )
            for row in result.scalars().all()
        ]

    async def save_items(self, items: list[AgendaItemState]) -> None:
        """변경된 아이템 배치 저장 (SAVEPOINT 단위로 전부 또는 전무)"""
        if not items:
            return

        changes: list[ItemChange] = []
        try:
            async with self.db.begin_nested():
                ids = [_parse_uuid(item.id) for item in items]
                result = await self.db.execute(select(AgendaItem).where(AgendaItem.id.in_(ids)))
                rows = {str(row.id): row for row in result.scalars().all()}

                for item in items:
                    row = rows.get(item.id)
                    if row is None:
                        raise PersistenceError(f"{SAVE_ERROR_PREFIX}agenda item {item.id} not found")
                    old = _snapshot(row)
                    row.order = item.order
                    row.start_time = item.start_time
                    row.end_time = item.end_time
                    changes.append(
                        ItemChange(
                            agenda_id=str(row.agenda_id),
                            item_id=item.id,
                            old=old,
                            new=_snapshot(row),
                        )
                    )
                await self.db.flush()
        except SQLAlchemyError as e:
            raise PersistenceError(f"{SAVE_ERROR_PREFIX}{e}") from e

        await self.events.publish_item_change(
            ItemChangeNotification(event=RecordEvent.UPDATE, changes=changes)
        )

    async def get_meeting_time(self, agenda_id: str) -> str | None:
        """아젠다 미팅 시간 조회"""
        query = select(Agenda.meeting_time).where(Agenda.id == _parse_uuid(agenda_id))
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    # =========================================================================
    # Agenda
    # =========================================================================

    async def _get_agenda_row(self, agenda_id: str) -> Agenda | None:
        agenda_uuid = _parse_uuid(agenda_id)
        if agenda_uuid is None:
            return None
        result = await self.db.execute(select(Agenda).where(Agenda.id == agenda_uuid))
        return result.scalar_one_or_none()

    async def get_agenda(self, agenda_id: str) -> AgendaRecord | None:
        agenda = await self._get_agenda_row(agenda_id)
        return _agenda_record(agenda) if agenda else None

    async def update_agenda(self, agenda_id: str, values: dict[str, Any]) -> AgendaRecord:
        agenda = await self._get_agenda_row(agenda_id)
        if not agenda:
            raise ValueError("AGENDA_NOT_FOUND")

        old_meeting_time = agenda.meeting_time
        for key, value in values.items():
            setattr(agenda, key, value)
        await self.db.flush()

        await self.events.publish_agenda_change(
            AgendaChangeNotification(
                changes=[
                    AgendaChange(
                        agenda_id=agenda_id,
                        old_meeting_time=old_meeting_time,
                        new_meeting_time=agenda.meeting_time,
                    )
                ]
            )
        )
        return _agenda_record(agenda)

    async def deactivate_agendas_before(self, day: date) -> list[AgendaRecord]:
        query = select(Agenda).where(
            Agenda.meeting_date < day,
            Agenda.status == AgendaStatus.ACTIVE,
        )
        result = await self.db.execute(query)
        agendas = list(result.scalars().all())

        for agenda in agendas:
            agenda.status = AgendaStatus.INACTIVE
        await self.db.flush()

        return [_agenda_record(agenda) for agenda in agendas]

    # =========================================================================
    # AgendaItem
    # =========================================================================

    async def _get_item_row(self, item_id: str) -> AgendaItem | None:
        item_uuid = _parse_uuid(item_id)
        if item_uuid is None:
            return None
        result = await self.db.execute(select(AgendaItem).where(AgendaItem.id == item_uuid))
        return result.scalar_one_or_none()

    async def list_items(self, agenda_id: str) -> list[AgendaItemRecord]:
        query = (
            select(AgendaItem)
            .where(AgendaItem.agenda_id == _parse_uuid(agenda_id))
            .order_by(AgendaItem.order.asc().nulls_last(), AgendaItem.created_at.asc())
        )
        result = await self.db.execute(query)
        return [_item_record(row) for row in result.scalars().all()]

    async def get_item(self, item_id: str) -> AgendaItemRecord | None:
        item = await self._get_item_row(item_id)
        return _item_record(item) if item else None

    async def create_item(self, agenda_id: str, values: dict[str, Any]) -> AgendaItemRecord:
        data = dict(values)
        if "document_id" in data:
            data["document_id"] = _parse_uuid(data["document_id"])

        item = AgendaItem(agenda_id=_parse_uuid(agenda_id), **data)
        self.db.add(item)
        await self.db.flush()

        await self.events.publish_item_change(
            ItemChangeNotification(
                event=RecordEvent.INSERT,
                changes=[
                    ItemChange(
                        agenda_id=agenda_id,
                        item_id=str(item.id),
                        new=_snapshot(item),
                    )
                ],
            )
        )
        # 알림 처리 중 시간이 재계산되었을 수 있음
        return _item_record(item)

    async def update_item(self, item_id: str, values: dict[str, Any]) -> AgendaItemRecord:
        item = await self._get_item_row(item_id)
        if not item:
            raise ValueError("AGENDA_ITEM_NOT_FOUND")

        data = dict(values)
        if "document_id" in data:
            data["document_id"] = _parse_uuid(data["document_id"])

        old = _snapshot(item)
        for key, value in data.items():
            setattr(item, key, value)
        await self.db.flush()

        await self.events.publish_item_change(
            ItemChangeNotification(
                event=RecordEvent.UPDATE,
                changes=[
                    ItemChange(
                        agenda_id=str(item.agenda_id),
                        item_id=item_id,
                        old=old,
                        new=_snapshot(item),
                    )
                ],
            )
        )
        return _item_record(item)

    async def delete_item(self, item_id: str) -> None:
        item = await self._get_item_row(item_id)
        if not item:
            raise ValueError("AGENDA_ITEM_NOT_FOUND")

        change = ItemChange(agenda_id=str(item.agenda_id), item_id=item_id, old=_snapshot(item))
        await self.db.delete(item)
        await self.db.flush()

        await self.events.publish_item_change(
            ItemChangeNotification(event=RecordEvent.DELETE, changes=[change])
        )

    # =========================================================================
    # Document
    # =========================================================================

    async def _get_document_row(self, document_id: str) -> Document | None:
        document_uuid = _parse_uuid(document_id)
        if document_uuid is None:
            return None
        query = (
            select(Document)
            .options(selectinload(Document.agendas))
            .where(Document.id == document_uuid)
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get_document(self, document_id: str) -> DocumentRecord | None:
        document = await self._get_document_row(document_id)
        if not document:
            return None
        return DocumentRecord(
            id=str(document.id),
            document_number=document.document_number,
            owner=document.owner,
            project_manager=document.project_manager,
            agenda_ids=[str(agenda.id) for agenda in document.agendas],
        )

    async def replace_document_agenda(
        self, document_id: str, old_agenda_id: str, new_agenda_id: str
    ) -> None:
        document = await self._get_document_row(document_id)
        if not document:
            raise ValueError("DOCUMENT_NOT_FOUND")

        new_agenda = await self._get_agenda_row(new_agenda_id)
        if not new_agenda:
            raise ValueError("AGENDA_NOT_FOUND")

        for index, agenda in enumerate(document.agendas):
            if str(agenda.id) == old_agenda_id:
                document.agendas[index] = new_agenda
                break
        await self.db.flush()

    # =========================================================================
    # 이동 요청
    # =========================================================================

    async def create_move_request(self, item_id: str, agenda_id: str) -> str:
        move = AgendaItemMove(
            agenda_item_id=_parse_uuid(item_id),
            agenda_id=_parse_uuid(agenda_id),
        )
        self.db.add(move)
        await self.db.flush()
        return str(move.id)

    async def delete_move_request(self, move_request_id: str) -> None:
        result = await self.db.execute(
            select(AgendaItemMove).where(AgendaItemMove.id == _parse_uuid(move_request_id))
        )
        move = result.scalar_one_or_none()
        if move:
            await self.db.delete(move)
            await self.db.flush()
