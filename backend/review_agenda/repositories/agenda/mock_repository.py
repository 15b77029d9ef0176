"""Mock Agenda Repository

테스트/로컬 개발용 in-memory 아젠다 저장소.
"""

import copy
from datetime import date
from typing import Any
from uuid import uuid4

from review_agenda.core.constants import AgendaStatus
from review_agenda.core.exceptions import PersistenceError
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
from review_agenda.services.agenda.item import AgendaItem

# =============================================================================
# Mock 데이터 저장소
# =============================================================================

MOCK_DATA = {
    "agendas": {
        "agenda-1": {
            "id": "agenda-1",
            "name": "CMC 문서 리뷰",
            "meeting_time": "9:00 AM ET",
            "meeting_date": date(2026, 7, 1),
            "status": AgendaStatus.ACTIVE,
        },
        "agenda-2": {
            "id": "agenda-2",
            "name": "라벨링 리뷰",
            "meeting_time": "13:30 CET",
            "meeting_date": date(2026, 7, 8),
            "status": AgendaStatus.ACTIVE,
        },
        "agenda-3": {
            "id": "agenda-3",
            "name": "일정 미정 리뷰",
            "meeting_time": None,
            "meeting_date": None,
            "status": AgendaStatus.ACTIVE,
        },
    },
    # 삽입 순서가 생성 순서 (order가 null인 아이템의 정렬 기준)
    "items": {
        "item-1": {
            "id": "item-1",
            "agenda_id": "agenda-1",
            "order": 1,
            "duration": 30,
            "start_time": "9:00",
            "end_time": "9:30",
            "topic": "CMC-0001",
            "project_owner": "user-pm",
            "document_owner": "user-owner",
            "document_id": "doc-1",
        },
        "item-2": {
            "id": "item-2",
            "agenda_id": "agenda-1",
            "order": 2,
            "duration": 15,
            "start_time": "9:30",
            "end_time": "9:45",
            "topic": "안정성 시험 결과",
            "project_owner": None,
            "document_owner": None,
            "document_id": None,
        },
        "item-3": {
            "id": "item-3",
            "agenda_id": "agenda-1",
            "order": 3,
            "duration": 45,
            "start_time": "9:45",
            "end_time": "10:30",
            "topic": "공정 밸리데이션",
            "project_owner": None,
            "document_owner": None,
            "document_id": None,
        },
        "item-4": {
            "id": "item-4",
            "agenda_id": "agenda-1",
            "order": None,
            "duration": 10,
            "start_time": None,
            "end_time": None,
            "topic": "보류 안건",
            "project_owner": None,
            "document_owner": None,
            "document_id": None,
        },
        "item-5": {
            "id": "item-5",
            "agenda_id": "agenda-2",
            "order": 1,
            "duration": 20,
            "start_time": "13:30",
            "end_time": "13:50",
            "topic": "라벨 초안",
            "project_owner": None,
            "document_owner": None,
            "document_id": None,
        },
        "item-6": {
            "id": "item-6",
            "agenda_id": "agenda-2",
            "order": 2,
            "duration": 40,
            "start_time": "13:50",
            "end_time": "14:30",
            "topic": "패키지 삽입문",
            "project_owner": None,
            "document_owner": None,
            "document_id": None,
        },
    },
    "documents": {
        "doc-1": {
            "id": "doc-1",
            "document_number": "CMC-0001",
            "owner": "user-owner",
            "project_manager": "user-pm",
            "agenda_ids": ["agenda-1"],
        },
        "doc-2": {
            "id": "doc-2",
            "document_number": "LBL-0042",
            "owner": "user-owner",
            "project_manager": None,
            "agenda_ids": ["agenda-2"],
        },
    },
    "moves": {},
}


def _copy_mock_data() -> dict:
    """Mock 데이터 깊은 복사"""
    return copy.deepcopy(MOCK_DATA)


def _order_key(item: dict) -> tuple[bool, int]:
    return (item["order"] is None, item["order"] or 0)


def _snapshot(item: dict) -> ItemSnapshot:
    return ItemSnapshot(order=item["order"], duration=item["duration"])


# =============================================================================
# MockAgendaRepository
# =============================================================================


class MockAgendaRepository:
    """테스트용 Mock Agenda Repository"""

    def __init__(self, data: dict | None = None, events: RecordEventBus | None = None):
        self.data = data if data is not None else _copy_mock_data()
        self.events = events or RecordEventBus()
        self.save_calls: list[list[str]] = []

    # =========================================================================
    # 엔진용
    # =========================================================================

    def _agenda_items(self, agenda_id: str) -> list[dict]:
        items = [i for i in self.data["items"].values() if i["agenda_id"] == agenda_id]
        return sorted(items, key=_order_key)

    async def load_items_for_agenda(self, agenda_id: str) -> list[AgendaItem]:
        return [
            AgendaItem(
                i["id"],
                order=i["order"],
                duration=i["duration"],
                start_time=i["start_time"],
                end_time=i["end_time"],
            )
            for i in self._agenda_items(agenda_id)
        ]

    async def save_items(self, items: list[AgendaItem]) -> None:
        if not items:
            return

        # 전부 검증 후 반영 (부분 저장 없음)
        missing = [item.id for item in items if item.id not in self.data["items"]]
        if missing:
            raise PersistenceError(
                "An error occurred saving one or more records: "
                f"agenda item {missing[0]} not found"
            )

        changes = []
        for item in items:
            stored = self.data["items"][item.id]
            old = _snapshot(stored)
            stored.update(item.to_values())
            changes.append(
                ItemChange(
                    agenda_id=stored["agenda_id"],
                    item_id=item.id,
                    old=old,
                    new=_snapshot(stored),
                )
            )
        self.save_calls.append([item.id for item in items])

        await self.events.publish_item_change(
            ItemChangeNotification(event=RecordEvent.UPDATE, changes=changes)
        )

    async def get_meeting_time(self, agenda_id: str) -> str | None:
        agenda = self.data["agendas"].get(agenda_id)
        return agenda["meeting_time"] if agenda else None

    # =========================================================================
    # Agenda
    # =========================================================================

    async def get_agenda(self, agenda_id: str) -> AgendaRecord | None:
        agenda = self.data["agendas"].get(agenda_id)
        return AgendaRecord(**agenda) if agenda else None

    async def update_agenda(self, agenda_id: str, values: dict[str, Any]) -> AgendaRecord:
        agenda = self.data["agendas"].get(agenda_id)
        if not agenda:
            raise ValueError("AGENDA_NOT_FOUND")

        old_meeting_time = agenda["meeting_time"]
        # 레코드로 검증된 값만 반영
        updated = AgendaRecord(**{**agenda, **values})
        agenda.update(values)

        await self.events.publish_agenda_change(
            AgendaChangeNotification(
                changes=[
                    AgendaChange(
                        agenda_id=agenda_id,
                        old_meeting_time=old_meeting_time,
                        new_meeting_time=updated.meeting_time,
                    )
                ]
            )
        )
        return updated

    async def deactivate_agendas_before(self, day: date) -> list[AgendaRecord]:
        deactivated = []
        for agenda in self.data["agendas"].values():
            if (
                agenda["meeting_date"] is not None
                and agenda["meeting_date"] < day
                and agenda["status"] == AgendaStatus.ACTIVE
            ):
                agenda["status"] = AgendaStatus.INACTIVE
                deactivated.append(AgendaRecord(**agenda))
        return deactivated

    # =========================================================================
    # AgendaItem
    # =========================================================================

    async def list_items(self, agenda_id: str) -> list[AgendaItemRecord]:
        return [AgendaItemRecord(**i) for i in self._agenda_items(agenda_id)]

    async def get_item(self, item_id: str) -> AgendaItemRecord | None:
        item = self.data["items"].get(item_id)
        return AgendaItemRecord(**item) if item else None

    async def create_item(self, agenda_id: str, values: dict[str, Any]) -> AgendaItemRecord:
        item_id = f"item-{uuid4().hex[:8]}"
        item = {
            "id": item_id,
            "agenda_id": agenda_id,
            "order": None,
            "duration": None,
            "start_time": None,
            "end_time": None,
            "topic": None,
            "project_owner": None,
            "document_owner": None,
            "document_id": None,
        }
        item.update(values)
        self.data["items"][item_id] = item

        await self.events.publish_item_change(
            ItemChangeNotification(
                event=RecordEvent.INSERT,
                changes=[ItemChange(agenda_id=agenda_id, item_id=item_id, new=_snapshot(item))],
            )
        )
        return AgendaItemRecord(**item)

    async def update_item(self, item_id: str, values: dict[str, Any]) -> AgendaItemRecord:
        item = self.data["items"].get(item_id)
        if not item:
            raise ValueError("AGENDA_ITEM_NOT_FOUND")

        old = _snapshot(item)
        item.update(values)

        await self.events.publish_item_change(
            ItemChangeNotification(
                event=RecordEvent.UPDATE,
                changes=[
                    ItemChange(
                        agenda_id=item["agenda_id"],
                        item_id=item_id,
                        old=old,
                        new=_snapshot(item),
                    )
                ],
            )
        )
        return AgendaItemRecord(**item)

    async def delete_item(self, item_id: str) -> None:
        item = self.data["items"].pop(item_id, None)
        if not item:
            raise ValueError("AGENDA_ITEM_NOT_FOUND")

        await self.events.publish_item_change(
            ItemChangeNotification(
                event=RecordEvent.DELETE,
                changes=[ItemChange(agenda_id=item["agenda_id"], item_id=item_id, old=_snapshot(item))],
            )
        )

    # =========================================================================
    # Document
    # =========================================================================

    async def get_document(self, document_id: str) -> DocumentRecord | None:
        document = self.data["documents"].get(document_id)
        return DocumentRecord(**document) if document else None

    async def replace_document_agenda(
        self, document_id: str, old_agenda_id: str, new_agenda_id: str
    ) -> None:
        document = self.data["documents"].get(document_id)
        if not document:
            raise ValueError("DOCUMENT_NOT_FOUND")

        agenda_ids = document["agenda_ids"]
        if old_agenda_id in agenda_ids:
            agenda_ids[agenda_ids.index(old_agenda_id)] = new_agenda_id

    # =========================================================================
    # 이동 요청
    # =========================================================================

    async def create_move_request(self, item_id: str, agenda_id: str) -> str:
        move_id = f"move-{uuid4().hex[:8]}"
        self.data["moves"][move_id] = {
            "id": move_id,
            "agenda_item_id": item_id,
            "agenda_id": agenda_id,
        }
        return move_id

    async def delete_move_request(self, move_request_id: str) -> None:
        self.data["moves"].pop(move_request_id, None)
