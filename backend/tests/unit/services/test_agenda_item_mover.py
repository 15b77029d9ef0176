"""AgendaItemMover 단위 테스트 (Mock 기반, DB 불필요)"""

import pytest

from review_agenda.core.constants import (
    AGENDA_ID,
    AGENDA_ITEM_RECALC_TASK,
    AGENDA_ITEM_SEMAPHORE,
    AGENDA_MEETING_TIME,
)
from review_agenda.core.exceptions import InvalidOperation
from review_agenda.core.request_context import RequestContext
from review_agenda.services.agenda.coordinator import ChangeEventCoordinator
from review_agenda.services.agenda.move import AgendaItemMover
from review_agenda.services.agenda_service import AgendaService


class TestAgendaItemMover:
    """아젠다 간 아이템 이동 테스트"""

    @pytest.fixture
    def mover(self, mock_repository, request_context, task_dispatcher):
        ChangeEventCoordinator(mock_repository, request_context).subscribe()
        return AgendaItemMover(mock_repository, request_context, task_dispatcher)

    @pytest.mark.asyncio
    async def test_same_agenda_rejected_before_any_change(
        self, mover, mock_data, task_dispatcher
    ):
        before = {key: dict(value) for key, value in mock_data["items"].items()}

        with pytest.raises(InvalidOperation) as exc_info:
            await mover.move_item("item-1", "agenda-1", "agenda-1")

        assert exc_info.value.error_code == "SAME_AGENDA"
        assert exc_info.value.message == "Select a different Agenda"
        assert mock_data["items"] == before
        assert task_dispatcher.scheduled == []

    @pytest.mark.asyncio
    async def test_item_not_in_source_agenda(self, mover):
        with pytest.raises(ValueError, match="AGENDA_ITEM_NOT_FOUND"):
            await mover.move_item("item-5", "agenda-1", "agenda-2")

    @pytest.mark.asyncio
    async def test_creates_copy_in_destination_and_deletes_source(self, mover, mock_data):
        result = await mover.move_item("item-1", "agenda-1", "agenda-2")

        assert "item-1" not in mock_data["items"]
        created = mock_data["items"][result.item_id]
        assert created["agenda_id"] == "agenda-2"
        assert created["order"] is None
        assert created["duration"] == 30
        assert created["topic"] == "CMC-0001"
        assert created["project_owner"] == "user-pm"
        assert created["document_owner"] == "user-owner"
        assert created["document_id"] == "doc-1"
        assert result.from_agenda_id == "agenda-1"
        assert result.to_agenda_id == "agenda-2"

    @pytest.mark.asyncio
    async def test_source_recompute_is_deferred(
        self, mover, mock_data, mock_repository, task_dispatcher, request_context
    ):
        """원래 아젠다는 동기 재계산하지 않고 재계산 태스크만 예약"""
        result = await mover.move_item("item-1", "agenda-1", "agenda-2")

        item_2 = mock_data["items"]["item-2"]
        assert (item_2["order"], item_2["start_time"]) == (2, "9:30")
        assert all(
            "item-2" not in batch and "item-3" not in batch
            for batch in mock_repository.save_calls
        )
        assert result.recalc_scheduled is True
        assert task_dispatcher.scheduled == [
            (
                AGENDA_ITEM_RECALC_TASK,
                {AGENDA_ID: "agenda-1", AGENDA_MEETING_TIME: "9:00 AM ET"},
            )
        ]
        assert request_context.get(AGENDA_ITEM_SEMAPHORE) is True

    @pytest.mark.asyncio
    async def test_no_recalc_when_source_has_no_meeting_time(
        self, mover, task_dispatcher, set_agenda_items, make_item
    ):
        set_agenda_items(
            "agenda-3",
            [make_item("x", agenda_id="agenda-3", order=1, duration=20)],
        )

        result = await mover.move_item("x", "agenda-3", "agenda-1")

        assert result.recalc_scheduled is False
        assert task_dispatcher.scheduled == []

    @pytest.mark.asyncio
    async def test_document_agenda_link_replaced(self, mover, mock_data):
        await mover.move_item("item-1", "agenda-1", "agenda-2")

        assert mock_data["documents"]["doc-1"]["agenda_ids"] == ["agenda-2"]

    @pytest.mark.asyncio
    async def test_move_request_deleted(self, mover, mock_repository, mock_data):
        move_id = await mock_repository.create_move_request("item-2", "agenda-2")

        await mover.move_item("item-2", "agenda-1", "agenda-2", move_id)

        assert move_id not in mock_data["moves"]

    @pytest.mark.asyncio
    async def test_destination_item_created_without_order(self, mover, mock_data):
        """order 없이 생성되므로 시간도 비어 있음"""
        result = await mover.move_item("item-2", "agenda-1", "agenda-2")
        created = mock_data["items"][result.item_id]

        assert (created["start_time"], created["end_time"]) == (None, None)

    @pytest.mark.asyncio
    async def test_scheduled_recalc_compresses_source(
        self, mover, mock_data, mock_repository, task_dispatcher
    ):
        """예약된 재계산을 새 트랜잭션에서 실행하면 빈 번호가 정리됨"""
        await mover.move_item("item-1", "agenda-1", "agenda-2")
        _, params = task_dispatcher.scheduled[0]

        job_service = AgendaService(mock_repository, RequestContext())
        updated = await job_service.recalculate_agenda(
            params[AGENDA_ID], params[AGENDA_MEETING_TIME]
        )

        assert updated == 2
        item_2 = mock_data["items"]["item-2"]
        item_3 = mock_data["items"]["item-3"]
        assert (item_2["order"], item_2["start_time"], item_2["end_time"]) == (1, "9:00", "9:15")
        assert (item_3["order"], item_3["start_time"], item_3["end_time"]) == (2, "9:15", "10:00")
