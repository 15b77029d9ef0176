"""태스크 디스패처 단위 테스트"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from review_agenda.services.agenda.dispatch import ArqTaskDispatcher, InMemoryTaskDispatcher


@pytest.fixture
def arq_pool():
    pool = MagicMock()
    pool.enqueue_job = AsyncMock()
    pool.close = AsyncMock()
    return pool


class TestArqTaskDispatcher:
    @pytest.mark.asyncio
    async def test_schedule_buffers_until_flush(self, arq_pool):
        """schedule()은 큐잉하지 않음"""
        pool_factory = AsyncMock(return_value=arq_pool)
        dispatcher = ArqTaskDispatcher(pool_factory)

        await dispatcher.schedule("agenda_item_recalc_task", {"agenda_id": "agenda-1"})

        pool_factory.assert_not_awaited()
        assert len(dispatcher.pending) == 1

    @pytest.mark.asyncio
    async def test_flush_enqueues_and_closes_pool(self, arq_pool):
        dispatcher = ArqTaskDispatcher(AsyncMock(return_value=arq_pool))
        await dispatcher.schedule(
            "agenda_item_recalc_task", {"agenda_id": "agenda-1", "meeting_time": "9:00 AM"}
        )

        enqueued = await dispatcher.flush()

        assert enqueued == 1
        arq_pool.enqueue_job.assert_awaited_once_with(
            "agenda_item_recalc_task", agenda_id="agenda-1", meeting_time="9:00 AM"
        )
        arq_pool.close.assert_awaited_once()
        assert dispatcher.pending == []

    @pytest.mark.asyncio
    async def test_flush_empty_skips_pool(self):
        pool_factory = AsyncMock()
        dispatcher = ArqTaskDispatcher(pool_factory)

        assert await dispatcher.flush() == 0
        pool_factory.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_flush_enqueue_failure_is_logged(self, arq_pool):
        """큐잉 실패는 예외 없이 0건"""
        arq_pool.enqueue_job.side_effect = ConnectionError("redis down")
        dispatcher = ArqTaskDispatcher(AsyncMock(return_value=arq_pool))
        await dispatcher.schedule("agenda_item_recalc_task", {"agenda_id": "agenda-1"})

        assert await dispatcher.flush() == 0
        arq_pool.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_discard(self, arq_pool):
        """롤백 시 버퍼 비움"""
        dispatcher = ArqTaskDispatcher(AsyncMock(return_value=arq_pool))
        await dispatcher.schedule("agenda_item_recalc_task", {"agenda_id": "agenda-1"})

        dispatcher.discard()

        assert await dispatcher.flush() == 0
        arq_pool.enqueue_job.assert_not_awaited()


@pytest.mark.asyncio
async def test_in_memory_dispatcher_records():
    dispatcher = InMemoryTaskDispatcher()
    params = {"agenda_id": "agenda-1", "meeting_time": None}

    await dispatcher.schedule("agenda_item_recalc_task", params)
    params["agenda_id"] = "changed"

    assert dispatcher.scheduled == [
        ("agenda_item_recalc_task", {"agenda_id": "agenda-1", "meeting_time": None})
    ]
