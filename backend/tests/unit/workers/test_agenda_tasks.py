"""ARQ 아젠다 태스크 단위 테스트

DB 세션과 저장소 팩토리를 패치하여 Mock 저장소로 실행한다.
"""

from contextlib import asynccontextmanager
from datetime import date
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from review_agenda.workers.arq_worker import (
    WorkerSettings,
    agenda_item_recalc_task,
    deactivate_past_agendas_task,
    traced_task,
)

WORKER = "review_agenda.workers.arq_worker"


@pytest.fixture
def db_session():
    """AsyncSession mock (commit/rollback 호출만 확인)"""
    return AsyncMock()


@pytest.fixture
def worker_env(mock_repository, db_session):
    """async_session_maker / create_agenda_repository 패치"""

    @asynccontextmanager
    async def _session():
        yield db_session

    with (
        patch(f"{WORKER}.async_session_maker", side_effect=_session),
        patch(f"{WORKER}.create_agenda_repository", return_value=mock_repository),
    ):
        yield


class TestAgendaItemRecalcTask:
    """이동 후 원래 아젠다 재계산"""

    @pytest.mark.asyncio
    async def test_recalc_compresses_and_updates_times(
        self, worker_env, mock_data, mock_repository, db_session
    ):
        """item-2가 빠진 자리를 당기고 시간 재계산 후 커밋"""
        del mock_data["items"]["item-2"]

        result = await agenda_item_recalc_task({}, "agenda-1", "9:00 AM ET")

        assert result == {"status": "success", "agenda_id": "agenda-1", "updated_count": 1}
        item_3 = mock_data["items"]["item-3"]
        assert (item_3["order"], item_3["start_time"], item_3["end_time"]) == (2, "9:30", "10:15")
        # order 없는 아이템은 그대로
        assert mock_data["items"]["item-4"]["order"] is None
        assert mock_repository.save_calls == [["item-3"]]
        db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_recalc_nothing_changed(self, worker_env, mock_repository, db_session):
        result = await agenda_item_recalc_task({}, "agenda-2", "13:30 CET")

        assert result["status"] == "success"
        assert result["updated_count"] == 0
        assert mock_repository.save_calls == []

    @pytest.mark.asyncio
    async def test_recalc_invalid_meeting_time(
        self, worker_env, mock_data, mock_repository, db_session
    ):
        """형식 오류 → 롤백 후 실패 결과 (저장 없음)"""
        del mock_data["items"]["item-2"]

        result = await agenda_item_recalc_task({}, "agenda-1", "9h AM")

        assert result == {
            "status": "failed",
            "agenda_id": "agenda-1",
            "error": "INVALID_TIME_FORMAT",
        }
        assert mock_repository.save_calls == []
        assert mock_data["items"]["item-3"]["order"] == 3
        db_session.rollback.assert_awaited_once()
        db_session.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_recalc_agenda_not_found(self, worker_env, db_session):
        result = await agenda_item_recalc_task({}, "nonexistent", "9:00 AM")

        assert result == {"status": "failed", "error": "AGENDA_NOT_FOUND"}
        db_session.commit.assert_not_awaited()


class TestDeactivatePastAgendasTask:
    """지난 아젠다 비활성화 (cron)"""

    @pytest.mark.asyncio
    async def test_deactivate_past_agendas(self, worker_env, mock_data, db_session):
        with patch(f"{WORKER}.date") as mock_date:
            mock_date.today.return_value = date(2026, 7, 5)
            result = await deactivate_past_agendas_task({})

        assert result == {"status": "success", "deactivated_count": 1}
        assert mock_data["agendas"]["agenda-1"]["status"] == "inactive"
        db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_deactivate_none_found(self, worker_env, mock_data):
        with patch(f"{WORKER}.date") as mock_date:
            mock_date.today.return_value = date(2026, 1, 1)
            result = await deactivate_past_agendas_task({})

        assert result["deactivated_count"] == 0


class TestTracedTask:
    """OTel 트레이싱/메트릭 데코레이터"""

    @pytest.mark.asyncio
    async def test_failed_result_recorded_as_failed(self):
        metrics = MagicMock()

        @traced_task("sample_task")
        async def sample(ctx):
            return {"status": "failed", "error": "AGENDA_NOT_FOUND"}

        with patch(f"{WORKER}.get_agenda_metrics", return_value=metrics):
            result = await sample({})

        assert result["status"] == "failed"
        metrics.task_result.add.assert_called_once_with(
            1, {"task_name": "sample_task", "status": "failed"}
        )
        metrics.task_duration.record.assert_called_once()

    @pytest.mark.asyncio
    async def test_exception_propagates(self):
        metrics = MagicMock()

        @traced_task("sample_task")
        async def sample(ctx):
            raise RuntimeError("boom")

        with patch(f"{WORKER}.get_agenda_metrics", return_value=metrics):
            with pytest.raises(RuntimeError):
                await sample({})

        metrics.task_result.add.assert_called_once_with(
            1, {"task_name": "sample_task", "status": "failed"}
        )


def test_worker_settings_registers_tasks():
    """태스크 등록 및 재시도 없음"""
    names = [func.__name__ for func in WorkerSettings.functions]

    assert names == ["agenda_item_recalc_task", "deactivate_past_agendas_task"]
    assert WorkerSettings.max_tries == 1
    assert len(WorkerSettings.cron_jobs) == 1
