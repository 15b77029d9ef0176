"""pytest 설정 및 공유 fixture

테스트 인프라:
- in-memory Mock 아젠다 저장소 (DB 불필요)
- 요청 단위 RequestContext
- 예약 태스크를 기록하는 디스패처
"""

import pytest

from review_agenda.core.request_context import RequestContext
from review_agenda.repositories.agenda.mock_repository import (
    MockAgendaRepository,
    _copy_mock_data,
)
from review_agenda.services.agenda.dispatch import InMemoryTaskDispatcher
from review_agenda.services.agenda_service import AgendaService


@pytest.fixture
def mock_data() -> dict:
    """테스트용 Mock 데이터 (테스트마다 새 복사본)"""
    return _copy_mock_data()


@pytest.fixture
def mock_repository(mock_data) -> MockAgendaRepository:
    """MockAgendaRepository 인스턴스"""
    return MockAgendaRepository(mock_data)


@pytest.fixture
def request_context() -> RequestContext:
    """트랜잭션 1건 범위의 RequestContext"""
    return RequestContext()


@pytest.fixture
def task_dispatcher() -> InMemoryTaskDispatcher:
    """예약된 태스크를 기록만 하는 디스패처"""
    return InMemoryTaskDispatcher()


@pytest.fixture
def agenda_service(mock_repository, request_context, task_dispatcher) -> AgendaService:
    """AgendaService 인스턴스 (mock repo 주입, 코디네이터 구독 완료)"""
    return AgendaService(mock_repository, request_context, task_dispatcher)


def _make_item(
    item_id: str,
    agenda_id: str = "agenda-1",
    order: int | None = None,
    duration: int | None = None,
    **fields,
) -> dict:
    """Mock 데이터용 아이템 dict 생성"""
    item = {
        "id": item_id,
        "agenda_id": agenda_id,
        "order": order,
        "duration": duration,
        "start_time": None,
        "end_time": None,
        "topic": None,
        "project_owner": None,
        "document_owner": None,
        "document_id": None,
    }
    item.update(fields)
    return item


def _replace_items(mock_data: dict, agenda_id: str, items: list[dict]) -> None:
    mock_data["items"] = {
        key: value
        for key, value in mock_data["items"].items()
        if value["agenda_id"] != agenda_id
    }
    for item in items:
        mock_data["items"][item["id"]] = item


@pytest.fixture
def make_item():
    """Mock 데이터용 아이템 dict 팩토리"""
    return _make_item


@pytest.fixture
def set_agenda_items(mock_data):
    """아젠다의 아이템 구성을 교체하는 헬퍼 (삽입 순서 = 생성 순서)"""

    def _set(agenda_id: str, items: list[dict]) -> None:
        _replace_items(mock_data, agenda_id, items)

    return _set
