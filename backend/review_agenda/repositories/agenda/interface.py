"""Agenda Repository 인터페이스 정의

Protocol 기반 인터페이스로 구조적 서브타이핑 지원
"""

from datetime import date
from typing import Any, Protocol

from review_agenda.schemas.agenda import AgendaItemRecord, AgendaRecord, DocumentRecord
from review_agenda.services.agenda.events import RecordEventBus
from review_agenda.services.agenda.item import AgendaItem


class IAgendaRepository(Protocol):
    """Agenda Repository 인터페이스

    AgendaRepository(SQLAlchemy)와 MockAgendaRepository가 구현하는 공통 인터페이스.
    모든 쓰기 메서드는 쓰기 후 events로 변경 알림을 발행한다.
    """

    events: RecordEventBus

    # === 엔진용 ===

    async def load_items_for_agenda(self, agenda_id: str) -> list[AgendaItem]:
        """아젠다의 아이템 목록 (order 오름차순, null은 마지막에 안정적으로)"""
        ...

    async def save_items(self, items: list[AgendaItem]) -> None:
        """아이템 order/start_time/end_time 배치 저장

        전부 저장되거나 전혀 저장되지 않는다.

        Raises:
            PersistenceError: 저장 실패
        """
        ...

    async def get_meeting_time(self, agenda_id: str) -> str | None:
        """아젠다 미팅 시간 조회"""
        ...

    # === Agenda ===

    async def get_agenda(self, agenda_id: str) -> AgendaRecord | None:
        """아젠다 조회"""
        ...

    async def update_agenda(self, agenda_id: str, values: dict[str, Any]) -> AgendaRecord:
        """아젠다 수정 (미팅 시간 변경 알림 발행)"""
        ...

    async def deactivate_agendas_before(self, day: date) -> list[AgendaRecord]:
        """meeting_date가 day 이전인 활성 아젠다를 비활성화"""
        ...

    # === AgendaItem ===

    async def list_items(self, agenda_id: str) -> list[AgendaItemRecord]:
        """아이템 레코드 목록 (order 오름차순)"""
        ...

    async def get_item(self, item_id: str) -> AgendaItemRecord | None:
        """아이템 조회"""
        ...

    async def create_item(self, agenda_id: str, values: dict[str, Any]) -> AgendaItemRecord:
        """아이템 생성 (INSERT 알림 발행)"""
        ...

    async def update_item(self, item_id: str, values: dict[str, Any]) -> AgendaItemRecord:
        """아이템 수정 (UPDATE 알림 발행)"""
        ...

    async def delete_item(self, item_id: str) -> None:
        """아이템 삭제 (DELETE 알림 발행)"""
        ...

    # === Document ===

    async def get_document(self, document_id: str) -> DocumentRecord | None:
        """문서 조회"""
        ...

    async def replace_document_agenda(
        self, document_id: str, old_agenda_id: str, new_agenda_id: str
    ) -> None:
        """문서의 아젠다 연결에서 old를 new로 교체"""
        ...

    # === 이동 요청 ===

    async def create_move_request(self, item_id: str, agenda_id: str) -> str:
        """이동 요청 레코드 생성"""
        ...

    async def delete_move_request(self, move_request_id: str) -> None:
        """이동 요청 레코드 삭제"""
        ...
