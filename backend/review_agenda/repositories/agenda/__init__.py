"""Agenda Repository 패키지

PostgreSQL(SQLAlchemy) 기반 아젠다/아이템 저장소.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from review_agenda.repositories.agenda.interface import IAgendaRepository
from review_agenda.repositories.agenda.mock_repository import MockAgendaRepository
from review_agenda.repositories.agenda.repository import AgendaRepository
from review_agenda.services.agenda.events import RecordEventBus


def create_agenda_repository(
    db: AsyncSession, events: RecordEventBus | None = None
) -> IAgendaRepository:
    """Agenda Repository 팩토리

    환경 설정에 따라 실제/Mock 저장소 반환.

    Args:
        db: 요청/작업 단위 DB 세션
        events: 변경 알림 버스 (없으면 새로 생성)

    Returns:
        IAgendaRepository 구현체
    """
    from review_agenda.core.config import get_settings

    if get_settings().use_mock_repository:
        return MockAgendaRepository(events=events)

    return AgendaRepository(db, events=events)


__all__ = [
    "IAgendaRepository",
    "AgendaRepository",
    "MockAgendaRepository",
    "create_agenda_repository",
]
