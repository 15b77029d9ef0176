"""공유 API dependencies - 엔드포인트 간 중복 제거"""

from typing import Annotated
from urllib.parse import urlparse

from arq import ArqRedis, create_pool
from arq.connections import RedisSettings
from fastapi import Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from review_agenda.core.config import get_settings
from review_agenda.core.database import get_db
from review_agenda.core.request_context import RequestContext
from review_agenda.repositories.agenda import IAgendaRepository, create_agenda_repository
from review_agenda.services.agenda.dispatch import ArqTaskDispatcher
from review_agenda.services.agenda_service import AgendaService

# ===== Service Error Handling =====

# 서비스 레이어에서 발생하는 에러 코드와 HTTP 응답 매핑
# (status_code, error_code, message)
SERVICE_ERROR_MAPPING: dict[str, tuple[int, str, str]] = {
    # 조회
    "AGENDA_NOT_FOUND": (404, "NOT_FOUND", "Agenda not found"),
    "AGENDA_ITEM_NOT_FOUND": (404, "NOT_FOUND", "Agenda item not found"),
    "DOCUMENT_NOT_FOUND": (404, "NOT_FOUND", "Document not found"),
    # 엔진
    "SAME_AGENDA": (400, "BAD_REQUEST", "Select a different Agenda"),
    "INVALID_OPERATION": (400, "BAD_REQUEST", "Invalid operation"),
    "INVALID_TIME_FORMAT": (422, "INVALID_TIME_FORMAT", "Invalid meeting time format"),
    "PERSISTENCE_FAILED": (500, "PERSISTENCE_FAILED", "Failed to save agenda items"),
}


def handle_service_error(error: Exception, default_message: str = "Validation error") -> None:
    """서비스 레이어 에러를 HTTPException으로 변환

    Args:
        error: 서비스에서 발생한 ValueError(에러 코드가 str로 전달됨) 또는 AgendaError
        default_message: 매핑되지 않은 에러의 기본 메시지

    Raises:
        HTTPException: 매핑된 HTTP 에러 응답
    """
    error_code = getattr(error, "error_code", None) or str(error)

    if error_code in SERVICE_ERROR_MAPPING:
        status_code, code, message = SERVICE_ERROR_MAPPING[error_code]
        raise HTTPException(
            status_code=status_code,
            detail={"error": code, "message": message},
        )

    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"error": "VALIDATION_ERROR", "message": default_message},
    )


# ===== ARQ Dependencies =====


async def get_arq_pool() -> ArqRedis:
    """ARQ Redis 연결 풀"""
    settings = get_settings()
    parsed = urlparse(settings.arq_redis_url)

    redis_settings = RedisSettings(
        host=parsed.hostname or "localhost",
        port=parsed.port or 6379,
        database=int(parsed.path.lstrip("/") or "0"),
        password=parsed.password,
    )

    return await create_pool(redis_settings)


def get_task_dispatcher() -> ArqTaskDispatcher:
    """요청 단위 태스크 디스패처 (커밋 후 flush)"""
    return ArqTaskDispatcher(get_arq_pool)


# ===== Agenda Dependencies =====


def get_request_context() -> RequestContext:
    """요청 단위 RequestContext (재진입 방지 플래그 범위)"""
    return RequestContext()


def get_agenda_repository(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> IAgendaRepository:
    """AgendaRepository 의존성"""
    return create_agenda_repository(db)


def get_agenda_service(
    repository: Annotated[IAgendaRepository, Depends(get_agenda_repository)],
    context: Annotated[RequestContext, Depends(get_request_context)],
    dispatcher: Annotated[ArqTaskDispatcher, Depends(get_task_dispatcher)],
) -> AgendaService:
    """AgendaService 의존성"""
    return AgendaService(repository, context, dispatcher)
