"""AgendaItem API 엔드포인트

아이템 수정/삭제 및 다른 아젠다로 이동.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from review_agenda.api.dependencies import (
    get_agenda_service,
    get_task_dispatcher,
    handle_service_error,
)
from review_agenda.core.database import get_db
from review_agenda.core.exceptions import AgendaError
from review_agenda.schemas import ErrorResponse
from review_agenda.schemas.agenda import (
    AgendaItemResponse,
    MoveAgendaItemRequest,
    MoveAgendaItemResponse,
    UpdateAgendaItemRequest,
)
from review_agenda.services.agenda.dispatch import ArqTaskDispatcher
from review_agenda.services.agenda_service import AgendaService

router = APIRouter(prefix="/agenda-items", tags=["AgendaItems"])


@router.patch(
    "/{item_id}",
    response_model=AgendaItemResponse,
    status_code=status.HTTP_200_OK,
    summary="Agenda 아이템 수정",
    description="order를 바꾸면 주변 아이템이 밀리거나 당겨지고 시간이 다시 계산됩니다.",
    responses={
        404: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def update_agenda_item(
    item_id: str,
    request: UpdateAgendaItemRequest,
    service: Annotated[AgendaService, Depends(get_agenda_service)],
) -> AgendaItemResponse:
    try:
        return await service.update_item(item_id, request)
    except (ValueError, AgendaError) as e:
        handle_service_error(e)


@router.delete(
    "/{item_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Agenda 아이템 삭제",
    responses={404: {"model": ErrorResponse}},
)
async def delete_agenda_item(
    item_id: str,
    service: Annotated[AgendaService, Depends(get_agenda_service)],
) -> None:
    try:
        await service.delete_item(item_id)
    except (ValueError, AgendaError) as e:
        handle_service_error(e)


@router.post(
    "/{item_id}/move",
    response_model=MoveAgendaItemResponse,
    status_code=status.HTTP_200_OK,
    summary="다른 Agenda로 아이템 이동",
    description="원래 Agenda의 순서 압축/시간 재계산은 백그라운드 작업으로 처리됩니다.",
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
)
async def move_agenda_item(
    item_id: str,
    request: MoveAgendaItemRequest,
    service: Annotated[AgendaService, Depends(get_agenda_service)],
    dispatcher: Annotated[ArqTaskDispatcher, Depends(get_task_dispatcher)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> MoveAgendaItemResponse:
    try:
        result = await service.move_item(item_id, request)
    except (ValueError, AgendaError) as e:
        dispatcher.discard()
        handle_service_error(e)

    # 재계산 태스크는 커밋 이후에 큐잉
    await db.commit()
    await dispatcher.flush()
    return result
