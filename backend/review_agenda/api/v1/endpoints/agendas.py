"""Agenda API 엔드포인트

Agenda 조회/수정, 하위 아이템 목록/생성, 순서 압축.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from review_agenda.api.dependencies import get_agenda_service, handle_service_error
from review_agenda.core.exceptions import AgendaError
from review_agenda.schemas import ErrorResponse
from review_agenda.schemas.agenda import (
    AgendaItemListResponse,
    AgendaItemResponse,
    AgendaResponse,
    CompressOrderingResponse,
    CreateAgendaItemRequest,
    UpdateAgendaRequest,
)
from review_agenda.services.agenda_service import AgendaService

router = APIRouter(prefix="/agendas", tags=["Agendas"])


@router.get(
    "/{agenda_id}",
    response_model=AgendaResponse,
    status_code=status.HTTP_200_OK,
    summary="Agenda 조회",
    responses={404: {"model": ErrorResponse}},
)
async def get_agenda(
    agenda_id: str,
    service: Annotated[AgendaService, Depends(get_agenda_service)],
) -> AgendaResponse:
    try:
        return await service.get_agenda(agenda_id)
    except ValueError as e:
        handle_service_error(e)


@router.patch(
    "/{agenda_id}",
    response_model=AgendaResponse,
    status_code=status.HTTP_200_OK,
    summary="Agenda 수정",
    description="미팅 시간이 바뀌면 하위 아이템의 시작/종료 시간을 다시 계산합니다.",
    responses={
        404: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def update_agenda(
    agenda_id: str,
    request: UpdateAgendaRequest,
    service: Annotated[AgendaService, Depends(get_agenda_service)],
) -> AgendaResponse:
    try:
        return await service.update_agenda(agenda_id, request)
    except (ValueError, AgendaError) as e:
        handle_service_error(e)


@router.post(
    "/{agenda_id}/compress-ordering",
    response_model=CompressOrderingResponse,
    status_code=status.HTTP_200_OK,
    summary="아이템 순서 압축",
    description='order 번호를 1부터 연속되게 정리합니다 ("2, 3, 6" → "1, 2, 3").',
    responses={404: {"model": ErrorResponse}},
)
async def compress_item_ordering(
    agenda_id: str,
    service: Annotated[AgendaService, Depends(get_agenda_service)],
) -> CompressOrderingResponse:
    try:
        return await service.compress_item_ordering(agenda_id)
    except (ValueError, AgendaError) as e:
        handle_service_error(e)


@router.get(
    "/{agenda_id}/items",
    response_model=AgendaItemListResponse,
    status_code=status.HTTP_200_OK,
    summary="Agenda 아이템 목록",
    responses={404: {"model": ErrorResponse}},
)
async def list_agenda_items(
    agenda_id: str,
    service: Annotated[AgendaService, Depends(get_agenda_service)],
) -> AgendaItemListResponse:
    try:
        return await service.list_items(agenda_id)
    except ValueError as e:
        handle_service_error(e)


@router.post(
    "/{agenda_id}/items",
    response_model=AgendaItemResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Agenda 아이템 생성",
    responses={
        404: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def create_agenda_item(
    agenda_id: str,
    request: CreateAgendaItemRequest,
    service: Annotated[AgendaService, Depends(get_agenda_service)],
) -> AgendaItemResponse:
    try:
        return await service.create_item(agenda_id, request)
    except (ValueError, AgendaError) as e:
        handle_service_error(e)
