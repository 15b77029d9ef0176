from fastapi import APIRouter

from review_agenda.api.v1.endpoints import agenda_items, agendas

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(agendas.router)
api_router.include_router(agenda_items.router)
