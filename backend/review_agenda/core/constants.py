"""Application constants"""

# RequestContext 재진입 방지 플래그 키
AGENDA_ITEM_SEMAPHORE = "semaphore"

# ARQ 태스크 이름
AGENDA_ITEM_RECALC_TASK = "agenda_item_recalc_task"
DEACTIVATE_PAST_AGENDAS_TASK = "deactivate_past_agendas_task"

# 재계산 태스크 파라미터 키
AGENDA_ID = "agenda_id"
AGENDA_MEETING_TIME = "meeting_time"


class AgendaStatus:
    """Agenda 상태 상수"""
    ACTIVE = "active"
    INACTIVE = "inactive"
