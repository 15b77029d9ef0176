"""아젠다 변경 알림 스키마

저장소 쓰기 1회당 알림 1건. 배치 저장은 changes가 여러 개인 알림 1건으로 전달된다.
"""

from enum import Enum

from pydantic import BaseModel, Field


class RecordEvent(str, Enum):
    """레코드 변경 이벤트 종류"""

    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


class ItemSnapshot(BaseModel):
    """변경 전/후 아이템 스냅샷 (엔진이 보는 필드만)"""

    order: int | None = None
    duration: int | None = None


class ItemChange(BaseModel):
    """아이템 1건 변경 (INSERT면 old=None, DELETE면 new=None)"""

    agenda_id: str
    item_id: str
    old: ItemSnapshot | None = None
    new: ItemSnapshot | None = None

    @property
    def old_order(self) -> int | None:
        return self.old.order if self.old else None

    @property
    def new_order(self) -> int | None:
        return self.new.order if self.new else None

    @property
    def old_duration(self) -> int | None:
        return self.old.duration if self.old else None

    @property
    def new_duration(self) -> int | None:
        return self.new.duration if self.new else None


class ItemChangeNotification(BaseModel):
    """아이템 변경 알림"""

    event: RecordEvent
    changes: list[ItemChange] = Field(default_factory=list)


class AgendaChange(BaseModel):
    """아젠다 미팅 시간 변경 1건"""

    agenda_id: str
    old_meeting_time: str | None = None
    new_meeting_time: str | None = None


class AgendaChangeNotification(BaseModel):
    """아젠다 변경 알림 (UPDATE만 발생)"""

    changes: list[AgendaChange] = Field(default_factory=list)
