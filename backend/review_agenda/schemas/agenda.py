"""Agenda / AgendaItem 스키마"""

from datetime import date

from pydantic import BaseModel, Field, field_validator

from review_agenda.services.agenda.time_codec import is_valid_meeting_time


# ===== 저장소 레코드 =====


class AgendaRecord(BaseModel):
    """아젠다 레코드"""

    id: str
    name: str
    meeting_time: str | None = None
    meeting_date: date | None = None
    status: str


class AgendaItemRecord(BaseModel):
    """아젠다 아이템 레코드"""

    id: str
    agenda_id: str
    order: int | None = None
    duration: int | None = None
    start_time: str | None = None
    end_time: str | None = None
    topic: str | None = None
    project_owner: str | None = None
    document_owner: str | None = None
    document_id: str | None = None


class DocumentRecord(BaseModel):
    """문서 레코드"""

    id: str
    document_number: str
    owner: str
    project_manager: str | None = None
    agenda_ids: list[str] = Field(default_factory=list)


# ===== 요청 =====


class CreateAgendaItemRequest(BaseModel):
    """아젠다 아이템 생성 요청"""

    order: int | None = Field(default=None, ge=1)
    duration: int | None = Field(default=None, ge=0)
    topic: str | None = Field(default=None, max_length=255)
    project_owner: str | None = Field(default=None, alias="projectOwner")
    document_id: str | None = Field(default=None, alias="documentId")

    class Config:
        populate_by_name = True


class UpdateAgendaItemRequest(BaseModel):
    """아젠다 아이템 수정 요청

    명시적으로 보낸 필드만 반영한다 (order/duration/documentId는 null로 비우기 가능).
    """

    order: int | None = Field(default=None, ge=1)
    duration: int | None = Field(default=None, ge=0)
    topic: str | None = Field(default=None, max_length=255)
    project_owner: str | None = Field(default=None, alias="projectOwner")
    document_id: str | None = Field(default=None, alias="documentId")

    class Config:
        populate_by_name = True


class UpdateAgendaRequest(BaseModel):
    """아젠다 수정 요청"""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    meeting_time: str | None = Field(default=None, alias="meetingTime")
    meeting_date: date | None = Field(default=None, alias="meetingDate")

    class Config:
        populate_by_name = True

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str | None) -> str:
        # 보낸 경우에만 실행됨: name은 비울 수 없음
        if value is None:
            raise ValueError("name cannot be null")
        return value

    @field_validator("meeting_time")
    @classmethod
    def validate_meeting_time(cls, value: str | None) -> str | None:
        if value is not None and not is_valid_meeting_time(value):
            raise ValueError("meeting time must look like 'h:mm AM|PM' or 'HH:mm'")
        return value


class MoveAgendaItemRequest(BaseModel):
    """다른 아젠다로 아이템 이동 요청"""

    agenda_id: str = Field(alias="agendaId")

    class Config:
        populate_by_name = True


# ===== 응답 =====


class AgendaItemResponse(BaseModel):
    """아젠다 아이템 응답"""

    id: str
    agenda_id: str = Field(serialization_alias="agendaId")
    order: int | None
    duration: int | None
    start_time: str | None = Field(serialization_alias="startTime")
    end_time: str | None = Field(serialization_alias="endTime")
    topic: str | None
    project_owner: str | None = Field(serialization_alias="projectOwner")
    document_owner: str | None = Field(serialization_alias="documentOwner")
    document_id: str | None = Field(serialization_alias="documentId")

    class Config:
        populate_by_name = True
        from_attributes = True


class AgendaItemListResponse(BaseModel):
    """아젠다 아이템 목록 응답 (순서대로)"""

    items: list[AgendaItemResponse]


class AgendaResponse(BaseModel):
    """아젠다 응답"""

    id: str
    name: str
    meeting_time: str | None = Field(serialization_alias="meetingTime")
    meeting_date: date | None = Field(serialization_alias="meetingDate")
    status: str

    class Config:
        populate_by_name = True
        from_attributes = True


class CompressOrderingResponse(BaseModel):
    """순서 압축 결과"""

    agenda_id: str = Field(serialization_alias="agendaId")
    updated_count: int = Field(serialization_alias="updatedCount")


class MoveAgendaItemResponse(BaseModel):
    """아이템 이동 결과"""

    item_id: str = Field(serialization_alias="itemId")
    from_agenda_id: str = Field(serialization_alias="fromAgendaId")
    to_agenda_id: str = Field(serialization_alias="toAgendaId")
    recalc_scheduled: bool = Field(serialization_alias="recalcScheduled")
