import uuid
from datetime import date, datetime, timezone

from sqlalchemy import Date, DateTime, ForeignKey, Integer, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from review_agenda.core.constants import AgendaStatus
from review_agenda.core.database import Base


class Agenda(Base):
    """아젠다 모델 (리뷰 회의 1건)"""

    __tablename__ = "agendas"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    # "h:mm AM|PM ..." 또는 "HH:mm ..." 형식 (예: "10:30 AM ET", "13:30 CET")
    meeting_time: Mapped[str | None] = mapped_column(
        String(50),
        nullable=True,
    )
    meeting_date: Mapped[date | None] = mapped_column(
        Date,
        nullable=True,
    )
    status: Mapped[str] = mapped_column(
        String(20),
        default=AgendaStatus.ACTIVE,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    # 관계
    items: Mapped[list["AgendaItem"]] = relationship(
        "AgendaItem",
        back_populates="agenda",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Agenda {self.name}>"


class AgendaItem(Base):
    """아젠다 아이템 모델"""

    __tablename__ = "agenda_items"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    agenda_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("agendas.id"),
        nullable=False,
        index=True,
    )
    order: Mapped[int | None] = mapped_column(
        "order",
        Integer,
        nullable=True,
    )
    duration: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
        comment="소요 시간 (분)",
    )
    start_time: Mapped[str | None] = mapped_column(
        String(20),
        nullable=True,
    )
    end_time: Mapped[str | None] = mapped_column(
        String(20),
        nullable=True,
    )
    topic: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )
    project_owner: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
    )
    document_owner: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
    )
    document_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("documents.id"),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    # 관계
    agenda: Mapped["Agenda"] = relationship("Agenda", back_populates="items")

    def __repr__(self) -> str:
        return f"<AgendaItem {self.id} order={self.order}>"


class AgendaItemMove(Base):
    """아젠다 아이템 이동 요청 (이동 완료 후 삭제되는 임시 레코드)"""

    __tablename__ = "agenda_item_moves"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    agenda_item_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("agenda_items.id", ondelete="CASCADE"),
        nullable=False,
    )
    agenda_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("agendas.id"),
        nullable=False,
        comment="이동 대상 아젠다",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<AgendaItemMove {self.agenda_item_id} -> {self.agenda_id}>"


# 순환 import 방지
from review_agenda.models.document import Document  # noqa: E402, F401
