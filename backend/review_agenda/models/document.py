import uuid

from sqlalchemy import Column, ForeignKey, String, Table
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from review_agenda.core.database import Base

# 문서 ↔ 아젠다 연결 (문서 하나가 여러 리뷰 아젠다에 올라갈 수 있음)
document_agendas = Table(
    "document_agendas",
    Base.metadata,
    Column("document_id", UUID(as_uuid=True), ForeignKey("documents.id"), primary_key=True),
    Column("agenda_id", UUID(as_uuid=True), ForeignKey("agendas.id"), primary_key=True),
)


class Document(Base):
    """리뷰 대상 문서 모델 (아젠다 아이템이 참조)"""

    __tablename__ = "documents"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    document_number: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    owner: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    project_manager: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
    )

    # 관계
    agendas: Mapped[list["Agenda"]] = relationship(
        "Agenda",
        secondary=document_agendas,
    )

    def __repr__(self) -> str:
        return f"<Document {self.document_number}>"


from review_agenda.models.agenda import Agenda  # noqa: E402
