"""비동기 DB 엔진/세션

API 요청 1건, 백그라운드 작업 1회가 각각 세션 하나(트랜잭션 하나)를 사용한다.
아이템 배치 저장은 이 트랜잭션 안에서 SAVEPOINT로 묶인다.
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from review_agenda.core.config import get_settings

settings = get_settings()

engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    pool_pre_ping=True,
    pool_size=settings.database_pool_size,
)

# 커밋 후에도 응답 변환에 ORM 객체를 쓰므로 expire하지 않음
async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """아젠다 모델 기본 클래스"""


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """요청 단위 DB 세션 (정상 종료 시 커밋, 예외 시 전체 롤백)"""
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
