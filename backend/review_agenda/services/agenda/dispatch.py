"""비동기 태스크 디스패치

엔진은 "이 작업을 (다른 워커에서) 파라미터와 함께 실행" 만 요청한다.
ArqTaskDispatcher는 요청 트랜잭션이 커밋된 뒤 flush()로 큐에 등록한다.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Protocol

from arq import ArqRedis

logger = logging.getLogger(__name__)


class TaskDispatcher(Protocol):
    """비동기 태스크 디스패처 인터페이스"""

    async def schedule(self, task_name: str, params: dict[str, str | None]) -> None:
        """태스크 실행 예약 (fire-and-forget)"""
        ...


class ArqTaskDispatcher:
    """ARQ 기반 디스패처

    schedule()은 버퍼에 쌓기만 하고, 커밋 후 flush()에서 enqueue한다.
    롤백된 트랜잭션의 태스크가 실행되지 않도록 하기 위함.
    """

    def __init__(self, pool_factory: Callable[[], Awaitable[ArqRedis]]):
        self.pool_factory = pool_factory
        self.pending: list[tuple[str, dict[str, str | None]]] = []

    async def schedule(self, task_name: str, params: dict[str, str | None]) -> None:
        self.pending.append((task_name, dict(params)))

    async def flush(self) -> int:
        """버퍼된 태스크 큐잉

        큐잉 실패는 로그만 남긴다 (원 요청은 이미 커밋됨).

        Returns:
            큐잉한 태스크 수
        """
        if not self.pending:
            return 0

        pending, self.pending = self.pending, []
        enqueued = 0
        try:
            pool = await self.pool_factory()
            try:
                for task_name, params in pending:
                    await pool.enqueue_job(task_name, **params)
                    enqueued += 1
                    logger.info(f"{task_name} enqueued: {params}")
            finally:
                await pool.close()
        except Exception as e:
            logger.error(f"Failed to enqueue agenda tasks: {e}")

        return enqueued

    def discard(self) -> None:
        """버퍼 비우기 (롤백 시)"""
        self.pending.clear()


class InMemoryTaskDispatcher:
    """예약된 태스크를 기록만 하는 디스패처 (테스트/로컬)"""

    def __init__(self) -> None:
        self.scheduled: list[tuple[str, dict[str, str | None]]] = []

    async def schedule(self, task_name: str, params: dict[str, str | None]) -> None:
        self.scheduled.append((task_name, dict(params)))
