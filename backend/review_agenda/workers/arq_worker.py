"""ARQ Worker 설정 및 태스크 정의 (OTel 계측 포함)"""

import logging
import time
from datetime import date
from functools import wraps
from typing import Any, Callable, TypeVar
from urllib.parse import urlparse

from arq import cron
from arq.connections import RedisSettings
from opentelemetry import trace

from review_agenda.core.config import get_settings
from review_agenda.core.constants import (
    AGENDA_ITEM_RECALC_TASK,
    DEACTIVATE_PAST_AGENDAS_TASK,
)
from review_agenda.core.database import async_session_maker
from review_agenda.core.exceptions import FormatError, PersistenceError
from review_agenda.core.request_context import RequestContext
from review_agenda.core.telemetry import get_agenda_metrics, get_tracer, setup_telemetry
from review_agenda.repositories.agenda import create_agenda_repository
from review_agenda.services.agenda_service import AgendaService

logger = logging.getLogger(__name__)

T = TypeVar("T")


def traced_task(task_name: str) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """ARQ 태스크에 OTel 트레이싱 + 메트릭 추가 데코레이터

    태스크가 {"status": "failed"}를 반환해도 실패로 기록한다.
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        async def wrapper(ctx: dict, *args: Any, **kwargs: Any) -> T:
            tracer = get_tracer()
            metrics = get_agenda_metrics()

            with tracer.start_as_current_span(
                f"arq.task.{task_name}",
                kind=trace.SpanKind.CONSUMER,
            ) as span:
                span.set_attribute("arq.task.name", task_name)
                span.set_attribute("arq.task.args", str(kwargs or args)[:200])

                start_time = time.perf_counter()
                try:
                    result = await func(ctx, *args, **kwargs)

                    status = "success"
                    if isinstance(result, dict) and result.get("status") == "failed":
                        status = "failed"
                        span.set_status(
                            trace.Status(trace.StatusCode.ERROR, str(result.get("error")))
                        )

                    span.set_attribute("arq.task.status", status)
                    if metrics:
                        metrics.task_result.add(1, {"task_name": task_name, "status": status})
                    return result

                except Exception as e:
                    # 실패 메트릭
                    span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
                    span.record_exception(e)
                    if metrics:
                        metrics.task_result.add(
                            1, {"task_name": task_name, "status": "failed"}
                        )
                    raise

                finally:
                    # 실행 시간 메트릭
                    duration = time.perf_counter() - start_time
                    if metrics:
                        metrics.task_duration.record(
                            duration, {"task_name": task_name}
                        )

        return wrapper  # type: ignore
    return decorator


@traced_task(AGENDA_ITEM_RECALC_TASK)
async def agenda_item_recalc_task(
    ctx: dict, agenda_id: str, meeting_time: str | None = None
) -> dict:
    """아젠다 아이템 재계산 태스크

    아이템 이동 후 원래 아젠다의 순서 압축과 시작/종료 시간 재계산을 수행합니다.
    새 RequestContext를 사용하므로 이전 트랜잭션의 재진입 플래그와 무관합니다.

    형식 오류/저장 실패는 재시도해도 성공하지 않으므로 실패 결과만 반환합니다.

    Args:
        ctx: ARQ 컨텍스트
        agenda_id: 아젠다 ID
        meeting_time: 예약 시점의 아젠다 미팅 시간

    Returns:
        dict: 작업 결과
    """
    async with async_session_maker() as db:
        repository = create_agenda_repository(db)
        service = AgendaService(repository, RequestContext())

        try:
            agenda = await repository.get_agenda(agenda_id)
            if not agenda:
                logger.error(f"Agenda not found: agenda={agenda_id}")
                return {"status": "failed", "error": "AGENDA_NOT_FOUND"}

            logger.info(f'Updating start/end times for agenda: "{agenda.name}" ({agenda_id})')

            updated_count = await service.recalculate_agenda(agenda_id, meeting_time)
            await db.commit()

            logger.info(
                f'Completed start/end times update for agenda: "{agenda.name}" ({agenda_id}), '
                f"updated={updated_count}"
            )
            return {
                "status": "success",
                "agenda_id": agenda_id,
                "updated_count": updated_count,
            }

        except (FormatError, PersistenceError) as e:
            await db.rollback()
            logger.exception(f"agenda_item_recalc task failed: agenda={agenda_id}")
            return {
                "status": "failed",
                "agenda_id": agenda_id,
                "error": e.error_code,
            }


@traced_task(DEACTIVATE_PAST_AGENDAS_TASK)
async def deactivate_past_agendas_task(ctx: dict) -> dict:
    """지난 아젠다 비활성화 태스크 (cron)

    meeting_date가 오늘 이전인 활성 아젠다를 비활성화합니다.
    """
    async with async_session_maker() as db:
        service = AgendaService(create_agenda_repository(db), RequestContext())

        logger.info("Starting deactivation...")
        agendas = await service.deactivate_past_agendas(date.today())
        await db.commit()
        logger.info("...deactivation complete")

        return {
            "status": "success",
            "deactivated_count": len(agendas),
        }


def _get_redis_settings() -> RedisSettings:
    """Redis 연결 설정 생성"""
    settings = get_settings()
    parsed = urlparse(settings.arq_redis_url)

    return RedisSettings(
        host=parsed.hostname or "localhost",
        port=parsed.port or 6379,
        database=int(parsed.path.lstrip("/") or "0"),
        password=parsed.password,
    )


async def startup(ctx: dict) -> None:
    """Worker 시작 시 Telemetry 초기화"""
    setup_telemetry("review-agenda-worker", "0.1.0")
    logger.info("ARQ Worker started with telemetry")


async def shutdown(ctx: dict) -> None:
    """Worker 종료 시 정리"""
    logger.info("ARQ Worker shutting down")


class WorkerSettings:
    """ARQ Worker 설정"""

    # 등록된 태스크 함수
    functions = [
        agenda_item_recalc_task,
        deactivate_past_agendas_task,
    ]

    # 매일 지난 아젠다 비활성화
    cron_jobs = [
        cron(
            deactivate_past_agendas_task,
            hour=get_settings().agenda_deactivation_hour,
            minute=0,
        ),
    ]

    # Redis 연결 설정 (arq는 인스턴스를 기대)
    redis_settings = _get_redis_settings()

    # 라이프사이클 콜백
    on_startup = startup
    on_shutdown = shutdown

    # Worker 설정
    max_tries = get_settings().agenda_worker_max_tries   # 기본 1회 (재시도 없음)
    job_timeout = get_settings().agenda_recalc_job_timeout
    keep_result = 3600               # 결과 보관 시간 (1시간)
    health_check_interval = 60       # 헬스체크 간격 (60초)
