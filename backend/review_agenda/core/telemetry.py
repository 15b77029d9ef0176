"""OpenTelemetry 계측 설정

Backend와 ARQ Worker에서 공통으로 사용하는 OTel 초기화 로직.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from opentelemetry import metrics, trace
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.semconv.resource import ResourceAttributes

from review_agenda.core.config import get_settings

if TYPE_CHECKING:
    from fastapi import FastAPI

logger = logging.getLogger(__name__)


def init_telemetry(
    service_name: str,
    service_version: str = "0.1.0",
    otlp_endpoint: str | None = None,
) -> tuple[trace.Tracer, metrics.Meter]:
    """OpenTelemetry 초기화

    Args:
        service_name: 서비스 이름 (예: "review-agenda-backend", "review-agenda-worker")
        service_version: 서비스 버전
        otlp_endpoint: OTLP 수신 엔드포인트 (기본값: settings.otel_exporter_otlp_endpoint)

    Returns:
        (Tracer, Meter) 튜플
    """
    settings = get_settings()
    endpoint = otlp_endpoint or settings.otel_exporter_otlp_endpoint

    resource = Resource.create(
        {
            ResourceAttributes.SERVICE_NAME: service_name,
            ResourceAttributes.SERVICE_VERSION: service_version,
            ResourceAttributes.DEPLOYMENT_ENVIRONMENT: settings.app_env,
        }
    )

    tracer_provider = TracerProvider(resource=resource)
    trace.set_tracer_provider(tracer_provider)

    # 수집기가 없는 로컬 환경에서는 export 없이 계측만 유지
    metric_readers = []
    if settings.otel_metrics_export_enabled:
        metric_readers.append(
            PeriodicExportingMetricReader(
                OTLPMetricExporter(endpoint=endpoint, insecure=True),
                export_interval_millis=settings.otel_metric_export_interval_ms,
            )
        )
    meter_provider = MeterProvider(resource=resource, metric_readers=metric_readers)
    metrics.set_meter_provider(meter_provider)

    tracer = trace.get_tracer(service_name, service_version)
    meter = metrics.get_meter(service_name, service_version)

    logger.info(
        "Telemetry initialized: service=%s, endpoint=%s, export=%s",
        service_name,
        endpoint,
        settings.otel_metrics_export_enabled,
    )

    return tracer, meter


def instrument_fastapi(app: FastAPI) -> None:
    """FastAPI 자동 계측"""
    try:
        from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

        FastAPIInstrumentor.instrument_app(app)
        logger.info("FastAPI instrumentation enabled")
    except Exception as e:
        logger.warning("Failed to instrument FastAPI: %s", e)


class AgendaMetrics:
    """아젠다 엔진 커스텀 메트릭"""

    def __init__(self, meter: metrics.Meter):
        self.meter = meter
        self.task_result = self.meter.create_counter(
            name="agenda_task_result_total",
            description="아젠다 백그라운드 태스크 결과 (success/failed)",
        )
        self.task_duration = self.meter.create_histogram(
            name="agenda_task_duration_seconds",
            description="아젠다 백그라운드 태스크 실행 시간",
            unit="s",
        )
        self.saved_items = self.meter.create_counter(
            name="agenda_sequence_saved_items_total",
            description="배치 저장된 아젠다 아이템 수",
        )


# ===========================================
# 싱글톤 인스턴스 및 접근자
# ===========================================

_tracer: trace.Tracer | None = None
_meter: metrics.Meter | None = None
_agenda_metrics: AgendaMetrics | None = None
_initialized: bool = False


def get_tracer() -> trace.Tracer:
    """Tracer 인스턴스 반환 (초기화 안 된 경우 noop tracer 반환)"""
    if _tracer is None:
        return trace.get_tracer("agenda-noop")
    return _tracer


def get_agenda_metrics() -> AgendaMetrics | None:
    """아젠다 메트릭 인스턴스 반환 (초기화 안 된 경우 None)"""
    return _agenda_metrics


def setup_telemetry(service_name: str, service_version: str = "0.1.0") -> None:
    """전역 telemetry 설정 (프로세스 시작 시 호출)"""
    global _tracer, _meter, _agenda_metrics, _initialized

    if _initialized:
        logger.warning("Telemetry already initialized, skipping")
        return

    _tracer, _meter = init_telemetry(service_name, service_version)
    _agenda_metrics = AgendaMetrics(_meter)
    _initialized = True
