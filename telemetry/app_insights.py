"""Application Insights telemetry through Azure Monitor OpenTelemetry"""

import logging
import time
from typing import Dict, Optional

from azure.monitor.opentelemetry import configure_azure_monitor
from opentelemetry import trace
from opentelemetry.trace import SpanKind, Status, StatusCode, TracerProvider

from .sink import TelemetrySink

logger = logging.getLogger(__name__)


def configure_app_insights(connection_string: str, role: str) -> bool:
    """Route OpenTelemetry traces to Application Insights.

    Returns False when the exporter cannot be set up; the caller falls back
    to local telemetry.
    """
    try:
        configure_azure_monitor(
            connection_string=connection_string,
            resource_attributes={
                "service.name": role,
                "service.namespace": "aad-assessment",
            },
        )
    except ValueError as e:
        logger.warning("Azure Monitor setup failed: %s - telemetry kept local", e)
        return False
    logging.getLogger("azure.monitor.opentelemetry").setLevel(logging.WARNING)
    logging.getLogger("azure.core").setLevel(logging.WARNING)
    return True


class AppInsightsTelemetry(TelemetrySink):
    """Events, exceptions and run requests as OpenTelemetry spans.

    Azure Monitor maps SERVER spans to requests, span events to trace
    records and recorded exceptions to exceptions.
    """

    def __init__(self, tracer_provider: Optional[TracerProvider] = None):
        if tracer_provider is None:
            self.tracer = trace.get_tracer(__name__)
        else:
            self.tracer = tracer_provider.get_tracer(__name__)

    async def track_event(self, name, properties=None):
        with self.tracer.start_as_current_span(name, attributes=properties or {}) as span:
            span.add_event(name, attributes=properties or {})

    async def track_exception(self, error, properties=None):
        with self.tracer.start_as_current_span(
            type(error).__name__,
            attributes=properties or {},
            record_exception=False,
            set_status_on_exception=False,
        ) as span:
            span.record_exception(error)
            span.set_status(Status(StatusCode.ERROR, str(error)))

    async def track_request(self, name, success, duration_seconds, properties=None):
        end = time.time_ns()
        span = self.tracer.start_span(
            name,
            kind=SpanKind.SERVER,
            attributes=_request_attributes(success, properties),
            start_time=end - int(max(duration_seconds, 0.0) * 1e9),
        )
        span.set_status(Status(StatusCode.OK if success else StatusCode.ERROR))
        span.end(end_time=end)


def _request_attributes(success: bool, properties: Optional[Dict[str, str]]) -> Dict[str, object]:
    attributes = dict(properties or {})
    attributes["run.success"] = success
    return attributes
