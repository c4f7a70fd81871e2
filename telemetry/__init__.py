"""Telemetry sinks"""

from .sink import TelemetrySink, NullTelemetry, LoggingTelemetry
from .app_insights import AppInsightsTelemetry, configure_app_insights

__all__ = [
    "TelemetrySink",
    "NullTelemetry",
    "LoggingTelemetry",
    "AppInsightsTelemetry",
    "configure_app_insights",
]
