"""Telemetry sink interface and local implementations"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class TelemetrySink(ABC):
    """Fire-and-forget receiver of run events.

    Implementations must not raise; a failing sink never affects the run.
    """
    
    @abstractmethod
    async def track_event(self, name: str, properties: Optional[Dict[str, str]] = None):
        """Record a named event"""
        pass
    
    @abstractmethod
    async def track_exception(self, error: BaseException, properties: Optional[Dict[str, str]] = None):
        """Record an exception"""
        pass
    
    @abstractmethod
    async def track_request(
        self,
        name: str,
        success: bool,
        duration_seconds: float,
        properties: Optional[Dict[str, str]] = None,
    ):
        """Record the completion of a whole run"""
        pass


class NullTelemetry(TelemetrySink):
    """Discards everything"""
    
    async def track_event(self, name, properties=None):
        pass
    
    async def track_exception(self, error, properties=None):
        pass
    
    async def track_request(self, name, success, duration_seconds, properties=None):
        pass


class LoggingTelemetry(TelemetrySink):
    """Writes telemetry to the application log"""
    
    async def track_event(self, name, properties=None):
        logger.info("event %s %s", name, properties or {})
    
    async def track_exception(self, error, properties=None):
        logger.info("exception %s: %s %s", type(error).__name__, error, properties or {})
    
    async def track_request(self, name, success, duration_seconds, properties=None):
        logger.info(
            "request %s success=%s duration=%.2fs %s",
            name, success, duration_seconds, properties or {},
        )
