"""
Utilities package initialization.
"""
from .logger import (
    AuditEvent,
    bind_request_id,
    current_request_id,
    get_logger,
    log_business_event,
    log_performance,
    reset_request_id,
    setup_logging,
    timed,
)

__all__ = [
    "AuditEvent",
    "bind_request_id",
    "current_request_id",
    "get_logger",
    "log_business_event",
    "log_performance",
    "reset_request_id",
    "setup_logging",
    "timed",
]
