# Core Module - Shared Utilities
#
# - Configuration (authorized_keys path, audit directory)
# - Audit logging

from .audit_log import (
    AuditLogger,
    EventSeverity,
    EventType,
    get_audit_logger,
)
from .config import KeywardConfig, load_config

__all__ = [
    # Configuration
    "KeywardConfig",
    "load_config",
    # Audit Logging
    "AuditLogger",
    "EventType",
    "EventSeverity",
    "get_audit_logger",
]
