"""Unified audit facade package."""

from .events import AuditEvents
from .services import log_event

__all__ = ["log_event", "AuditEvents"]
