"""
Domain error taxonomy shared by all WorkZen apps.

Every error carries a stable ``code`` for machine consumers, an HTTP
``status_code`` and a human-readable message. ``api_exception_handler``
renders them for DRF views.
"""
from __future__ import annotations

import logging
from typing import Any

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class WorkZenError(Exception):
    code = "error"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Request could not be processed."

    def __init__(self, message: str | None = None, **details: Any):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def as_payload(self) -> dict[str, Any]:
        return {"code": self.code, "detail": self.message, **self.details}


class ValidationError(WorkZenError):
    code = "validation_error"
    default_message = "Invalid input."


class NotFound(WorkZenError):
    code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found."


class IllegalStateTransition(WorkZenError):
    code = "illegal_state_transition"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Transition is not allowed from the current state."

    def __init__(self, message: str | None = None, *, current_state: str = "", **details: Any):
        self.current_state = current_state
        super().__init__(message, current_state=current_state, **details)


def api_exception_handler(exc, context):
    if isinstance(exc, WorkZenError):
        view = context.get("view")
        logger.info(
            "%s in %s: %s",
            exc.code,
            view.__class__.__name__ if view else "unknown view",
            exc.message,
        )
        return Response(exc.as_payload(), status=exc.status_code)
    return exception_handler(exc, context)
