from __future__ import annotations

import logging

from common.models import Notification
from common.services.notifications import NotificationService, send_leave_status_notification

logger = logging.getLogger(__name__)


def notify_leave_status(leave_id: int) -> None:
    """Post-commit hook; a failure here never affects the leave itself."""
    from .models import Leave

    try:
        leave = Leave.objects.select_related("employee", "employee__user").get(id=leave_id)
        employee = leave.employee
        send_leave_status_notification(
            email=employee.email,
            name=employee.full_name,
            leave_type=leave.get_leave_type_display(),
            start_date=leave.start_date,
            end_date=leave.end_date,
            status=leave.status,
            reason=leave.rejection_reason,
        )
        NotificationService.send(
            employee.user,
            f"Leave {leave.get_status_display().lower()}",
            f"Your {leave.get_leave_type_display().lower()} from {leave.start_date} to {leave.end_date} "
            f"was {leave.get_status_display().lower()}.",
            type=Notification.Type.LEAVE,
        )
    except Exception:
        logger.exception("Failed to send leave status notification for leave=%s", leave_id)
