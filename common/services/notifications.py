"""
Outbound notifications: in-app rows and transactional email.

Email helpers render ``common/templates/emails/*`` and send through
``django.core.mail``. Callers that run after a commit are expected to wrap
these in their own error boundary.
"""
from __future__ import annotations

import logging
from decimal import Decimal

from django.conf import settings
from django.core.mail import send_mail
from django.template.loader import render_to_string

from common.models import Notification

logger = logging.getLogger(__name__)


class NotificationService:

    @staticmethod
    def send(user, title, message, type=Notification.Type.SYSTEM):
        if user is None:
            return None

        return Notification.objects.create(
            user=user,
            title=title,
            message=message,
            type=type,
        )


def _send_templated_email(*, to: str, subject: str, template: str, context: dict) -> int:
    text_body = render_to_string(f"emails/{template}.txt", context)
    html_body = render_to_string(f"emails/{template}.html", context)
    sent = send_mail(
        subject=subject,
        message=text_body,
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[to],
        html_message=html_body,
    )
    logger.info("Sent %s email to %s", template, to)
    return sent


def send_monthly_salary_slip(
    *,
    email: str,
    name: str,
    month: str,
    year: int,
    breakdown: dict[str, Decimal | int],
) -> int:
    return _send_templated_email(
        to=email,
        subject=f"Salary Slip - {month} {year}",
        template="salary_slip",
        context={"name": name, "month": month, "year": year, "breakdown": breakdown},
    )


def send_salary_update_notification(
    *,
    email: str,
    name: str,
    wage: Decimal,
    components: list[dict],
) -> int:
    return _send_templated_email(
        to=email,
        subject="Salary Structure Updated",
        template="salary_update",
        context={"name": name, "wage": wage, "components": components},
    )


def send_leave_status_notification(
    *,
    email: str,
    name: str,
    leave_type: str,
    start_date,
    end_date,
    status: str,
    reason: str = "",
) -> int:
    return _send_templated_email(
        to=email,
        subject=f"Leave Request {status.title()}",
        template="leave_status",
        context={
            "name": name,
            "leave_type": leave_type,
            "start_date": start_date,
            "end_date": end_date,
            "status": status,
            "reason": reason,
        },
    )
