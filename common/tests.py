from datetime import date, datetime
from decimal import Decimal

import pytest
from django.core import mail
from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from accounts.models import AuditLog
from common.clock import FixedClock, SystemClock, get_clock, use_clock
from common.exceptions import IllegalStateTransition, NotFound, ValidationError
from common.models import Notification
from common.periods import (
    inclusive_day_count,
    iter_days,
    month_date_range,
    month_index_from_number,
    month_name,
    pay_period_label,
    working_days_in_month,
    working_hours,
)
from common.services.notifications import NotificationService, send_monthly_salary_slip
from common.testing import make_company, make_user


def test_month_index_from_number_is_zero_based():
    assert month_index_from_number(1) == 0
    assert month_index_from_number(12) == 11


@pytest.mark.parametrize("month", [0, 13])
def test_month_index_from_number_rejects_out_of_range(month):
    with pytest.raises(ValueError):
        month_index_from_number(month)


def test_month_date_range_handles_leap_february():
    period = month_date_range(2024, 1)

    assert period.start == date(2024, 2, 1)
    assert period.end == date(2024, 2, 29)


def test_working_days_exclude_sundays():
    assert working_days_in_month(2024, 1) == 25
    assert working_days_in_month(2025, 9) == 27


def test_working_days_with_other_rest_day():
    # February 2024 has five Thursdays.
    assert working_days_in_month(2024, 1, rest_weekday=3) == 24


def test_month_labels():
    assert month_name(9) == "October"
    assert pay_period_label(2025, 9) == "Oct 2025"


def test_inclusive_day_count():
    assert inclusive_day_count(date(2025, 10, 6), date(2025, 10, 6)) == 1
    assert inclusive_day_count(date(2025, 9, 28), date(2025, 10, 3)) == 6
    assert inclusive_day_count(datetime(2025, 10, 6, 9), datetime(2025, 10, 6, 17)) == 2


def test_iter_days_is_inclusive():
    days = list(iter_days(date(2025, 10, 30), date(2025, 11, 1)))

    assert days == [date(2025, 10, 30), date(2025, 10, 31), date(2025, 11, 1)]


def test_working_hours_rounds_to_cents():
    start = datetime(2025, 10, 6, 9, 0)

    assert working_hours(start, datetime(2025, 10, 6, 17, 20)) == Decimal("8.33")
    assert working_hours(start, None) == Decimal("0.00")


def test_fixed_clock_and_use_clock():
    clock = FixedClock(datetime(2025, 10, 6, 23, 30))

    with use_clock(clock):
        assert get_clock() is clock
        assert get_clock().today() == date(2025, 10, 6)
        clock.advance(hours=1)
        assert get_clock().today() == date(2025, 10, 7)

    assert isinstance(get_clock(), SystemClock)
    assert timezone.is_aware(clock.now())


def test_error_payloads():
    error = IllegalStateTransition("Payslip is already done", current_state="DONE")

    assert error.status_code == 409
    assert error.as_payload() == {
        "code": "illegal_state_transition",
        "detail": "Payslip is already done",
        "current_state": "DONE",
    }
    assert NotFound().status_code == 404
    assert ValidationError().message == "Invalid input."


class NotificationTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.company = make_company()
        self.user = make_user("asha", company=self.company)
        self.other = make_user("ravi", company=self.company)

    def test_send_without_user_is_skipped(self):
        self.assertIsNone(NotificationService.send(None, "Title", "Body"))

    def test_list_and_mark_read(self):
        first = NotificationService.send(self.user, "Payslip available", "Ready", type=Notification.Type.PAYROLL)
        NotificationService.send(self.user, "Leave approved", "Enjoy", type=Notification.Type.LEAVE)
        NotificationService.send(self.other, "Other", "Not yours")
        self.client.force_authenticate(self.user)

        response = self.client.get("/api/v1/common/notifications/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["unread_count"], 2)
        self.assertEqual(len(response.data["items"]), 2)

        response = self.client.patch(f"/api/v1/common/notifications/{first.id}/read/")
        self.assertEqual(response.status_code, 200)

        response = self.client.patch("/api/v1/common/notifications/read-all/")
        self.assertEqual(response.data["updated"], 1)
        self.assertEqual(
            AuditLog.objects.filter(action="notifications_marked_read", user=self.user).count(), 2
        )

    def test_list_filters_by_type_and_unread(self):
        payslip = NotificationService.send(self.user, "Payslip available", "Ready", type=Notification.Type.PAYROLL)
        NotificationService.send(self.user, "Payslip available", "Ready", type=Notification.Type.PAYROLL)
        NotificationService.send(self.user, "Leave approved", "Enjoy", type=Notification.Type.LEAVE)
        Notification.objects.filter(id=payslip.id).update(is_read=True)
        self.client.force_authenticate(self.user)

        response = self.client.get("/api/v1/common/notifications/", {"type": "payroll"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["unread_count"], 2)
        self.assertEqual(len(response.data["items"]), 2)
        self.assertEqual({item["type"] for item in response.data["items"]}, {"payroll"})
        self.assertEqual(response.data["items"][0]["type_display"], "Payroll")

        response = self.client.get("/api/v1/common/notifications/", {"type": "payroll", "unread": "true"})
        self.assertEqual(len(response.data["items"]), 1)
        self.assertFalse(response.data["items"][0]["is_read"])

        response = self.client.get("/api/v1/common/notifications/", {"type": "leave"})
        self.assertEqual([item["title"] for item in response.data["items"]], ["Leave approved"])

        response = self.client.get("/api/v1/common/notifications/", {"limit": 1})
        self.assertEqual(len(response.data["items"]), 1)

    def test_list_rejects_unknown_type(self):
        self.client.force_authenticate(self.user)

        response = self.client.get("/api/v1/common/notifications/", {"type": "birthday"})

        self.assertEqual(response.status_code, 400)

    def test_cannot_mark_someone_elses_notification(self):
        foreign = NotificationService.send(self.other, "Other", "Not yours")
        self.client.force_authenticate(self.user)

        response = self.client.patch(f"/api/v1/common/notifications/{foreign.id}/read/")

        self.assertEqual(response.status_code, 404)


class SalarySlipEmailTests(TestCase):
    def test_renders_text_and_html_bodies(self):
        breakdown = {
            "basic_salary": Decimal("25000.00"),
            "hra": Decimal("12500.00"),
            "other_allowances": Decimal("0"),
            "gross_salary": Decimal("37500.00"),
            "provident_fund": Decimal("3000.00"),
            "tax": Decimal("200.00"),
            "other_deductions": Decimal("0"),
            "total_deductions": Decimal("3200.00"),
            "net_salary": Decimal("34300.00"),
            "working_days": 26,
            "present_days": 26,
            "leave_days": 0,
        }

        send_monthly_salary_slip(
            email="asha@example.test",
            name="Asha Rao",
            month="October",
            year=2025,
            breakdown=breakdown,
        )

        self.assertEqual(len(mail.outbox), 1)
        message = mail.outbox[0]
        self.assertEqual(message.subject, "Salary Slip - October 2025")
        self.assertIn("34300.00", message.body)
        self.assertEqual(message.alternatives[0][1], "text/html")
