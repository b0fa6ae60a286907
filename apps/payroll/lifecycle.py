"""
Payslip state machine.

    DRAFT --validate--> DONE
    DRAFT --cancel----> CANCELLED
    DRAFT --delete----> (removed)

DONE and CANCELLED are terminal.
"""
from __future__ import annotations

import logging
from functools import partial

from django.db import transaction

from common.clock import Clock, get_clock
from common.exceptions import IllegalStateTransition

from .exceptions import PayslipNotFound
from .models import Payslip
from .notifications import notify_payslip_validated

logger = logging.getLogger(__name__)


class PayslipLifecycle:
    @staticmethod
    def _locked(payslip_id: int, *, company_id) -> Payslip:
        payslip = (
            Payslip.objects.select_for_update()
            .select_related("employee")
            .filter(id=payslip_id, employee__company_id=company_id)
            .first()
        )
        if payslip is None:
            raise PayslipNotFound()
        return payslip

    @classmethod
    def validate(cls, payslip_id: int, *, company_id, clock: Clock | None = None) -> Payslip:
        clock = clock or get_clock()
        with transaction.atomic():
            payslip = cls._locked(payslip_id, company_id=company_id)
            if payslip.status != Payslip.Status.DRAFT:
                raise IllegalStateTransition(
                    f"Payslip is already {payslip.status.lower()}",
                    current_state=payslip.status,
                )
            payslip.status = Payslip.Status.DONE
            payslip.validated_at = clock.now()
            payslip.save(update_fields=["status", "validated_at", "updated_at"])
            transaction.on_commit(partial(notify_payslip_validated, payslip.id))

        logger.info("Payslip %s validated", payslip.id)
        return payslip

    @classmethod
    def cancel(cls, payslip_id: int, *, company_id, clock: Clock | None = None) -> Payslip:
        clock = clock or get_clock()
        with transaction.atomic():
            payslip = cls._locked(payslip_id, company_id=company_id)
            if payslip.status == Payslip.Status.CANCELLED:
                raise IllegalStateTransition("Payslip is already cancelled", current_state=payslip.status)
            if payslip.status == Payslip.Status.DONE:
                raise IllegalStateTransition("Payslip is already done", current_state=payslip.status)
            payslip.status = Payslip.Status.CANCELLED
            payslip.cancelled_at = clock.now()
            payslip.save(update_fields=["status", "cancelled_at", "updated_at"])

        logger.info("Payslip %s cancelled", payslip.id)
        return payslip

    @classmethod
    def delete(cls, payslip_id: int, *, company_id) -> Payslip:
        with transaction.atomic():
            payslip = cls._locked(payslip_id, company_id=company_id)
            if payslip.status != Payslip.Status.DRAFT:
                raise IllegalStateTransition("Only draft payslips can be deleted", current_state=payslip.status)
            snapshot = Payslip(
                id=payslip.id,
                employee_id=payslip.employee_id,
                pay_period=payslip.pay_period,
                status=payslip.status,
            )
            payslip.delete()

        logger.info("Payslip %s deleted", snapshot.id)
        return snapshot
