from decimal import Decimal

from django.core import mail
from django.test import TestCase, override_settings

from apps.payroll.exceptions import ComponentsExceedWage
from apps.payroll.models import SalaryComponent, SalaryStructure
from apps.payroll.services import SalaryStructureService
from common.testing import make_company, make_employee, make_salary_structure

PCT_WAGE = SalaryComponent.ComputationType.PERCENTAGE_OF_WAGE
PCT_BASIC = SalaryComponent.ComputationType.PERCENTAGE_OF_BASIC
FIXED = SalaryComponent.ComputationType.FIXED_AMOUNT


class SalaryStructureServiceTests(TestCase):
    def setUp(self):
        self.company = make_company()
        self.employee = make_employee("E001", company=self.company)

    def test_saves_structure_with_resolved_amounts(self):
        with self.captureOnCommitCallbacks(execute=True):
            structure = SalaryStructureService.save_structure(
                employee=self.employee,
                wage=Decimal("40000"),
                pf_rate=Decimal("10"),
                professional_tax=Decimal("150"),
                components=[
                    {"name": "Basic", "computation_type": PCT_WAGE, "value": Decimal("50")},
                    {"name": "HRA", "computation_type": PCT_BASIC, "value": Decimal("40")},
                    {"name": "Conveyance", "computation_type": FIXED, "value": Decimal("1600")},
                ],
            )

        structure.refresh_from_db()
        self.assertEqual(structure.pf_rate, Decimal("10.00"))
        self.assertEqual(structure.professional_tax, Decimal("150.00"))
        rows = list(structure.components.values_list("name", "amount", "order"))
        self.assertEqual(
            rows,
            [
                ("Basic", Decimal("20000.00"), 0),
                ("HRA", Decimal("8000.00"), 1),
                ("Conveyance", Decimal("1600.00"), 2),
            ],
        )
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].subject, "Salary Structure Updated")

    @override_settings(PAYROLL_DEFAULT_PF_RATE="12.00", PAYROLL_DEFAULT_PROFESSIONAL_TAX="200.00")
    def test_missing_rates_take_configured_defaults(self):
        structure = SalaryStructureService.save_structure(
            employee=self.employee,
            wage=Decimal("10000"),
            components=[{"name": "Basic", "computation_type": PCT_WAGE, "value": Decimal("100")}],
        )

        self.assertEqual(structure.pf_rate, Decimal("12.00"))
        self.assertEqual(structure.professional_tax, Decimal("200.00"))

    def test_zero_pf_rate_is_kept(self):
        structure = SalaryStructureService.save_structure(
            employee=self.employee,
            wage=Decimal("10000"),
            pf_rate=Decimal("0"),
            components=[],
        )

        self.assertEqual(structure.pf_rate, Decimal("0"))

    def test_components_exceeding_wage_are_rejected_before_any_write(self):
        with self.assertRaises(ComponentsExceedWage):
            SalaryStructureService.save_structure(
                employee=self.employee,
                wage=Decimal("10000"),
                components=[
                    {"name": "Basic", "computation_type": PCT_WAGE, "value": Decimal("80")},
                    {"name": "Bonus", "computation_type": FIXED, "value": Decimal("2000.01")},
                ],
            )

        self.assertFalse(SalaryStructure.objects.filter(employee=self.employee).exists())

    def test_resave_replaces_all_components(self):
        make_salary_structure(self.employee)

        SalaryStructureService.save_structure(
            employee=self.employee,
            wage=Decimal("60000"),
            components=[{"name": "Basic", "computation_type": PCT_WAGE, "value": Decimal("60")}],
        )

        structure = SalaryStructure.objects.get(employee=self.employee)
        self.assertEqual(structure.wage, Decimal("60000.00"))
        self.assertEqual(list(structure.components.values_list("name", flat=True)), ["Basic"])
        self.assertEqual(SalaryComponent.objects.filter(structure__employee=self.employee).count(), 1)

    def test_explicit_order_is_sorted_and_renumbered(self):
        structure = SalaryStructureService.save_structure(
            employee=self.employee,
            wage=Decimal("30000"),
            components=[
                {"name": "HRA", "computation_type": PCT_BASIC, "value": Decimal("50"), "order": 5},
                {"name": "Basic", "computation_type": PCT_WAGE, "value": Decimal("50"), "order": 2},
            ],
        )

        rows = list(structure.components.values_list("name", "order", "amount"))
        self.assertEqual(rows, [("Basic", 0, Decimal("15000.00")), ("HRA", 1, Decimal("7500.00"))])
