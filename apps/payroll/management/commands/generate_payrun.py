from django.core.management.base import BaseCommand, CommandError

from accounts.models import Company
from common.exceptions import WorkZenError
from common.periods import month_index_from_number

from apps.payroll.services import PayrollService


class Command(BaseCommand):
    help = "Generate draft payslips for every employee of a company with a salary structure"

    def add_arguments(self, parser):
        parser.add_argument("--company", type=int, required=True, help="Company id")
        parser.add_argument("--year", type=int, required=True)
        parser.add_argument("--month", type=int, required=True, help="Month number, 1-12")

    def handle(self, *args, **options):
        company = Company.objects.filter(id=options["company"]).first()
        if company is None:
            raise CommandError(f"Company {options['company']} not found")

        try:
            result = PayrollService.generate_payrun(
                company_id=company.id,
                year=options["year"],
                month_index=month_index_from_number(options["month"]),
            )
        except (ValueError, WorkZenError) as exc:
            raise CommandError(str(exc)) from exc

        for failure in result.failed:
            self.stdout.write(
                self.style.WARNING(f"{failure.employee_code} {failure.name}: {failure.reason}")
            )
        self.stdout.write(
            self.style.SUCCESS(
                f"Payrun for {company.name}: {len(result.succeeded)} generated, {len(result.failed)} errors"
            )
        )
