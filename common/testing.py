"""Factories shared by the test suites."""
from __future__ import annotations

from decimal import Decimal

from accounts.models import Company, Employee, Role, User


def make_role(name: str) -> Role:
    level = {
        Role.Name.ADMIN: Role.Level.ADMIN,
        Role.Name.HR_OFFICER: Role.Level.HR_OFFICER,
        Role.Name.PAYROLL_OFFICER: Role.Level.PAYROLL_OFFICER,
        Role.Name.EMPLOYEE: Role.Level.EMPLOYEE,
    }[name]
    role, _ = Role.objects.get_or_create(name=name, defaults={"level": level})
    return role


def make_company(name: str = "Acme") -> Company:
    return Company.objects.create(name=name, email=f"hr@{name.lower()}.test")


def make_user(username: str, *, company: Company, role_name: str = Role.Name.EMPLOYEE) -> User:
    return User.objects.create_user(
        username=username,
        email=f"{username}@example.test",
        password="StrongPass123!",
        role=make_role(role_name),
        company=company,
    )


def make_employee(
    code: str,
    *,
    company: Company,
    user: User | None = None,
    first_name: str = "Asha",
    last_name: str = "Rao",
) -> Employee:
    return Employee.objects.create(
        company=company,
        user=user,
        employee_code=code,
        first_name=first_name,
        last_name=last_name,
        email=f"{code.lower()}@example.test",
    )


def make_salary_structure(employee: Employee, *, wage="50000", components=None, pf_rate="12", professional_tax="200"):
    from apps.payroll.calculations import ComponentSpec, resolve_all_components
    from apps.payroll.models import SalaryComponent, SalaryStructure

    structure = SalaryStructure.objects.create(
        employee=employee,
        wage=Decimal(wage),
        pf_rate=Decimal(pf_rate),
        professional_tax=Decimal(professional_tax),
    )
    if components is None:
        components = [
            ("Basic", SalaryComponent.ComputationType.PERCENTAGE_OF_WAGE, "50"),
            ("HRA", SalaryComponent.ComputationType.PERCENTAGE_OF_BASIC, "50"),
            ("Conveyance", SalaryComponent.ComputationType.FIXED_AMOUNT, "1600"),
        ]
    specs = [
        ComponentSpec(name=name, computation_type=computation_type, value=Decimal(value), order=order)
        for order, (name, computation_type, value) in enumerate(components)
    ]
    for item in resolve_all_components(specs, structure.wage):
        SalaryComponent.objects.create(
            structure=structure,
            name=item.name,
            computation_type=item.computation_type,
            value=item.value,
            amount=item.amount,
            order=item.order,
        )
    return structure
