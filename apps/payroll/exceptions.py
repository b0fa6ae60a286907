from common.exceptions import NotFound, ValidationError, WorkZenError


class ComponentsExceedWage(ValidationError):
    code = "components_exceed_wage"
    default_message = "Total of all components exceeds the wage"


class MissingSalaryStructure(WorkZenError):
    code = "missing_salary_structure"
    default_message = "Salary structure not found for employee"


class DuplicatePayslip(WorkZenError):
    code = "duplicate_payslip"
    status_code = 409
    default_message = "Payslip already exists for this period"


class NoEligibleEmployees(ValidationError):
    code = "no_eligible_employees"
    default_message = "No employees with salary structure found"


class PayslipNotFound(NotFound):
    default_message = "Payslip not found"


class EmployeeNotFound(NotFound):
    default_message = "Employee not found"
