class AuditEvents:
    # Employees
    EMPLOYEE_CREATED = "employee_created"
    EMPLOYEE_UPDATED = "employee_updated"

    # Attendance
    ATTENDANCE_CHECKED_IN = "attendance_checked_in"
    ATTENDANCE_CHECKED_OUT = "attendance_checked_out"
    ATTENDANCE_MARKED = "attendance_marked"

    # Leaves
    LEAVE_APPLIED = "leave_applied"
    LEAVE_APPROVED = "leave_approved"
    LEAVE_REJECTED = "leave_rejected"
    LEAVE_CANCELLED = "leave_cancelled"
    LEAVE_ALLOCATED = "leave_allocated"

    # Payroll
    SALARY_STRUCTURE_UPDATED = "salary_structure_updated"
    PAYSLIP_GENERATED = "payslip_generated"
    PAYSLIP_VALIDATED = "payslip_validated"
    PAYSLIP_CANCELLED = "payslip_cancelled"
    PAYSLIP_DELETED = "payslip_deleted"
    PAYRUN_GENERATED = "payrun_generated"
    PAYROLL_ACCESS_DENIED = "payroll_access_denied"

    # Notifications
    NOTIFICATIONS_MARKED_READ = "notifications_marked_read"
