from common.exceptions import NotFound, ValidationError


class InsufficientLeaveBalance(ValidationError):
    code = "insufficient_leave_balance"
    default_message = "Insufficient leave balance"


class InvalidLeaveRange(ValidationError):
    code = "invalid_leave_range"
    default_message = "End date cannot be before start date"


class LeaveNotFound(NotFound):
    default_message = "Leave not found"
