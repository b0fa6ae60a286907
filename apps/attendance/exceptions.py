from common.exceptions import ValidationError


class AlreadyCheckedIn(ValidationError):
    code = "already_checked_in"
    default_message = "You are already checked in. Please check out first."


class NoCheckInToday(ValidationError):
    code = "no_check_in_today"
    default_message = "No check-in record found for today"


class NotCheckedIn(ValidationError):
    code = "not_checked_in"
    default_message = "You are not currently checked in"
