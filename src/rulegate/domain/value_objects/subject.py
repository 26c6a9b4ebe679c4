"""Protected resource kinds."""

from enum import StrEnum


class Subject(StrEnum):
    """Subjects a rule can apply to. ALL covers every subject."""

    ALL = "all"
    COMPANY = "company"
    PERMISSION = "permission"
    ROLE = "role"
    FILE = "file"
    AUDIT_LOG = "audit-log"
    ACCOUNT = "account"
    PROFILE = "profile"
    OTP = "otp"
    COURSE = "course"
    PAYMENT = "payment"
    NOTIFICATION = "notification"
