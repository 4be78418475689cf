import re
from typing import Optional

STUDENT_ID_PATTERN = re.compile(r"^[SU]\d{7}[A-Z]?$")
STAFF_EMAIL_PATTERN = re.compile(r"^\w+@ntu\.edu\.sg$")
COMPANY_EMAIL_PATTERN = re.compile(r"^[\w.-]+@[\w.-]+\.[A-Za-z]{2,}$")


def is_valid_student_id(value: Optional[str]) -> bool:
    """Matriculation numbers look like ``U2310001A`` or ``S1234567``."""
    if value is None:
        return False
    return bool(STUDENT_ID_PATTERN.match(value.strip()))


def is_valid_staff_email(value: Optional[str]) -> bool:
    if value is None:
        return False
    return bool(STAFF_EMAIL_PATTERN.match(value.strip().lower()))


def is_valid_company_email(value: Optional[str]) -> bool:
    if value is None:
        return False
    return bool(COMPANY_EMAIL_PATTERN.match(value.strip()))


def is_not_blank(value: Optional[str]) -> bool:
    return value is not None and bool(value.strip())
