from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from placement_cli.errors import ValidationError

# Marker for "never checked": every timestamp compares after it
NEVER = datetime(1970, 1, 1)


class InternshipLevel(Enum):
    BASIC = "BASIC"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"

    @property
    def rank(self) -> int:
        return list(InternshipLevel).index(self)


class OpportunityStatus(Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    FILLED = "FILLED"


class ApplicationStatus(Enum):
    PENDING = "PENDING"
    SUCCESSFUL = "SUCCESSFUL"
    ACCEPTED = "ACCEPTED"
    UNSUCCESSFUL = "UNSUCCESSFUL"
    WITHDRAWN = "WITHDRAWN"


class RequestStatus(Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class UserRole(Enum):
    STUDENT = "student"
    COMPANY_REP = "company_rep"
    STAFF = "staff"


class SortKey(Enum):
    TITLE_ASC = "TITLE_ASC"
    CLOSING_DATE_ASC = "CLOSING_DATE_ASC"
    COMPANY_ASC = "COMPANY_ASC"
    LEVEL_ASC = "LEVEL_ASC"


@dataclass
class User:
    user_id: str
    name: str
    password_digest: str = ""
    last_notification_check: datetime = NEVER
    logged_in: bool = field(default=False, compare=False)

    role = None  # type: Optional[UserRole]

    def __repr__(self) -> str:
        return f"<{type(self).__name__} user_id={self.user_id!r} name={self.name!r}>"


@dataclass(repr=False)
class Student(User):
    year_of_study: int = 1
    major: str = ""
    visible: bool = False
    accepted_application_id: Optional[str] = None

    role = UserRole.STUDENT

    def __post_init__(self) -> None:
        if self.year_of_study not in (1, 2, 3, 4):
            raise ValidationError(
                f"Year of study must be between 1 and 4, got {self.year_of_study}"
            )


@dataclass(repr=False)
class CompanyRepresentative(User):
    company_name: str = ""
    department: str = ""
    position: str = ""
    approval_status: RequestStatus = RequestStatus.PENDING

    role = UserRole.COMPANY_REP

    @property
    def email(self) -> str:
        return self.user_id

    @property
    def is_approved(self) -> bool:
        return self.approval_status == RequestStatus.APPROVED


@dataclass(repr=False)
class CareerCenterStaff(User):
    department: str = ""
    email: str = ""

    role = UserRole.STAFF


@dataclass
class InternshipOpportunity:
    id: str
    title: str
    description: str = ""
    level: InternshipLevel = InternshipLevel.BASIC
    preferred_major: Optional[str] = None
    open_date: Optional[date] = None
    close_date: Optional[date] = None
    status: OpportunityStatus = OpportunityStatus.PENDING
    company_name: str = ""
    owner_id: Optional[str] = None
    slots: int = 0
    visible: bool = False
    last_updated: datetime = NEVER

    @property
    def is_published(self) -> bool:
        """Only APPROVED and visible opportunities are shown to students."""
        return self.status == OpportunityStatus.APPROVED and self.visible

    def is_open_on(self, day: date) -> bool:
        if self.open_date is None or self.close_date is None:
            return False
        return self.open_date <= day <= self.close_date

    def __repr__(self) -> str:
        return (
            f"<InternshipOpportunity id={self.id!r} title={self.title!r} "
            f"status={self.status.value} slots={self.slots} visible={self.visible}>"
        )


@dataclass
class OpportunityDraft:
    """Fields a representative supplies when drafting an opportunity."""

    title: str
    close_date: date
    description: str = ""
    level: InternshipLevel = InternshipLevel.BASIC
    preferred_major: Optional[str] = None
    slots: int = 1


@dataclass
class Application:
    id: str
    student_id: str
    opportunity_id: str
    applied_at: datetime
    status: ApplicationStatus = ApplicationStatus.PENDING
    withdrawal_requested: bool = False
    last_updated: datetime = NEVER

    def __repr__(self) -> str:
        return (
            f"<Application id={self.id!r} student_id={self.student_id!r} "
            f"opportunity_id={self.opportunity_id!r} status={self.status.value}>"
        )


@dataclass
class WithdrawalRequest:
    id: str
    application_id: str
    student_id: str
    reason: str = ""
    status: RequestStatus = RequestStatus.PENDING
    requested_at: datetime = NEVER
    last_updated: datetime = NEVER


@dataclass
class RegistrationRequest:
    id: str
    rep_id: str
    status: RequestStatus = RequestStatus.PENDING
    requested_at: datetime = NEVER
    last_updated: datetime = NEVER


@dataclass
class OpportunityFilter:
    """Per-user browsing filter. Fields left as None do not constrain."""

    status: Optional[OpportunityStatus] = None
    preferred_major: Optional[str] = None
    level: Optional[InternshipLevel] = None
    closing_on_or_before: Optional[date] = None
    sort_key: SortKey = SortKey.TITLE_ASC

    def __post_init__(self) -> None:
        if self.preferred_major is not None and not self.preferred_major.strip():
            self.preferred_major = None
        if self.sort_key is None:
            self.sort_key = SortKey.TITLE_ASC


@dataclass
class ReportFilter:
    status: Optional[OpportunityStatus] = None
    preferred_major: Optional[str] = None
    level: Optional[InternshipLevel] = None
    company: Optional[str] = None
    open_date_from: Optional[date] = None
    close_date_by: Optional[date] = None


@dataclass
class ReportRow:
    opportunity_id: str
    title: str
    company_name: str
    level: InternshipLevel
    status: OpportunityStatus
    preferred_major: Optional[str]
    total_applications: int
    filled_slots: int
    remaining_slots: int
    total_slots: int


@dataclass
class Report:
    generated_at: datetime
    rows: List[ReportRow] = field(default_factory=list)

    @property
    def total_opportunities(self) -> int:
        return len(self.rows)


__all__ = [
    "NEVER",
    "Application",
    "ApplicationStatus",
    "CareerCenterStaff",
    "CompanyRepresentative",
    "InternshipLevel",
    "InternshipOpportunity",
    "OpportunityDraft",
    "OpportunityFilter",
    "OpportunityStatus",
    "RegistrationRequest",
    "Report",
    "ReportFilter",
    "ReportRow",
    "RequestStatus",
    "SortKey",
    "Student",
    "User",
    "UserRole",
    "WithdrawalRequest",
]
