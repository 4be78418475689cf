"""Derive what changed for a user since they last checked.

Each role has three categories; a category is reported at most once no
matter how many records match it.
"""

from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional

from placement_cli.models import (
    CareerCenterStaff,
    CompanyRepresentative,
    InternshipOpportunity,
    OpportunityStatus,
    RequestStatus,
    Student,
    User,
)
from placement_cli.repositories import (
    ApplicationRepository,
    OpportunityRepository,
    RegistrationRequestRepository,
    UserRepository,
    WithdrawalRequestRepository,
)
from placement_cli.services.filters import is_open_for


class NotificationKind(Enum):
    NEW_OPPORTUNITY = "New internship opportunity available"
    APPLICATION_UPDATE = "Internship application update"
    WITHDRAWAL_UPDATE = "Internship withdrawal update"
    OPPORTUNITY_SUBMISSION = "New internship opportunity submissions"
    REGISTRATION_REQUEST = "New registration requests"
    PENDING_WITHDRAWAL = "Pending withdrawal requests"
    NEW_APPLICATION = "New applications to review"
    OPPORTUNITY_STATUS = "Opportunity status update"
    APPLICATION_WITHDRAWAL = "Application withdrawal requested"

    @property
    def message(self) -> str:
        return self.value


class NotificationService:
    def __init__(
        self,
        users: UserRepository,
        opportunities: OpportunityRepository,
        applications: ApplicationRepository,
        withdrawals: WithdrawalRequestRepository,
        registrations: RegistrationRequestRepository,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.users = users
        self.opportunities = opportunities
        self.applications = applications
        self.withdrawals = withdrawals
        self.registrations = registrations
        self.clock = clock

    def notifications(
        self, user: User, since: Optional[datetime] = None
    ) -> List[NotificationKind]:
        """Categories with activity after ``since`` (default: the user's last check)."""
        if since is None:
            since = user.last_notification_check
        if isinstance(user, Student):
            return self._for_student(user, since)
        if isinstance(user, CareerCenterStaff):
            return self._for_staff(since)
        if isinstance(user, CompanyRepresentative):
            return self._for_rep(user, since)
        return []

    def mark_checked(self, user: User) -> None:
        user.last_notification_check = self.clock()
        self.users.save(user)

    def _for_student(self, student: Student, since: datetime) -> List[NotificationKind]:
        kinds = []
        today = self.clock().date()
        if any(
            o.last_updated > since and is_open_for(student, o, today)
            for o in self.opportunities.find_all()
        ):
            kinds.append(NotificationKind.NEW_OPPORTUNITY)
        if any(
            a.last_updated > since
            for a in self.applications.find_by_student(student.user_id)
        ):
            kinds.append(NotificationKind.APPLICATION_UPDATE)
        if any(
            r.status != RequestStatus.PENDING and r.last_updated > since
            for r in self.withdrawals.find_by_student(student.user_id)
        ):
            kinds.append(NotificationKind.WITHDRAWAL_UPDATE)
        return kinds

    def _for_staff(self, since: datetime) -> List[NotificationKind]:
        kinds = []
        if any(
            o.status == OpportunityStatus.PENDING and o.last_updated > since
            for o in self.opportunities.find_all()
        ):
            kinds.append(NotificationKind.OPPORTUNITY_SUBMISSION)
        if any(
            r.requested_at > since
            for r in self.registrations.find_pending_rep_registrations()
        ):
            kinds.append(NotificationKind.REGISTRATION_REQUEST)
        if any(
            r.requested_at > since for r in self.withdrawals.find_pending_withdrawals()
        ):
            kinds.append(NotificationKind.PENDING_WITHDRAWAL)
        return kinds

    def _owned(self, rep: CompanyRepresentative) -> List[InternshipOpportunity]:
        owned = {o.id: o for o in self.opportunities.find_by_representative(rep)}
        # Opportunities whose owner did not survive a reload still belong to the company
        for o in self.opportunities.find_by_company(rep.company_name):
            if self.users.find_rep(o.owner_id) is None:
                owned.setdefault(o.id, o)
        return list(owned.values())

    def _for_rep(
        self, rep: CompanyRepresentative, since: datetime
    ) -> List[NotificationKind]:
        kinds = []
        owned = self._owned(rep)
        owned_ids = {o.id.lower() for o in owned}
        if any(
            a.applied_at > since
            for o in owned
            for a in self.applications.find_by_opportunity(o.id)
        ):
            kinds.append(NotificationKind.NEW_APPLICATION)
        if any(
            o.status != OpportunityStatus.PENDING and o.last_updated > since
            for o in owned
        ):
            kinds.append(NotificationKind.OPPORTUNITY_STATUS)
        for request in self.withdrawals.find_all():
            if request.requested_at <= since:
                continue
            app = self.applications.find_by_id(request.application_id)
            if app is not None and app.opportunity_id.lower() in owned_ids:
                kinds.append(NotificationKind.APPLICATION_WITHDRAWAL)
                break
        return kinds
