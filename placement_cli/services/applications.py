"""Application lifecycle: apply, company review, acceptance and withdrawal."""

from datetime import datetime
from typing import Callable, List

from placement_cli import config
from placement_cli.errors import NotFoundError, PreconditionError
from placement_cli.models import (
    Application,
    ApplicationStatus,
    CareerCenterStaff,
    CompanyRepresentative,
    InternshipOpportunity,
    OpportunityStatus,
    RequestStatus,
    Student,
    WithdrawalRequest,
)
from placement_cli.repositories import (
    ApplicationRepository,
    OpportunityRepository,
    UserRepository,
    WithdrawalRequestRepository,
)
from placement_cli.services.filters import is_eligible
from placement_cli.services.opportunities import owns
from placement_cli.utils.logging_config import get_logger

logger = get_logger(__name__)

# Applications in these states are left alone when another offer is accepted
CLOSED_STATUSES = (ApplicationStatus.WITHDRAWN, ApplicationStatus.UNSUCCESSFUL)


class ApplicationService:
    def __init__(
        self,
        users: UserRepository,
        opportunities: OpportunityRepository,
        applications: ApplicationRepository,
        withdrawals: WithdrawalRequestRepository,
        max_pending: int = config.MAX_PENDING_APPLICATIONS,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.users = users
        self.opportunities = opportunities
        self.applications = applications
        self.withdrawals = withdrawals
        self.max_pending = max_pending
        self.clock = clock

    def apply(self, student: Student, opp: InternshipOpportunity) -> Application:
        """Create a PENDING application; the first failed precondition is raised."""
        now = self.clock()
        if not opp.is_published:
            raise PreconditionError(
                f"Opportunity {opp.id} is not open to applications"
            )
        if not opp.is_open_on(now.date()):
            raise PreconditionError(
                f"Opportunity {opp.id} is outside its application window"
            )
        if not is_eligible(student, opp):
            raise PreconditionError(
                f"Year {student.year_of_study} students cannot apply for "
                f"{opp.level.value} internships"
            )
        own = self.applications.find_by_student(student.user_id)
        pending = sum(1 for a in own if a.status == ApplicationStatus.PENDING)
        if pending >= self.max_pending:
            raise PreconditionError(
                f"Students may hold at most {self.max_pending} pending applications"
            )
        if any(a.status == ApplicationStatus.ACCEPTED for a in own):
            raise PreconditionError("Student has already accepted a placement")

        app = Application(
            id=self.applications.next_id(),
            student_id=student.user_id,
            opportunity_id=opp.id,
            applied_at=now,
            status=ApplicationStatus.PENDING,
            withdrawal_requested=False,
            last_updated=now,
        )
        self.applications.save(app)
        logger.info(f"Student {student.user_id} applied for {opp.id} ({app.id})")
        return app

    def _owned_opportunity(
        self, rep: CompanyRepresentative, app: Application
    ) -> InternshipOpportunity:
        opp = self.opportunities.find_by_id(app.opportunity_id)
        if opp is None:
            raise NotFoundError(f"Opportunity {app.opportunity_id} not found")

        owner = self.users.find_rep(opp.owner_id)
        if owner is not None:
            if not owns(rep, opp):
                raise PreconditionError(
                    f"Application {app.id} is not for one of your opportunities"
                )
            return opp

        # Owner could not be resolved after a reload; fall back to the company
        if opp.company_name.strip().lower() != rep.company_name.strip().lower():
            raise PreconditionError(
                f"Application {app.id} is not for one of your opportunities"
            )
        opp.owner_id = rep.user_id
        self.opportunities.save(opp)
        logger.info(f"Re-attached opportunity {opp.id} to {rep.user_id}")
        return opp

    def company_review(
        self, rep: CompanyRepresentative, app: Application, approve: bool
    ) -> Application:
        if not isinstance(rep, CompanyRepresentative) or not rep.is_approved:
            raise PreconditionError("Only approved representatives can review applications")
        if app.status != ApplicationStatus.PENDING:
            raise PreconditionError(
                f"Application {app.id} has already been reviewed ({app.status.value})"
            )
        self._owned_opportunity(rep, app)

        app.status = (
            ApplicationStatus.SUCCESSFUL if approve else ApplicationStatus.UNSUCCESSFUL
        )
        app.last_updated = self.clock()
        self.applications.save(app)
        logger.info(f"Application {app.id} marked {app.status.value} by {rep.user_id}")
        return app

    def student_accept(self, student: Student, app: Application) -> Application:
        if app.student_id.lower() != student.user_id.lower():
            raise PreconditionError(f"Application {app.id} does not belong to you")
        if app.status != ApplicationStatus.SUCCESSFUL:
            raise PreconditionError(
                f"Only successful applications can be accepted ({app.status.value})"
            )
        own = self.applications.find_by_student(student.user_id)
        if any(a.status == ApplicationStatus.ACCEPTED for a in own):
            raise PreconditionError("Student has already accepted a placement")
        opp = self.opportunities.find_by_id(app.opportunity_id)
        if opp is None:
            raise NotFoundError(f"Opportunity {app.opportunity_id} not found")
        if opp.slots < 1:
            raise PreconditionError(f"Opportunity {opp.id} has no slots left")

        now = self.clock()
        for other in own:
            if other.id == app.id or other.status in CLOSED_STATUSES:
                continue
            other.status = ApplicationStatus.WITHDRAWN
            other.withdrawal_requested = True
            other.last_updated = now
            self.applications.save(other)

        app.status = ApplicationStatus.ACCEPTED
        app.last_updated = now
        self.applications.save(app)

        student.accepted_application_id = app.id
        self.users.save(student)

        opp.slots -= 1
        if opp.slots <= 0 and opp.status == OpportunityStatus.APPROVED:
            opp.status = OpportunityStatus.FILLED
        opp.last_updated = now
        self.opportunities.save(opp)
        logger.info(f"Student {student.user_id} accepted {app.id} for {opp.id}")
        return app

    def request_withdrawal(
        self, student: Student, app: Application, reason: str = ""
    ) -> WithdrawalRequest:
        if app.student_id.lower() != student.user_id.lower():
            raise PreconditionError(f"Application {app.id} does not belong to you")
        if app.status == ApplicationStatus.WITHDRAWN:
            raise PreconditionError(f"Application {app.id} is already withdrawn")
        if any(
            r.status == RequestStatus.PENDING
            for r in self.withdrawals.find_by_application(app.id)
        ):
            raise PreconditionError(
                f"A withdrawal request for {app.id} is already pending"
            )

        now = self.clock()
        request = WithdrawalRequest(
            id=self.withdrawals.next_id(),
            application_id=app.id,
            student_id=student.user_id,
            reason=(reason or "").strip(),
            status=RequestStatus.PENDING,
            requested_at=now,
            last_updated=now,
        )
        self.withdrawals.save(request)

        app.withdrawal_requested = True
        app.last_updated = now
        self.applications.save(app)
        logger.info(f"Student {student.user_id} requested withdrawal of {app.id}")
        return request

    def process_withdrawal(
        self, staff: CareerCenterStaff, request: WithdrawalRequest, approve: bool
    ) -> WithdrawalRequest:
        if not isinstance(staff, CareerCenterStaff):
            raise PreconditionError("Only career center staff can process withdrawals")
        if request.status != RequestStatus.PENDING:
            raise PreconditionError(
                f"Withdrawal request {request.id} is already {request.status.value}"
            )

        now = self.clock()
        if not approve:
            request.status = RequestStatus.REJECTED
            request.last_updated = now
            self.withdrawals.save(request)
            logger.info(f"Staff {staff.user_id} rejected withdrawal {request.id}")
            return request

        app = self.applications.find_by_id(request.application_id)
        if app is None:
            raise NotFoundError(f"Application {request.application_id} not found")

        # Only an accepted placement consumed a slot, so only it gives one back
        held_slot = app.status == ApplicationStatus.ACCEPTED
        app.status = ApplicationStatus.WITHDRAWN
        app.last_updated = now
        self.applications.save(app)

        if held_slot:
            student = self.users.find_student(app.student_id)
            if student is not None and student.accepted_application_id == app.id:
                student.accepted_application_id = None
                self.users.save(student)
            opp = self.opportunities.find_by_id(app.opportunity_id)
            if opp is not None:
                opp.slots += 1
                if opp.status == OpportunityStatus.FILLED and opp.slots >= 1:
                    opp.status = OpportunityStatus.APPROVED
                opp.last_updated = now
                self.opportunities.save(opp)

        request.status = RequestStatus.APPROVED
        request.last_updated = now
        self.withdrawals.save(request)
        logger.info(f"Staff {staff.user_id} approved withdrawal {request.id}")
        return request

    # Listing

    def list_student_applications(self, student: Student) -> List[Application]:
        return sorted(
            self.applications.find_by_student(student.user_id),
            key=lambda a: a.applied_at,
        )

    def list_applications_for(
        self, rep: CompanyRepresentative, opp: InternshipOpportunity
    ) -> List[Application]:
        if not owns(rep, opp):
            owner = self.users.find_rep(opp.owner_id)
            if owner is not None or (
                opp.company_name.strip().lower() != rep.company_name.strip().lower()
            ):
                raise PreconditionError(
                    f"Opportunity {opp.id} does not belong to {rep.user_id}"
                )
        return sorted(
            self.applications.find_by_opportunity(opp.id), key=lambda a: a.applied_at
        )

    def list_pending_withdrawals(self) -> List[WithdrawalRequest]:
        return sorted(
            self.withdrawals.find_pending_withdrawals(), key=lambda r: r.requested_at
        )

    def find_application(self, application_id: str) -> Application:
        app = self.applications.find_by_id(application_id)
        if app is None:
            raise NotFoundError(f"Application {application_id} not found")
        return app

    def find_withdrawal(self, request_id: str) -> WithdrawalRequest:
        request = self.withdrawals.find_by_id(request_id)
        if request is None:
            raise NotFoundError(f"Withdrawal request {request_id} not found")
        return request
