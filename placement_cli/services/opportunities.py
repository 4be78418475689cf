from datetime import datetime
from typing import Callable, List, Optional

from placement_cli.errors import PreconditionError, ValidationError
from placement_cli.models import (
    CareerCenterStaff,
    CompanyRepresentative,
    InternshipOpportunity,
    OpportunityDraft,
    OpportunityFilter,
    OpportunityStatus,
    Student,
)
from placement_cli.repositories import OpportunityRepository
from placement_cli.services import filters
from placement_cli.utils.logging_config import get_logger
from placement_cli.utils.validators import is_not_blank, is_valid_company_email

logger = get_logger(__name__)


def _require_staff(staff) -> None:
    if not isinstance(staff, CareerCenterStaff):
        raise PreconditionError("Only career center staff can review opportunities")


def _require_approved_rep(rep) -> None:
    if not isinstance(rep, CompanyRepresentative):
        raise PreconditionError("Only company representatives can manage opportunities")
    if not rep.is_approved:
        raise PreconditionError(
            f"Representative {rep.user_id} has not been approved by career center staff"
        )


def owns(rep: CompanyRepresentative, opp: InternshipOpportunity) -> bool:
    return opp.owner_id is not None and opp.owner_id.lower() == rep.user_id.lower()


class OpportunityService:
    """Drafting, review, visibility and slot management of opportunities."""

    def __init__(
        self,
        opportunities: OpportunityRepository,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.opportunities = opportunities
        self.clock = clock

    def create_draft(
        self, rep: CompanyRepresentative, draft: OpportunityDraft
    ) -> InternshipOpportunity:
        _require_approved_rep(rep)
        if not is_not_blank(draft.title):
            raise ValidationError("Title is required")
        if not is_valid_company_email(rep.email):
            raise ValidationError(f"Invalid company email: {rep.email}")
        if draft.slots is None or draft.slots < 0:
            raise ValidationError("Slots cannot be negative")

        now = self.clock()
        open_date = now.date()
        if draft.close_date is None or draft.close_date < open_date:
            raise ValidationError("Closing date cannot be before the opening date")

        opp = InternshipOpportunity(
            id=self.opportunities.next_id(),
            title=draft.title.strip(),
            description=(draft.description or "").strip(),
            level=draft.level,
            preferred_major=(
                draft.preferred_major.strip()
                if is_not_blank(draft.preferred_major)
                else None
            ),
            open_date=open_date,
            close_date=draft.close_date,
            status=OpportunityStatus.PENDING,
            company_name=rep.company_name,
            owner_id=rep.user_id,
            slots=draft.slots,
            visible=False,
            last_updated=now,
        )
        self.opportunities.save(opp)
        logger.info(f"Representative {rep.user_id} drafted opportunity {opp.id}")
        return opp

    def approve(
        self, staff: CareerCenterStaff, opp: InternshipOpportunity
    ) -> InternshipOpportunity:
        _require_staff(staff)
        if opp.status == OpportunityStatus.APPROVED:
            return opp
        if opp.status == OpportunityStatus.FILLED:
            raise PreconditionError(f"Opportunity {opp.id} is already filled")
        opp.status = OpportunityStatus.APPROVED
        opp.last_updated = self.clock()
        self.update_filled_status(opp)
        self.opportunities.save(opp)
        logger.info(f"Staff {staff.user_id} approved opportunity {opp.id}")
        return opp

    def reject(
        self, staff: CareerCenterStaff, opp: InternshipOpportunity
    ) -> InternshipOpportunity:
        _require_staff(staff)
        if opp.status == OpportunityStatus.REJECTED:
            return opp
        opp.status = OpportunityStatus.REJECTED
        opp.last_updated = self.clock()
        self.opportunities.save(opp)
        logger.info(f"Staff {staff.user_id} rejected opportunity {opp.id}")
        return opp

    def set_visibility(
        self, rep: CompanyRepresentative, opp: InternshipOpportunity, on: bool
    ) -> bool:
        """Toggle student visibility.

        Returns False without changing anything when the opportunity is not
        APPROVED; the caller reports that as a notice rather than an error.
        """
        _require_approved_rep(rep)
        if not owns(rep, opp):
            raise PreconditionError(
                f"Opportunity {opp.id} does not belong to {rep.user_id}"
            )
        if opp.status != OpportunityStatus.APPROVED:
            logger.warning(
                f"Ignored visibility change on {opp.id}: status is {opp.status.value}"
            )
            return False
        if opp.visible != on:
            opp.visible = on
            opp.last_updated = self.clock()
            self.opportunities.save(opp)
        return True

    def set_slots(
        self, rep: CompanyRepresentative, opp: InternshipOpportunity, slots: int
    ) -> InternshipOpportunity:
        _require_approved_rep(rep)
        if not owns(rep, opp):
            raise PreconditionError(
                f"Opportunity {opp.id} does not belong to {rep.user_id}"
            )
        if slots is None or slots < 0:
            raise ValidationError("Slots cannot be negative")
        opp.slots = slots
        if opp.status == OpportunityStatus.FILLED and slots > 0:
            opp.status = OpportunityStatus.APPROVED
        self.update_filled_status(opp)
        opp.last_updated = self.clock()
        self.opportunities.save(opp)
        return opp

    def update_filled_status(self, opp: InternshipOpportunity) -> bool:
        """Move an APPROVED opportunity with no slots left to FILLED."""
        if opp.slots <= 0 and opp.status == OpportunityStatus.APPROVED:
            opp.status = OpportunityStatus.FILLED
            opp.last_updated = self.clock()
            logger.info(f"Opportunity {opp.id} is now filled")
            return True
        return False

    def delete(self, rep: CompanyRepresentative, opp: InternshipOpportunity) -> bool:
        _require_approved_rep(rep)
        if not owns(rep, opp):
            raise PreconditionError(
                f"Opportunity {opp.id} does not belong to {rep.user_id}"
            )
        deleted = self.opportunities.delete(opp)
        if deleted:
            logger.info(f"Representative {rep.user_id} deleted opportunity {opp.id}")
        return deleted

    # Listing

    def list_visible_for(
        self, student: Student, f: Optional[OpportunityFilter] = None
    ) -> List[InternshipOpportunity]:
        return filters.visible_for(
            student, self.opportunities.find_all(), f, self.clock().date()
        )

    def list_by_company_filtered(
        self, company: str, f: Optional[OpportunityFilter] = None
    ) -> List[InternshipOpportunity]:
        return filters.filter_and_sort(self.opportunities.find_by_company(company), f)

    def list_for_representative(
        self, rep: CompanyRepresentative, f: Optional[OpportunityFilter] = None
    ) -> List[InternshipOpportunity]:
        return filters.filter_and_sort(
            self.opportunities.find_by_representative(rep), f
        )

    def list_all_filtered(
        self, f: Optional[OpportunityFilter] = None
    ) -> List[InternshipOpportunity]:
        return filters.filter_and_sort(self.opportunities.find_all(), f)

    def list_pending(self) -> List[InternshipOpportunity]:
        return filters.sort_opportunities(
            self.opportunities.find_by_status(OpportunityStatus.PENDING)
        )
