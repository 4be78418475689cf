from datetime import timedelta

import pytest

from placement_cli.errors import NotFoundError, PreconditionError
from placement_cli.models import (
    ApplicationStatus,
    InternshipLevel,
    OpportunityStatus,
    RequestStatus,
)

from tests.conftest import TODAY


def assert_placement_invariants(store):
    """Slots never negative, one acceptance per student, acceptance closes the rest."""
    for opp in store.opportunities.find_all():
        assert opp.slots >= 0
        if opp.status == OpportunityStatus.FILLED:
            assert opp.slots == 0
    for s in store.users.find_all_students():
        apps = store.applications.find_by_student(s.user_id)
        accepted = [a for a in apps if a.status == ApplicationStatus.ACCEPTED]
        assert len(accepted) <= 1
        if accepted:
            for other in apps:
                if other is not accepted[0]:
                    assert other.status in (
                        ApplicationStatus.WITHDRAWN,
                        ApplicationStatus.UNSUCCESSFUL,
                    )


class TestApply:
    def test_creates_pending_application(self, app, student, opportunity, clock):
        application = app.applications.apply(student, opportunity)

        assert application.id == "A001"
        assert application.status == ApplicationStatus.PENDING
        assert application.applied_at == clock()
        assert application.withdrawal_requested is False

    def test_ineligible_student_is_blocked(self, app, junior, rep, make_opportunity):
        advanced = make_opportunity(rep, level=InternshipLevel.ADVANCED)
        with pytest.raises(PreconditionError):
            app.applications.apply(junior, advanced)
        assert len(app.store.applications) == 0

    def test_unpublished_opportunity_is_blocked(self, app, student, rep, make_opportunity):
        hidden = make_opportunity(rep, visible=False)
        pending = make_opportunity(rep, status=OpportunityStatus.PENDING)
        for opp in (hidden, pending):
            with pytest.raises(PreconditionError, match="not open"):
                app.applications.apply(student, opp)

    def test_outside_window_is_blocked(self, app, student, rep, make_opportunity):
        closed = make_opportunity(
            rep,
            open_date=TODAY - timedelta(days=10),
            close_date=TODAY - timedelta(days=1),
        )
        with pytest.raises(PreconditionError, match="window"):
            app.applications.apply(student, closed)

    def test_pending_ceiling(self, app, student, rep, make_opportunity):
        opps = [make_opportunity(rep, title=f"Role {i}") for i in range(4)]
        for opp in opps[:3]:
            app.applications.apply(student, opp)
        with pytest.raises(PreconditionError, match="at most 3"):
            app.applications.apply(student, opps[3])

    def test_ceiling_counts_only_pending(self, app, student, rep, make_opportunity):
        opps = [make_opportunity(rep, title=f"Role {i}") for i in range(4)]
        first = app.applications.apply(student, opps[0])
        app.applications.company_review(rep, first, False)
        for opp in opps[1:]:
            app.applications.apply(student, opp)
        assert len(app.store.applications) == 4

    def test_student_with_placement_cannot_apply(self, app, student, rep, make_opportunity):
        placed, other = make_opportunity(rep), make_opportunity(rep, title="Other")
        application = app.applications.apply(student, placed)
        app.applications.company_review(rep, application, True)
        app.applications.student_accept(student, application)

        with pytest.raises(PreconditionError, match="already accepted"):
            app.applications.apply(student, other)

    def test_first_failing_precondition_wins(self, app, junior, rep, make_opportunity):
        hidden_advanced = make_opportunity(
            rep, level=InternshipLevel.ADVANCED, visible=False
        )
        with pytest.raises(PreconditionError, match="not open"):
            app.applications.apply(junior, hidden_advanced)


class TestCompanyReview:
    def test_approve_and_reject(self, app, rep, student, make_student, opportunity):
        other = make_student("U2310002C")
        a1 = app.applications.apply(student, opportunity)
        a2 = app.applications.apply(other, opportunity)

        app.applications.company_review(rep, a1, True)
        app.applications.company_review(rep, a2, False)

        assert a1.status == ApplicationStatus.SUCCESSFUL
        assert a2.status == ApplicationStatus.UNSUCCESSFUL
        assert opportunity.slots == 2

    def test_non_owner_cannot_review(self, app, make_rep, student, opportunity):
        other = make_rep("hr@globex.com", "Globex")
        application = app.applications.apply(student, opportunity)
        with pytest.raises(PreconditionError):
            app.applications.company_review(other, application, True)
        assert application.status == ApplicationStatus.PENDING

    def test_reviewing_twice_is_rejected(self, app, rep, student, opportunity):
        application = app.applications.apply(student, opportunity)
        app.applications.company_review(rep, application, True)
        with pytest.raises(PreconditionError, match="already been reviewed"):
            app.applications.company_review(rep, application, True)

    def test_unresolved_owner_falls_back_to_company(
        self, app, make_rep, student, make_opportunity
    ):
        colleague = make_rep("talent@acme.com", "acme corp")
        orphan = make_opportunity(colleague, owner_id="gone@acme.com")
        application = app.applications.apply(student, orphan)

        app.applications.company_review(colleague, application, True)

        assert application.status == ApplicationStatus.SUCCESSFUL
        assert orphan.owner_id == colleague.user_id

    def test_missing_opportunity(self, app, rep, student, opportunity):
        application = app.applications.apply(student, opportunity)
        app.store.opportunities.delete(opportunity)
        with pytest.raises(NotFoundError):
            app.applications.company_review(rep, application, True)


class TestStudentAccept:
    def test_happy_path_to_filled(self, app, rep, student, make_student, make_opportunity):
        other = make_student("U2310002C")
        opp = make_opportunity(rep, slots=1)
        a1 = app.applications.apply(student, opp)
        a2 = app.applications.apply(other, opp)
        app.applications.company_review(rep, a1, True)
        app.applications.company_review(rep, a2, True)

        app.applications.student_accept(student, a1)

        assert a1.status == ApplicationStatus.ACCEPTED
        assert student.accepted_application_id == a1.id
        assert opp.slots == 0
        assert opp.status == OpportunityStatus.FILLED
        assert a2.status == ApplicationStatus.SUCCESSFUL
        with pytest.raises(PreconditionError, match="no slots"):
            app.applications.student_accept(other, a2)
        assert_placement_invariants(app.store)

    def test_acceptance_withdraws_other_applications(
        self, app, rep, student, make_opportunity
    ):
        first, second, third = (
            make_opportunity(rep, title=t) for t in ("First", "Second", "Third")
        )
        a1 = app.applications.apply(student, first)
        a2 = app.applications.apply(student, second)
        a3 = app.applications.apply(student, third)
        app.applications.company_review(rep, a1, True)
        app.applications.company_review(rep, a2, True)
        app.applications.company_review(rep, a3, False)

        app.applications.student_accept(student, a1)

        assert a2.status == ApplicationStatus.WITHDRAWN
        assert a2.withdrawal_requested is True
        assert a3.status == ApplicationStatus.UNSUCCESSFUL
        assert a3.withdrawal_requested is False
        assert_placement_invariants(app.store)

    def test_only_successful_applications_can_be_accepted(
        self, app, student, opportunity
    ):
        application = app.applications.apply(student, opportunity)
        with pytest.raises(PreconditionError):
            app.applications.student_accept(student, application)

    def test_cannot_accept_someone_elses_application(
        self, app, rep, student, make_student, opportunity
    ):
        other = make_student("U2310002C")
        application = app.applications.apply(other, opportunity)
        app.applications.company_review(rep, application, True)
        with pytest.raises(PreconditionError):
            app.applications.student_accept(student, application)


class TestWithdrawal:
    def test_request_marks_application(self, app, student, opportunity, clock):
        application = app.applications.apply(student, opportunity)
        request = app.applications.request_withdrawal(student, application, "Changed plans")

        assert request.id == "W001"
        assert request.status == RequestStatus.PENDING
        assert request.requested_at == clock()
        assert application.withdrawal_requested is True
        assert application.status == ApplicationStatus.PENDING

    def test_duplicate_pending_request_rejected(self, app, student, opportunity):
        application = app.applications.apply(student, opportunity)
        app.applications.request_withdrawal(student, application)
        with pytest.raises(PreconditionError, match="already pending"):
            app.applications.request_withdrawal(student, application)

    def test_only_owner_can_request(self, app, student, make_student, opportunity):
        other = make_student("U2310002C")
        application = app.applications.apply(other, opportunity)
        with pytest.raises(PreconditionError):
            app.applications.request_withdrawal(student, application)

    def test_withdrawn_application_cannot_be_withdrawn_again(
        self, app, student, staff, opportunity
    ):
        application = app.applications.apply(student, opportunity)
        request = app.applications.request_withdrawal(student, application)
        app.applications.process_withdrawal(staff, request, True)
        with pytest.raises(PreconditionError, match="already withdrawn"):
            app.applications.request_withdrawal(student, application)

    def test_approved_withdrawal_reopens_filled_slot(
        self, app, rep, staff, student, make_opportunity
    ):
        opp = make_opportunity(rep, slots=1)
        application = app.applications.apply(student, opp)
        app.applications.company_review(rep, application, True)
        app.applications.student_accept(student, application)
        assert (opp.slots, opp.status) == (0, OpportunityStatus.FILLED)

        request = app.applications.request_withdrawal(student, application, "Exchange")
        app.applications.process_withdrawal(staff, request, True)

        assert request.status == RequestStatus.APPROVED
        assert application.status == ApplicationStatus.WITHDRAWN
        assert opp.slots == 1
        assert opp.status == OpportunityStatus.APPROVED
        assert student.accepted_application_id is None
        report = app.reports.generate()
        assert report.rows[0].filled_slots == 0
        assert_placement_invariants(app.store)

    def test_withdrawing_unaccepted_application_keeps_slots(
        self, app, staff, student, opportunity
    ):
        application = app.applications.apply(student, opportunity)
        request = app.applications.request_withdrawal(student, application)
        app.applications.process_withdrawal(staff, request, True)
        assert opportunity.slots == 2

    def test_rejected_withdrawal_leaves_application(self, app, staff, student, opportunity):
        application = app.applications.apply(student, opportunity)
        request = app.applications.request_withdrawal(student, application)
        app.applications.process_withdrawal(staff, request, False)

        assert request.status == RequestStatus.REJECTED
        assert application.status == ApplicationStatus.PENDING

    def test_processed_request_cannot_be_processed_again(
        self, app, staff, student, opportunity
    ):
        application = app.applications.apply(student, opportunity)
        request = app.applications.request_withdrawal(student, application)
        app.applications.process_withdrawal(staff, request, False)
        with pytest.raises(PreconditionError):
            app.applications.process_withdrawal(staff, request, True)


class TestListing:
    def test_lists(self, app, rep, staff, student, opportunity, clock):
        application = app.applications.apply(student, opportunity)
        clock.advance(minutes=5)
        request = app.applications.request_withdrawal(student, application)

        assert app.applications.list_student_applications(student) == [application]
        assert app.applications.list_applications_for(rep, opportunity) == [application]
        assert app.applications.list_pending_withdrawals() == [request]

    def test_other_rep_cannot_list_applications(self, app, make_rep, opportunity):
        other = make_rep("hr@globex.com", "Globex")
        with pytest.raises(PreconditionError):
            app.applications.list_applications_for(other, opportunity)

    def test_find_application_not_found(self, app):
        with pytest.raises(NotFoundError):
            app.applications.find_application("A999")
