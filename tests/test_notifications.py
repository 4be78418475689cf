from datetime import timedelta

from placement_cli.models import InternshipLevel, OpportunityDraft, OpportunityStatus
from placement_cli.services.notifications import NotificationKind

from tests.conftest import TODAY


class TestStudentNotifications:
    def test_application_update_is_reported_once(self, app, rep, student, opportunity, clock):
        application = app.applications.apply(student, opportunity)
        student.last_notification_check = clock()

        clock.advance(seconds=1)
        app.applications.company_review(rep, application, True)

        assert app.notifications.notifications(student) == [
            NotificationKind.APPLICATION_UPDATE
        ]
        app.notifications.mark_checked(student)
        assert app.notifications.notifications(student) == []

    def test_new_user_sees_open_opportunities(self, app, student, opportunity):
        assert NotificationKind.NEW_OPPORTUNITY in app.notifications.notifications(student)

    def test_ineligible_opportunity_is_not_announced(self, app, rep, junior, make_opportunity):
        make_opportunity(rep, level=InternshipLevel.ADVANCED)
        assert app.notifications.notifications(junior) == []

    def test_decided_withdrawal_is_reported(self, app, staff, student, opportunity, clock):
        application = app.applications.apply(student, opportunity)
        request = app.applications.request_withdrawal(student, application)
        app.notifications.mark_checked(student)
        assert app.notifications.notifications(student) == []

        clock.advance(minutes=1)
        app.applications.process_withdrawal(staff, request, False)

        assert app.notifications.notifications(student) == [
            NotificationKind.WITHDRAWAL_UPDATE
        ]

    def test_explicit_since_overrides_marker(self, app, student, opportunity, clock):
        app.notifications.mark_checked(student)
        since = clock() - timedelta(days=30)
        assert app.notifications.notifications(student, since) == [
            NotificationKind.NEW_OPPORTUNITY
        ]


class TestStaffNotifications:
    def test_all_three_categories(self, app, rep, staff, student, opportunity, clock):
        staff.last_notification_check = clock()
        clock.advance(minutes=1)
        app.opportunities.create_draft(
            rep, OpportunityDraft("Ops Intern", TODAY + timedelta(days=7))
        )
        app.users.register_company_rep("hr@initech.com", "Peter", "pw", "Initech")
        application = app.applications.apply(student, opportunity)
        app.applications.request_withdrawal(student, application)

        assert app.notifications.notifications(staff) == [
            NotificationKind.OPPORTUNITY_SUBMISSION,
            NotificationKind.REGISTRATION_REQUEST,
            NotificationKind.PENDING_WITHDRAWAL,
        ]

    def test_reviewed_opportunity_is_no_longer_reported(self, app, rep, staff, clock):
        staff.last_notification_check = clock()
        clock.advance(minutes=1)
        opp = app.opportunities.create_draft(
            rep, OpportunityDraft("Ops Intern", TODAY + timedelta(days=7))
        )
        app.opportunities.approve(staff, opp)
        assert app.notifications.notifications(staff) == []


class TestRepNotifications:
    def test_new_application_status_change_and_withdrawal(
        self, app, rep, staff, student, opportunity, clock
    ):
        rep.last_notification_check = clock()
        clock.advance(minutes=1)
        application = app.applications.apply(student, opportunity)
        app.applications.request_withdrawal(student, application)
        app.opportunities.set_visibility(rep, opportunity, False)

        assert app.notifications.notifications(rep) == [
            NotificationKind.NEW_APPLICATION,
            NotificationKind.OPPORTUNITY_STATUS,
            NotificationKind.APPLICATION_WITHDRAWAL,
        ]

    def test_other_companies_activity_is_ignored(
        self, app, make_rep, student, opportunity, clock
    ):
        other = make_rep("hr@globex.com", "Globex")
        other.last_notification_check = clock()
        clock.advance(minutes=1)
        app.applications.apply(student, opportunity)
        assert app.notifications.notifications(other) == []

    def test_pending_opportunity_update_is_not_a_status_change(
        self, app, rep, clock
    ):
        rep.last_notification_check = clock()
        clock.advance(minutes=1)
        opp = app.opportunities.create_draft(
            rep, OpportunityDraft("Ops Intern", TODAY + timedelta(days=7))
        )
        assert opp.status == OpportunityStatus.PENDING
        assert app.notifications.notifications(rep) == []
