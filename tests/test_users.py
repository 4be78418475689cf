import pytest

from placement_cli.errors import NotFoundError, PreconditionError, ValidationError
from placement_cli.models import (
    CareerCenterStaff,
    CompanyRepresentative,
    RequestStatus,
    Student,
)
from placement_cli.utils.passwords import verify_password

from tests.conftest import PASSWORD


def register(app, email="hr@initech.com"):
    return app.users.register_company_rep(
        email, "Peter Gibbons", "tps-report", "Initech", "Engineering", "Lead"
    )


class TestRegistration:
    def test_register_creates_pending_rep_and_request(self, app, clock):
        request = register(app)

        rep = app.store.users.find_rep("hr@initech.com")
        assert request.id == "REG001"
        assert request.status == RequestStatus.PENDING
        assert request.requested_at == clock()
        assert rep.approval_status == RequestStatus.PENDING
        assert verify_password("tps-report", rep.password_digest)

    def test_invalid_or_duplicate_email(self, app):
        with pytest.raises(ValidationError):
            register(app, "not-an-email")
        register(app)
        with pytest.raises(ValidationError, match="already exists"):
            register(app, "HR@initech.com")

    def test_approval_moves_rep_and_request_together(self, app, staff):
        request = register(app)
        rep = app.users.approve_registration(staff, request)

        assert rep.approval_status == RequestStatus.APPROVED
        assert request.status == RequestStatus.APPROVED
        assert app.users.list_pending_registrations() == []

    def test_rejection_moves_rep_and_request_together(self, app, staff):
        request = register(app)
        rep = app.users.reject_registration(staff, request)

        assert rep.approval_status == RequestStatus.REJECTED
        assert request.status == RequestStatus.REJECTED

    def test_decided_request_cannot_be_decided_again(self, app, staff):
        request = register(app)
        app.users.approve_registration(staff, request)
        with pytest.raises(PreconditionError):
            app.users.reject_registration(staff, request)

    def test_only_staff_decide(self, app, rep):
        request = register(app)
        with pytest.raises(PreconditionError):
            app.users.approve_registration(rep, request)

    def test_find_registration_by_id_or_email(self, app):
        request = register(app)
        assert app.users.find_registration("reg001") is request
        assert app.users.find_registration("hr@initech.com") is request
        with pytest.raises(NotFoundError):
            app.users.find_registration("REG999")


class TestRosterImports:
    def test_import_students(self, app, tmp_path):
        roster = tmp_path / "students.csv"
        roster.write_text(
            "StudentID,Name,Major,Year,Email\n"
            "U2345123F,Chloe Tan,CSC,2,chloe@e.ntu.edu.sg\n"
            "U2310001A,Bad Year,CSC,7,bad@e.ntu.edu.sg\n"
            "X123,Bad Id,CSC,1,x@e.ntu.edu.sg\n",
            encoding="utf-8",
        )
        imported = app.users.import_students(roster)

        assert [s.user_id for s in imported] == ["U2345123F"]
        chloe = app.store.users.find_student("U2345123F")
        assert (chloe.name, chloe.major, chloe.year_of_study) == ("Chloe Tan", "CSC", 2)
        assert verify_password("password", chloe.password_digest)

    def test_import_staff_from_tab_delimited_file(self, app, tmp_path):
        roster = tmp_path / "staff.txt"
        roster.write_text(
            "StaffID\tName\tRole\tDepartment\tEmail\n"
            "sng001\tNg Siew Ling\tCareer Center Staff\tCCDS\tsng001@ntu.edu.sg\n",
            encoding="utf-8",
        )
        imported = app.users.import_staff(roster)

        assert len(imported) == 1
        staff = app.store.users.find_by_id("sng001@ntu.edu.sg")
        assert isinstance(staff, CareerCenterStaff)
        assert staff.department == "CCDS"

    def test_import_reps_opens_registrations_for_pending(self, app, tmp_path):
        roster = tmp_path / "reps.csv"
        roster.write_text(
            "CompanyRepID,Name,CompanyName,Department,Position,Email,Status\n"
            "R1,Ann,Acme,HR,Recruiter,ann@acme.com,\n"
            "R2,Bob,Globex,HR,Manager,bob@globex.com,APPROVED\n",
            encoding="utf-8",
        )
        imported = app.users.import_reps(roster)

        assert [r.user_id for r in imported] == ["ann@acme.com", "bob@globex.com"]
        pending = app.users.list_pending_registrations()
        assert [r.rep_id for r in pending] == ["ann@acme.com"]
        assert app.store.users.find_rep("bob@globex.com").is_approved

    def test_reimport_skips_existing_users(self, app, tmp_path, student):
        roster = tmp_path / "students.csv"
        roster.write_text(
            f"StudentID,Name,Major,Year,Email\n{student.user_id},Someone,EEE,1,a@b.c\n",
            encoding="utf-8",
        )
        assert app.users.import_students(roster) == []
        assert app.store.users.find_student(student.user_id).major == "CSC"


class TestAuth:
    def test_login(self, app, student):
        result = app.auth.login(student.user_id.lower(), PASSWORD)
        assert result.user is student
        assert result.user.logged_in is True
        assert result.must_change_password is False

    def test_unknown_user_and_wrong_password(self, app, student):
        with pytest.raises(NotFoundError):
            app.auth.login("U0000000Z", PASSWORD)
        with pytest.raises(ValidationError):
            app.auth.login(student.user_id, "wrong")

    def test_unapproved_rep_cannot_log_in(self, app, make_rep):
        pending = make_rep("new@startup.io", "Startup", RequestStatus.PENDING)
        with pytest.raises(PreconditionError):
            app.auth.login(pending.user_id, PASSWORD)

    def test_default_password_forces_change(self, app, tmp_path):
        roster = tmp_path / "students.csv"
        roster.write_text(
            "StudentID,Name,Major,Year,Email\nU2345123F,Chloe Tan,CSC,2,c@e.ntu.edu.sg\n",
            encoding="utf-8",
        )
        app.users.import_students(roster)

        result = app.auth.login("U2345123F", "password")
        assert result.must_change_password is True

        app.auth.change_password(result.user, "password", "better-one")
        assert app.auth.login("U2345123F", "better-one").must_change_password is False

    def test_legacy_plaintext_default_is_accepted(self, app, store):
        store.users.save(Student("U2345123F", "Legacy", password_digest="password", year_of_study=2))
        assert app.auth.login("U2345123F", "password").must_change_password is True

    def test_change_password_rules(self, app, student):
        with pytest.raises(ValidationError):
            app.auth.change_password(student, "wrong", "another")
        with pytest.raises(ValidationError):
            app.auth.change_password(student, PASSWORD, "   ")
        with pytest.raises(ValidationError):
            app.auth.change_password(student, PASSWORD, "password")

    def test_reps_are_never_forced_to_change(self, app, store):
        rep = CompanyRepresentative(
            user_id="hr@acme.com",
            name="Rep",
            password_digest="password",
            company_name="Acme",
            approval_status=RequestStatus.APPROVED,
        )
        store.users.save(rep)
        assert app.auth.login("hr@acme.com", "password").must_change_password is False
