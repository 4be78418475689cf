from datetime import date, timedelta

import pytest
from click.testing import CliRunner

from placement_cli import main
from placement_cli.models import (
    CareerCenterStaff,
    OpportunityStatus,
    RequestStatus,
    Student,
)
from placement_cli.store import DataStore
from placement_cli.utils.passwords import hash_password

from tests.conftest import PASSWORD

STAFF = "sng001@ntu.edu.sg"
STUDENT = "U2310001A"
REP = "hr@initech.com"


@pytest.fixture
def runner(monkeypatch, settings, password_digest):
    monkeypatch.setattr(main, "configure_from_env", lambda: None)
    monkeypatch.setattr(main, "get_settings", lambda data_dir=None: settings)

    seed = DataStore(settings)
    seed.users.save(
        CareerCenterStaff(STAFF, "Ng", password_digest, department="CCDS", email=STAFF)
    )
    seed.users.save(
        Student(
            STUDENT, "Chloe", password_digest, year_of_study=3, major="CSC", visible=True
        )
    )
    return CliRunner()


def invoke(runner, *args):
    return runner.invoke(main.cli, list(args))


def as_user(user_id, password=PASSWORD):
    return ["-u", user_id, "-p", password]


def reload(settings) -> DataStore:
    store = DataStore(settings)
    store.reload_all()
    return store


class TestCliWorkflow:
    def test_full_placement_workflow(self, runner, settings):
        result = invoke(
            runner, "register", "rep", REP,
            "--name", "Peter", "--company", "Initech", "--password", "tps-report",
        )
        assert result.exit_code == 0, result.output
        assert "REG001" in result.output

        result = invoke(runner, "staff", "approve-rep", *as_user(STAFF), REP)
        assert result.exit_code == 0, result.output

        close = (date.today() + timedelta(days=14)).isoformat()
        result = invoke(
            runner, "rep", "create", *as_user(REP, "tps-report"),
            "--title", "Backend Intern", "--close-date", close, "--slots", "1",
        )
        assert result.exit_code == 0, result.output
        assert "O001" in result.output

        assert invoke(runner, "staff", "approve-opportunity", *as_user(STAFF), "O001").exit_code == 0
        assert invoke(runner, "rep", "visibility", *as_user(REP, "tps-report"), "O001", "on").exit_code == 0

        result = invoke(runner, "student", "opportunities", *as_user(STUDENT))
        assert "Backend Intern" in result.output

        result = invoke(runner, "student", "apply", *as_user(STUDENT), "O001")
        assert result.exit_code == 0, result.output
        assert "A001" in result.output

        assert invoke(runner, "rep", "review", *as_user(REP, "tps-report"), "A001", "approve").exit_code == 0
        result = invoke(runner, "student", "accept", *as_user(STUDENT), "A001")
        assert result.exit_code == 0, result.output

        store = reload(settings)
        opp = store.opportunities.find_by_id("O001")
        assert (opp.slots, opp.status) == (0, OpportunityStatus.FILLED)
        assert store.users.find_student(STUDENT).accepted_application_id == "A001"
        assert store.users.find_rep(REP).approval_status == RequestStatus.APPROVED

        result = invoke(runner, "report", "generate", *as_user(STAFF), "--export", "xlsx")
        assert result.exit_code == 0, result.output
        assert list(settings.export_dir.glob("placement_report_*.xlsx"))


class TestCliErrors:
    def test_errors_exit_non_zero(self, runner):
        result = invoke(runner, "student", "apply", *as_user(STUDENT), "O404")
        assert result.exit_code == 1
        assert "Opportunity O404 not found" in result.output

    def test_wrong_password(self, runner):
        result = invoke(runner, "student", "applications", *as_user(STUDENT, "nope"))
        assert result.exit_code == 1
        assert "Invalid credentials" in result.output

    def test_wrong_role(self, runner):
        result = invoke(runner, "staff", "reps", *as_user(STUDENT))
        assert result.exit_code == 1

    def test_default_password_must_be_changed_first(self, runner, settings):
        store = reload(settings)
        store.users.save(
            Student("U2310009Z", "New", hash_password("password", rounds=4), year_of_study=1)
        )
        result = invoke(runner, "student", "applications", *as_user("U2310009Z", "password"))
        assert result.exit_code == 1
        assert "change the default password" in result.output

        result = invoke(
            runner, "auth", "change-password", *as_user("U2310009Z", "password"),
            "--new-password", "fresh-one",
        )
        assert result.exit_code == 0, result.output
        result = invoke(runner, "student", "applications", *as_user("U2310009Z", "fresh-one"))
        assert result.exit_code == 0, result.output

    def test_soft_violation_is_a_notice(self, runner, settings):
        invoke(
            runner, "register", "rep", REP,
            "--name", "Peter", "--company", "Initech", "--password", "tps-report",
        )
        invoke(runner, "staff", "approve-rep", *as_user(STAFF), "REG001")
        close = (date.today() + timedelta(days=14)).isoformat()
        invoke(
            runner, "rep", "create", *as_user(REP, "tps-report"),
            "--title", "Ops Intern", "--close-date", close,
        )

        result = invoke(runner, "rep", "visibility", *as_user(REP, "tps-report"), "O001", "on")

        assert result.exit_code == 0
        assert "only approved opportunities can change visibility" in result.output
        assert reload(settings).opportunities.find_by_id("O001").visible is False

    def test_hidden_student_is_told_to_turn_visibility_on(self, runner):
        invoke(runner, "student", "visibility", *as_user(STUDENT), "off")
        result = invoke(runner, "student", "opportunities", *as_user(STUDENT))
        assert result.exit_code == 0
        assert "Turn your visibility on" in result.output


class TestCliImports:
    def test_import_students(self, runner, settings, tmp_path):
        roster = tmp_path / "roster.csv"
        roster.write_text(
            "StudentID,Name,Major,Year,Email\nU2345123F,Chloe Tan,CSC,2,c@e.ntu.edu.sg\n",
            encoding="utf-8",
        )
        result = invoke(runner, "import", "students", str(roster))
        assert result.exit_code == 0, result.output
        assert "U2345123F" in result.output
        assert reload(settings).users.find_student("U2345123F") is not None

    def test_notifications_move_the_marker(self, runner, settings):
        result = invoke(runner, "staff", "notifications", *as_user(STAFF))
        assert result.exit_code == 0
        staff = reload(settings).users.find_by_id(STAFF)
        assert staff.last_notification_check.year >= 2025
