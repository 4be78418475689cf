import functools
import sys
from typing import Optional

import click

from placement_cli.commands.auth.session import authenticate, change_password, login
from placement_cli.commands.check.notifications import check_notifications
from placement_cli.commands.export.report import generate_report
from placement_cli.commands.imports.rosters import import_roster
from placement_cli.commands.register.rep import register_rep
from placement_cli.commands.rep import applications as rep_applications
from placement_cli.commands.rep import opportunities as rep_opportunities
from placement_cli.commands.staff import opportunities as staff_opportunities
from placement_cli.commands.staff import registrations as staff_registrations
from placement_cli.commands.staff import withdrawals as staff_withdrawals
from placement_cli.commands.student import applications as student_applications
from placement_cli.commands.student import opportunities as student_opportunities
from placement_cli.config import get_settings
from placement_cli.context import AppContext
from placement_cli.errors import PlacementError
from placement_cli.models import (
    CareerCenterStaff,
    CompanyRepresentative,
    InternshipLevel,
    OpportunityDraft,
    OpportunityFilter,
    OpportunityStatus,
    ReportFilter,
    SortKey,
    Student,
)
from placement_cli.utils.logging_config import configure_from_env, get_logger

logger = get_logger(__name__)

ISO_DATE = click.DateTime(formats=["%Y-%m-%d"])


def handle_errors(func):
    """Print placement errors in red and exit non-zero."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except PlacementError as e:
            logger.info(f"{func.__name__} failed: {e.error_code} {e.message}")
            click.secho(f"Error: {e.message}", fg="red")
            sys.exit(1)

    return wrapper


def credentials(func):
    func = click.option(
        "--password", "-p", prompt=True, hide_input=True, help="Account password"
    )(func)
    func = click.option(
        "--user", "-u", "user_id", prompt="User ID", help="Student ID or email"
    )(func)
    return func


def browse_options(func):
    func = click.option(
        "--sort",
        type=click.Choice([k.name for k in SortKey], case_sensitive=False),
        default=SortKey.TITLE_ASC.name,
        show_default=True,
    )(func)
    func = click.option(
        "--closing-by", type=ISO_DATE, help="Closing on or before (YYYY-MM-DD)"
    )(func)
    func = click.option(
        "--level",
        type=click.Choice([l.name for l in InternshipLevel], case_sensitive=False),
    )(func)
    func = click.option("--major", help="Preferred major")(func)
    return func


def build_filter(
    major: Optional[str],
    level: Optional[str],
    closing_by,
    sort: str,
    status: Optional[str] = None,
) -> OpportunityFilter:
    return OpportunityFilter(
        status=OpportunityStatus[status.upper()] if status else None,
        preferred_major=major,
        level=InternshipLevel[level.upper()] if level else None,
        closing_on_or_before=closing_by.date() if closing_by else None,
        sort_key=SortKey[sort.upper()],
    )


@click.group()
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False),
    help="Directory holding the data files (default: IPMS_DATA_DIR or ./data)",
)
@click.pass_context
def cli(ctx: click.Context, data_dir: Optional[str]) -> None:
    configure_from_env()
    ctx.obj = AppContext.load(get_settings(data_dir))


@cli.group()
def auth() -> None:
    pass


@auth.command(name="login")
@credentials
@click.pass_obj
@handle_errors
def auth_login(app: AppContext, user_id: str, password: str) -> None:
    login(app, user_id, password)


@auth.command(name="change-password")
@credentials
@click.option(
    "--new-password",
    prompt=True,
    hide_input=True,
    confirmation_prompt=True,
    help="The new password",
)
@click.pass_obj
@handle_errors
def auth_change_password(
    app: AppContext, user_id: str, password: str, new_password: str
) -> None:
    change_password(app, user_id, password, new_password)


@cli.group()
def register() -> None:
    pass


@register.command(name="rep")
@click.argument("email")
@click.option("--name", prompt=True, help="Full name")
@click.option("--company", prompt="Company name", help="Company name")
@click.option("--department", default="", help="Department")
@click.option("--position", default="", help="Position")
@click.option(
    "--password", "-p", prompt=True, hide_input=True, confirmation_prompt=True
)
@click.pass_obj
@handle_errors
def register_rep_cmd(
    app: AppContext,
    email: str,
    name: str,
    company: str,
    department: str,
    position: str,
    password: str,
) -> None:
    """Register a company representative account for staff approval."""
    register_rep(app, email, name, password, company, department, position)


@cli.group()
def student() -> None:
    pass


@student.command(name="opportunities")
@credentials
@browse_options
@click.pass_obj
@handle_errors
def student_opportunities_cmd(
    app: AppContext, user_id, password, major, level, closing_by, sort
) -> None:
    """List opportunities you can apply for today."""
    user = authenticate(app, user_id, password, Student)
    student_opportunities.list_opportunities(
        app, user, build_filter(major, level, closing_by, sort)
    )


@student.command(name="apply")
@credentials
@click.argument("opportunity_id")
@click.pass_obj
@handle_errors
def student_apply(app: AppContext, user_id, password, opportunity_id: str) -> None:
    user = authenticate(app, user_id, password, Student)
    student_applications.apply(app, user, opportunity_id)


@student.command(name="applications")
@credentials
@click.pass_obj
@handle_errors
def student_applications_cmd(app: AppContext, user_id, password) -> None:
    user = authenticate(app, user_id, password, Student)
    student_applications.list_applications(app, user)


@student.command(name="accept")
@credentials
@click.argument("application_id")
@click.pass_obj
@handle_errors
def student_accept(app: AppContext, user_id, password, application_id: str) -> None:
    """Accept a successful application; your other applications are withdrawn."""
    user = authenticate(app, user_id, password, Student)
    student_applications.accept(app, user, application_id)


@student.command(name="withdraw")
@credentials
@click.argument("application_id")
@click.option("--reason", default="", help="Reason for withdrawing")
@click.pass_obj
@handle_errors
def student_withdraw(
    app: AppContext, user_id, password, application_id: str, reason: str
) -> None:
    user = authenticate(app, user_id, password, Student)
    student_applications.withdraw(app, user, application_id, reason)


@student.command(name="visibility")
@credentials
@click.argument("state", type=click.Choice(["on", "off"], case_sensitive=False))
@click.pass_obj
@handle_errors
def student_visibility(app: AppContext, user_id, password, state: str) -> None:
    user = authenticate(app, user_id, password, Student)
    student_opportunities.set_visibility(app, user, state.lower() == "on")


@student.command(name="notifications")
@credentials
@click.pass_obj
@handle_errors
def student_notifications(app: AppContext, user_id, password) -> None:
    check_notifications(app, authenticate(app, user_id, password, Student))


@cli.group()
def rep() -> None:
    pass


@rep.command(name="create")
@credentials
@click.option("--title", prompt=True)
@click.option("--description", default="")
@click.option(
    "--level",
    type=click.Choice([l.name for l in InternshipLevel], case_sensitive=False),
    default=InternshipLevel.BASIC.name,
    show_default=True,
)
@click.option("--major", default=None, help="Preferred major")
@click.option("--close-date", type=ISO_DATE, prompt="Closing date (YYYY-MM-DD)")
@click.option("--slots", type=int, default=1, show_default=True)
@click.pass_obj
@handle_errors
def rep_create(
    app: AppContext,
    user_id,
    password,
    title: str,
    description: str,
    level: str,
    major: Optional[str],
    close_date,
    slots: int,
) -> None:
    """Draft a new opportunity for career center approval."""
    user = authenticate(app, user_id, password, CompanyRepresentative)
    draft = OpportunityDraft(
        title=title,
        close_date=close_date.date(),
        description=description,
        level=InternshipLevel[level.upper()],
        preferred_major=major,
        slots=slots,
    )
    rep_opportunities.create_opportunity(app, user, draft)


@rep.command(name="list")
@credentials
@browse_options
@click.option(
    "--status",
    type=click.Choice([s.name for s in OpportunityStatus], case_sensitive=False),
)
@click.pass_obj
@handle_errors
def rep_list(
    app: AppContext, user_id, password, major, level, closing_by, sort, status
) -> None:
    user = authenticate(app, user_id, password, CompanyRepresentative)
    rep_opportunities.list_own(
        app, user, build_filter(major, level, closing_by, sort, status)
    )


@rep.command(name="visibility")
@credentials
@click.argument("opportunity_id")
@click.argument("state", type=click.Choice(["on", "off"], case_sensitive=False))
@click.pass_obj
@handle_errors
def rep_visibility(
    app: AppContext, user_id, password, opportunity_id: str, state: str
) -> None:
    user = authenticate(app, user_id, password, CompanyRepresentative)
    rep_opportunities.set_visibility(app, user, opportunity_id, state.lower() == "on")


@rep.command(name="slots")
@credentials
@click.argument("opportunity_id")
@click.argument("slots", type=int)
@click.pass_obj
@handle_errors
def rep_slots(app: AppContext, user_id, password, opportunity_id: str, slots: int) -> None:
    user = authenticate(app, user_id, password, CompanyRepresentative)
    rep_opportunities.set_slots(app, user, opportunity_id, slots)


@rep.command(name="delete")
@credentials
@click.argument("opportunity_id")
@click.pass_obj
@handle_errors
def rep_delete(app: AppContext, user_id, password, opportunity_id: str) -> None:
    user = authenticate(app, user_id, password, CompanyRepresentative)
    rep_opportunities.delete_opportunity(app, user, opportunity_id)


@rep.command(name="applications")
@credentials
@click.argument("opportunity_id")
@click.pass_obj
@handle_errors
def rep_applications_cmd(app: AppContext, user_id, password, opportunity_id: str) -> None:
    user = authenticate(app, user_id, password, CompanyRepresentative)
    rep_applications.list_applications(app, user, opportunity_id)


@rep.command(name="review")
@credentials
@click.argument("application_id")
@click.argument("decision", type=click.Choice(["approve", "reject"], case_sensitive=False))
@click.pass_obj
@handle_errors
def rep_review(
    app: AppContext, user_id, password, application_id: str, decision: str
) -> None:
    user = authenticate(app, user_id, password, CompanyRepresentative)
    rep_applications.review(app, user, application_id, decision.lower() == "approve")


@rep.command(name="notifications")
@credentials
@click.pass_obj
@handle_errors
def rep_notifications(app: AppContext, user_id, password) -> None:
    check_notifications(app, authenticate(app, user_id, password, CompanyRepresentative))


@cli.group()
def staff() -> None:
    pass


@staff.command(name="reps")
@credentials
@click.pass_obj
@handle_errors
def staff_reps(app: AppContext, user_id, password) -> None:
    """List representative registrations awaiting approval."""
    authenticate(app, user_id, password, CareerCenterStaff)
    staff_registrations.list_pending_reps(app)


@staff.command(name="approve-rep")
@credentials
@click.argument("registration")
@click.pass_obj
@handle_errors
def staff_approve_rep(app: AppContext, user_id, password, registration: str) -> None:
    """Approve a registration by request id or representative email."""
    user = authenticate(app, user_id, password, CareerCenterStaff)
    staff_registrations.decide_registration(app, user, registration, True)


@staff.command(name="reject-rep")
@credentials
@click.argument("registration")
@click.pass_obj
@handle_errors
def staff_reject_rep(app: AppContext, user_id, password, registration: str) -> None:
    user = authenticate(app, user_id, password, CareerCenterStaff)
    staff_registrations.decide_registration(app, user, registration, False)


@staff.command(name="opportunities")
@credentials
@browse_options
@click.option(
    "--status",
    type=click.Choice([s.name for s in OpportunityStatus], case_sensitive=False),
)
@click.option("--pending", is_flag=True, help="Only opportunities awaiting review")
@click.pass_obj
@handle_errors
def staff_opportunities_cmd(
    app: AppContext, user_id, password, major, level, closing_by, sort, status, pending
) -> None:
    authenticate(app, user_id, password, CareerCenterStaff)
    staff_opportunities.list_opportunities(
        app, build_filter(major, level, closing_by, sort, status), pending
    )


@staff.command(name="approve-opportunity")
@credentials
@click.argument("opportunity_id")
@click.pass_obj
@handle_errors
def staff_approve_opportunity(
    app: AppContext, user_id, password, opportunity_id: str
) -> None:
    user = authenticate(app, user_id, password, CareerCenterStaff)
    staff_opportunities.decide_opportunity(app, user, opportunity_id, True)


@staff.command(name="reject-opportunity")
@credentials
@click.argument("opportunity_id")
@click.pass_obj
@handle_errors
def staff_reject_opportunity(
    app: AppContext, user_id, password, opportunity_id: str
) -> None:
    user = authenticate(app, user_id, password, CareerCenterStaff)
    staff_opportunities.decide_opportunity(app, user, opportunity_id, False)


@staff.command(name="withdrawals")
@credentials
@click.pass_obj
@handle_errors
def staff_withdrawals_cmd(app: AppContext, user_id, password) -> None:
    authenticate(app, user_id, password, CareerCenterStaff)
    staff_withdrawals.list_pending_withdrawals(app)


@staff.command(name="process-withdrawal")
@credentials
@click.argument("request_id")
@click.argument("decision", type=click.Choice(["approve", "reject"], case_sensitive=False))
@click.pass_obj
@handle_errors
def staff_process_withdrawal(
    app: AppContext, user_id, password, request_id: str, decision: str
) -> None:
    user = authenticate(app, user_id, password, CareerCenterStaff)
    staff_withdrawals.process_withdrawal(
        app, user, request_id, decision.lower() == "approve"
    )


@staff.command(name="notifications")
@credentials
@click.pass_obj
@handle_errors
def staff_notifications(app: AppContext, user_id, password) -> None:
    check_notifications(app, authenticate(app, user_id, password, CareerCenterStaff))


@cli.group()
def report() -> None:
    pass


@report.command(name="generate")
@credentials
@click.option(
    "--status",
    type=click.Choice([s.name for s in OpportunityStatus], case_sensitive=False),
)
@click.option("--major", help="Preferred major")
@click.option(
    "--level",
    type=click.Choice([l.name for l in InternshipLevel], case_sensitive=False),
)
@click.option("--company", help="Company name")
@click.option("--open-from", type=ISO_DATE, help="Opening on or after (YYYY-MM-DD)")
@click.option("--close-by", type=ISO_DATE, help="Closing on or before (YYYY-MM-DD)")
@click.option(
    "--export",
    type=click.Choice(["xlsx", "pdf"], case_sensitive=False),
    help="Also write the report to the export directory",
)
@click.pass_obj
@handle_errors
def report_generate(
    app: AppContext,
    user_id,
    password,
    status,
    major,
    level,
    company,
    open_from,
    close_by,
    export,
) -> None:
    """Placement summary of approved, visible opportunities."""
    authenticate(app, user_id, password, CareerCenterStaff)
    report_filter = ReportFilter(
        status=OpportunityStatus[status.upper()] if status else None,
        preferred_major=major,
        level=InternshipLevel[level.upper()] if level else None,
        company=company,
        open_date_from=open_from.date() if open_from else None,
        close_date_by=close_by.date() if close_by else None,
    )
    generate_report(app, report_filter, export.lower() if export else None)


@cli.group(name="import")
def import_() -> None:
    pass


@import_.command(name="students")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.pass_obj
@handle_errors
def import_students(app: AppContext, path: str) -> None:
    """Import a student roster (StudentID, Name, Major, Year, Email)."""
    import_roster(app, "students", path)


@import_.command(name="staff")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.pass_obj
@handle_errors
def import_staff(app: AppContext, path: str) -> None:
    """Import a staff roster (StaffID, Name, Role, Department, Email)."""
    import_roster(app, "staff", path)


@import_.command(name="reps")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.pass_obj
@handle_errors
def import_reps(app: AppContext, path: str) -> None:
    """Import company representatives (CompanyRepID, Name, CompanyName, ...)."""
    import_roster(app, "reps", path)


if __name__ == "__main__":
    cli()
