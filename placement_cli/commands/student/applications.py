import click

from placement_cli.commands.display import show_application
from placement_cli.commands.student.opportunities import require_visibility
from placement_cli.context import AppContext
from placement_cli.errors import NotFoundError
from placement_cli.models import ApplicationStatus, Student


def apply(app: AppContext, student: Student, opportunity_id: str) -> None:
    if not require_visibility(student):
        return
    opp = app.store.opportunities.find_by_id(opportunity_id)
    if opp is None:
        raise NotFoundError(f"Opportunity {opportunity_id} not found")
    application = app.applications.apply(student, opp)
    click.secho(
        f"Applied for {opp.title} at {opp.company_name} ({application.id})", fg="green"
    )


def list_applications(app: AppContext, student: Student) -> None:
    applications = app.applications.list_student_applications(student)
    if not applications:
        click.secho("You have not applied for any opportunities.", fg="yellow")
        return
    for application in applications:
        show_application(
            application,
            app.store.opportunities.find_by_id(application.opportunity_id),
        )


def accept(app: AppContext, student: Student, application_id: str) -> None:
    application = app.applications.find_application(application_id)
    others = [
        a
        for a in app.store.applications.find_by_student(student.user_id)
        if a.id != application.id and a.status != ApplicationStatus.WITHDRAWN
    ]
    app.applications.student_accept(student, application)
    click.secho(f"Placement {application.id} accepted.", fg="green")
    withdrawn = [a.id for a in others if a.status == ApplicationStatus.WITHDRAWN]
    if withdrawn:
        click.echo(f"Other applications withdrawn: {', '.join(withdrawn)}")


def withdraw(app: AppContext, student: Student, application_id: str, reason: str) -> None:
    application = app.applications.find_application(application_id)
    request = app.applications.request_withdrawal(student, application, reason)
    click.secho(
        f"Withdrawal request {request.id} submitted for {application.id}; "
        "career center staff will review it.",
        fg="green",
    )
