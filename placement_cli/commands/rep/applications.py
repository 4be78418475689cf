import click

from placement_cli.commands.display import show_application
from placement_cli.commands.rep.opportunities import find_opportunity
from placement_cli.context import AppContext
from placement_cli.models import CompanyRepresentative


def list_applications(
    app: AppContext, rep: CompanyRepresentative, opportunity_id: str
) -> None:
    opp = find_opportunity(app, opportunity_id)
    applications = app.applications.list_applications_for(rep, opp)
    if not applications:
        click.secho(f"No applications for {opp.id} yet.", fg="yellow")
        return
    click.echo(f"Applications for {opp.id} {opp.title}:")
    for application in applications:
        student = app.store.users.find_student(application.student_id)
        show_application(application, opp)
        if student is not None:
            click.echo(
                f"    {student.name}, year {student.year_of_study} {student.major}"
            )


def review(
    app: AppContext, rep: CompanyRepresentative, application_id: str, approve: bool
) -> None:
    application = app.applications.find_application(application_id)
    app.applications.company_review(rep, application, approve)
    click.secho(
        f"Application {application.id} marked {application.status.value}.",
        fg="green" if approve else "yellow",
    )
