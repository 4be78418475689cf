import click

from placement_cli.commands.display import show_opportunities
from placement_cli.context import AppContext
from placement_cli.models import OpportunityFilter, Student


def require_visibility(student: Student) -> bool:
    if not student.visible:
        click.secho(
            "Turn your visibility on to browse and apply: ipms student visibility on",
            fg="yellow",
        )
        return False
    return True


def list_opportunities(app: AppContext, student: Student, f: OpportunityFilter) -> None:
    if not require_visibility(student):
        return
    show_opportunities(
        app.opportunities.list_visible_for(student, f),
        "No visible or eligible opportunities right now.",
        show_visibility=False,
    )


def set_visibility(app: AppContext, student: Student, on: bool) -> None:
    student.visible = on
    app.store.users.save(student)
    click.secho(f"Visibility set to: {'on' if on else 'off'}", fg="green")
