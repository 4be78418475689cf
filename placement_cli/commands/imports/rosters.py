from pathlib import Path

import click

from placement_cli.context import AppContext


def import_roster(app: AppContext, kind: str, path: Path) -> None:
    importers = {
        "students": app.users.import_students,
        "staff": app.users.import_staff,
        "reps": app.users.import_reps,
    }
    imported = importers[kind](path)
    if not imported:
        click.secho(f"No new {kind} imported from {path}.", fg="yellow")
        return
    click.secho(f"Imported {len(imported)} {kind} from {path}", fg="green")
    for user in imported:
        click.echo(f"- {user.user_id} {user.name}")
