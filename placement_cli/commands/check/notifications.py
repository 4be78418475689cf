import click

from placement_cli.context import AppContext
from placement_cli.models import User


def check_notifications(app: AppContext, user: User) -> None:
    """Show what changed since the last check, then move the marker to now."""
    kinds = app.notifications.notifications(user)
    if not kinds:
        click.secho("No new notifications.", fg="yellow")
    else:
        click.secho(f"{len(kinds)} new notification(s):", fg="green")
        for kind in kinds:
            click.echo(f"- {kind.message}")
    app.notifications.mark_checked(user)
