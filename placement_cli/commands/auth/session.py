import click

from placement_cli.context import AppContext
from placement_cli.errors import PreconditionError
from placement_cli.models import User


def authenticate(app: AppContext, user_id: str, password: str, role: type) -> User:
    """Log in and check the account can act in ``role``.

    Students and staff on the default password are refused until they change it.
    """
    result = app.auth.login(user_id, password)
    if not isinstance(result.user, role):
        raise PreconditionError(
            f"{result.user.user_id} cannot use {role.role.value} commands"
        )
    if result.must_change_password:
        raise PreconditionError(
            "You must change the default password first: ipms auth change-password"
        )
    return result.user


def login(app: AppContext, user_id: str, password: str) -> None:
    result = app.auth.login(user_id, password)
    user = result.user
    click.secho(f"Login successful! Welcome, {user.name}.", fg="green")
    click.echo(f"Role: {user.role.value}")
    if result.must_change_password:
        click.secho(
            "You are using the default password. "
            "Run 'ipms auth change-password' before doing anything else.",
            fg="yellow",
        )


def change_password(
    app: AppContext, user_id: str, password: str, new_password: str
) -> None:
    user = app.auth.login(user_id, password).user
    app.auth.change_password(user, password, new_password)
    app.auth.logout(user)
    click.secho("Password changed. Please log in again with the new password.", fg="green")
