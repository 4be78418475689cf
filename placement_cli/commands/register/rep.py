import click

from placement_cli.context import AppContext


def register_rep(
    app: AppContext,
    email: str,
    name: str,
    password: str,
    company: str,
    department: str,
    position: str,
) -> None:
    request = app.users.register_company_rep(
        email, name, password, company, department, position
    )
    click.secho(
        f"Registration {request.id} submitted for {email}. "
        "You can log in once career center staff approve it.",
        fg="green",
    )
