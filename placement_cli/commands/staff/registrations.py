import click

from placement_cli.context import AppContext
from placement_cli.models import CareerCenterStaff


def list_pending_reps(app: AppContext) -> None:
    requests = app.users.list_pending_registrations()
    if not requests:
        click.secho("No pending registrations found.", fg="yellow")
        return

    for i, request in enumerate(requests):
        rep = app.store.users.find_rep(request.rep_id)
        if rep is None:
            click.secho(f"{i+1}) {request.id} {request.rep_id} (account missing)", fg="red")
            continue
        click.echo(
            f"{i+1}) {request.id} | {rep.name} <{rep.email}> | {rep.company_name} | "
            f"{rep.position or '-'}, {rep.department or '-'} | "
            f"requested {request.requested_at:%Y-%m-%d %H:%M}"
        )


def decide_registration(
    app: AppContext, staff: CareerCenterStaff, key: str, approve: bool
) -> None:
    request = app.users.find_registration(key)
    if approve:
        rep = app.users.approve_registration(staff, request)
        click.secho(f"Approved registration for {rep.name} ({rep.email})", fg="green")
    else:
        rep = app.users.reject_registration(staff, request)
        click.secho(f"Rejected registration for {rep.name} ({rep.email})", fg="red")
