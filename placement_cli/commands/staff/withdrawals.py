import click

from placement_cli.context import AppContext
from placement_cli.models import CareerCenterStaff


def list_pending_withdrawals(app: AppContext) -> None:
    requests = app.applications.list_pending_withdrawals()
    if not requests:
        click.secho("No pending withdrawal requests.", fg="yellow")
        return

    for request in requests:
        application = app.store.applications.find_by_id(request.application_id)
        status = application.status.value if application else "MISSING"
        click.echo(
            f"{request.id} | application {request.application_id} ({status}) | "
            f"student {request.student_id} | "
            f"requested {request.requested_at:%Y-%m-%d %H:%M} | "
            f"reason: {request.reason or '-'}"
        )


def process_withdrawal(
    app: AppContext, staff: CareerCenterStaff, request_id: str, approve: bool
) -> None:
    request = app.applications.find_withdrawal(request_id)
    app.applications.process_withdrawal(staff, request, approve)
    if approve:
        click.secho(
            f"Withdrawal {request.id} approved; application "
            f"{request.application_id} is withdrawn.",
            fg="green",
        )
    else:
        click.secho(f"Withdrawal {request.id} rejected.", fg="red")
