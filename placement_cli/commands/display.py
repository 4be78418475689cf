from typing import Iterable, Optional

import click

from placement_cli.models import (
    Application,
    ApplicationStatus,
    InternshipOpportunity,
    OpportunityStatus,
    RequestStatus,
)

STATUS_COLORS = {
    OpportunityStatus.PENDING: "yellow",
    OpportunityStatus.APPROVED: "green",
    OpportunityStatus.REJECTED: "red",
    OpportunityStatus.FILLED: "blue",
    ApplicationStatus.PENDING: "yellow",
    ApplicationStatus.SUCCESSFUL: "green",
    ApplicationStatus.ACCEPTED: "blue",
    ApplicationStatus.UNSUCCESSFUL: "red",
    ApplicationStatus.WITHDRAWN: "white",
    RequestStatus.PENDING: "yellow",
    RequestStatus.APPROVED: "green",
    RequestStatus.REJECTED: "red",
}


def status_text(status) -> str:
    return click.style(status.value, fg=STATUS_COLORS.get(status))


def show_opportunity(o: InternshipOpportunity, show_visibility: bool = True) -> None:
    window = f"{o.open_date or '?'}..{o.close_date or '?'}"
    line = (
        f"{o.id} | {o.title} | {o.company_name} | {o.level.value} | "
        f"major={o.preferred_major or 'any'} | slots={o.slots} | {window}"
    )
    if show_visibility:
        line += f" | visible={'yes' if o.visible else 'no'}"
    click.echo(f"{line} | {status_text(o.status)}")


def show_opportunities(
    opportunities: Iterable[InternshipOpportunity],
    empty_message: str = "No opportunities found.",
    show_visibility: bool = True,
) -> None:
    opportunities = list(opportunities)
    if not opportunities:
        click.secho(empty_message, fg="yellow")
        return
    for o in opportunities:
        show_opportunity(o, show_visibility)
    click.echo(f"\nTotal: {len(opportunities)}")


def show_application(
    app: Application, opportunity: Optional[InternshipOpportunity] = None
) -> None:
    title = opportunity.title if opportunity else "(opportunity removed)"
    flag = " | withdrawal requested" if app.withdrawal_requested else ""
    click.echo(
        f"{app.id} | {app.opportunity_id} {title} | student={app.student_id} | "
        f"applied {app.applied_at:%Y-%m-%d %H:%M} | {status_text(app.status)}{flag}"
    )
