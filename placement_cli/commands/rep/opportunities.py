import click

from placement_cli.commands.display import show_opportunities, show_opportunity
from placement_cli.context import AppContext
from placement_cli.errors import NotFoundError
from placement_cli.models import (
    CompanyRepresentative,
    InternshipOpportunity,
    OpportunityDraft,
    OpportunityFilter,
)


def find_opportunity(app: AppContext, opportunity_id: str) -> InternshipOpportunity:
    opp = app.store.opportunities.find_by_id(opportunity_id)
    if opp is None:
        raise NotFoundError(f"Opportunity {opportunity_id} not found")
    return opp


def create_opportunity(
    app: AppContext, rep: CompanyRepresentative, draft: OpportunityDraft
) -> None:
    opp = app.opportunities.create_draft(rep, draft)
    click.secho(
        f"Opportunity {opp.id} submitted for career center approval.", fg="green"
    )
    show_opportunity(opp)


def list_own(app: AppContext, rep: CompanyRepresentative, f: OpportunityFilter) -> None:
    show_opportunities(
        app.opportunities.list_for_representative(rep, f),
        "You have not created any opportunities.",
    )


def set_visibility(
    app: AppContext, rep: CompanyRepresentative, opportunity_id: str, on: bool
) -> None:
    opp = find_opportunity(app, opportunity_id)
    if not app.opportunities.set_visibility(rep, opp, on):
        click.secho(
            f"Opportunity {opp.id} is {opp.status.value}; only approved "
            "opportunities can change visibility.",
            fg="yellow",
        )
        return
    click.secho(
        f"Opportunity {opp.id} is now {'visible' if on else 'hidden'}.", fg="green"
    )


def set_slots(
    app: AppContext, rep: CompanyRepresentative, opportunity_id: str, slots: int
) -> None:
    opp = app.opportunities.set_slots(rep, find_opportunity(app, opportunity_id), slots)
    click.secho(f"Opportunity {opp.id} now has {opp.slots} slot(s).", fg="green")
    show_opportunity(opp)


def delete_opportunity(
    app: AppContext, rep: CompanyRepresentative, opportunity_id: str
) -> None:
    opp = find_opportunity(app, opportunity_id)
    app.opportunities.delete(rep, opp)
    click.secho(f"Opportunity {opp.id} deleted.", fg="green")
