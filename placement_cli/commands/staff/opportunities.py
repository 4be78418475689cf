import click

from placement_cli.commands.display import show_opportunities
from placement_cli.commands.rep.opportunities import find_opportunity
from placement_cli.context import AppContext
from placement_cli.models import CareerCenterStaff, OpportunityFilter


def list_opportunities(app: AppContext, f: OpportunityFilter, pending: bool) -> None:
    if pending:
        show_opportunities(
            app.opportunities.list_pending(), "No opportunities awaiting review."
        )
        return
    show_opportunities(app.opportunities.list_all_filtered(f))


def decide_opportunity(
    app: AppContext, staff: CareerCenterStaff, opportunity_id: str, approve: bool
) -> None:
    opp = find_opportunity(app, opportunity_id)
    if approve:
        app.opportunities.approve(staff, opp)
        click.secho(
            f"Opportunity {opp.id} approved. The representative must make it "
            "visible before students can see it.",
            fg="green",
        )
    else:
        app.opportunities.reject(staff, opp)
        click.secho(f"Opportunity {opp.id} rejected.", fg="red")
