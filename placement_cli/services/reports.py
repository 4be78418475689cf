from datetime import datetime
from typing import Callable, Optional

from placement_cli.models import Report, ReportFilter, ReportRow
from placement_cli.repositories import ApplicationRepository, OpportunityRepository
from placement_cli.services.filters import sort_opportunities
from placement_cli.utils.logging_config import get_logger

logger = get_logger(__name__)


class ReportService:
    def __init__(
        self,
        opportunities: OpportunityRepository,
        applications: ApplicationRepository,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.opportunities = opportunities
        self.applications = applications
        self.clock = clock

    def generate(self, report_filter: Optional[ReportFilter] = None) -> Report:
        """One row per approved, visible opportunity matching the filter."""
        rows = []
        selected = self.opportunities.find_approved_visible_by_filter(report_filter)
        for opp in sort_opportunities(selected):
            apps = self.applications.find_by_opportunity(opp.id)
            filled = self.applications.count_successful_by_opportunity(opp.id)
            rows.append(
                ReportRow(
                    opportunity_id=opp.id,
                    title=opp.title,
                    company_name=opp.company_name,
                    level=opp.level,
                    status=opp.status,
                    preferred_major=opp.preferred_major,
                    total_applications=len(apps),
                    filled_slots=filled,
                    remaining_slots=max(0, opp.slots - filled),
                    total_slots=opp.slots,
                )
            )
        report = Report(generated_at=self.clock(), rows=rows)
        logger.info(f"Generated report with {report.total_opportunities} row(s)")
        return report
