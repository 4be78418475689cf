from typing import List, Optional

from placement_cli.models import (
    NEVER,
    CompanyRepresentative,
    InternshipLevel,
    InternshipOpportunity,
    OpportunityStatus,
    ReportFilter,
)
from placement_cli.repositories.base import DelimitedFileRepository
from placement_cli.utils.delimited import (
    clean_text,
    format_bool,
    format_date,
    format_datetime,
    format_enum,
    parse_bool,
    parse_date,
    parse_datetime,
    parse_enum,
    parse_int,
)
from placement_cli.utils.id_generator import OPPORTUNITY_PREFIX

HEADER = (
    "id",
    "title",
    "description",
    "level",
    "preferredMajor",
    "openDate",
    "closeDate",
    "status",
    "companyName",
    "repEmail",
    "slots",
    "visible",
    "lastUpdated",
)


class OpportunityRepository(DelimitedFileRepository[InternshipOpportunity]):
    header = HEADER
    id_prefix = OPPORTUNITY_PREFIX
    entity_name = "opportunity"

    def find_by_company(self, company: Optional[str]) -> List[InternshipOpportunity]:
        if not company or not company.strip():
            return []
        company = company.strip().lower()
        return [o for o in self._items.values() if o.company_name.lower() == company]

    def find_by_representative(
        self, rep: Optional[CompanyRepresentative]
    ) -> List[InternshipOpportunity]:
        if rep is None:
            return []
        rep_id = rep.user_id.lower()
        return [
            o
            for o in self._items.values()
            if o.owner_id is not None and o.owner_id.lower() == rep_id
        ]

    def find_by_status(self, status: OpportunityStatus) -> List[InternshipOpportunity]:
        return [o for o in self._items.values() if o.status == status]

    def find_approved_visible_by_filter(
        self, report_filter: Optional[ReportFilter] = None
    ) -> List[InternshipOpportunity]:
        """Published opportunities matching every set field of the report filter."""
        return [
            o
            for o in self._items.values()
            if o.is_published and _matches_report_filter(o, report_filter)
        ]

    def _to_row(self, o: InternshipOpportunity) -> List[str]:
        return [
            clean_text(o.id),
            clean_text(o.title),
            clean_text(o.description),
            format_enum(o.level),
            clean_text(o.preferred_major),
            format_date(o.open_date),
            format_date(o.close_date),
            format_enum(o.status),
            clean_text(o.company_name),
            clean_text(o.owner_id),
            str(o.slots),
            format_bool(o.visible),
            format_datetime(o.last_updated),
        ]

    def _from_row(self, row: List[str]) -> Optional[InternshipOpportunity]:
        return InternshipOpportunity(
            id=row[0],
            title=row[1],
            description=row[2],
            level=parse_enum(InternshipLevel, row[3], InternshipLevel.BASIC),
            preferred_major=row[4] or None,
            open_date=parse_date(row[5]),
            close_date=parse_date(row[6]),
            status=parse_enum(OpportunityStatus, row[7], OpportunityStatus.PENDING),
            company_name=row[8],
            owner_id=row[9] or None,
            slots=max(0, parse_int(row[10], 0)),
            visible=parse_bool(row[11]),
            last_updated=parse_datetime(row[12], NEVER),
        )


def _matches_report_filter(
    o: InternshipOpportunity, f: Optional[ReportFilter]
) -> bool:
    if f is None:
        return True
    if f.status is not None and o.status != f.status:
        return False
    if f.preferred_major and f.preferred_major.strip():
        if not o.preferred_major or (
            o.preferred_major.lower() != f.preferred_major.strip().lower()
        ):
            return False
    if f.level is not None and o.level != f.level:
        return False
    if f.company and f.company.strip():
        if o.company_name.lower() != f.company.strip().lower():
            return False
    if f.open_date_from is not None:
        if o.open_date is None or o.open_date < f.open_date_from:
            return False
    if f.close_date_by is not None:
        if o.close_date is None or o.close_date > f.close_date_by:
            return False
    return True
