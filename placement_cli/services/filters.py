"""Eligibility rules, browsing filters and sort orders for opportunities."""

from datetime import date
from typing import Iterable, List, Optional

from placement_cli.models import (
    InternshipLevel,
    InternshipOpportunity,
    OpportunityFilter,
    OpportunityStatus,
    SortKey,
    Student,
)


def is_eligible(student: Student, opp: InternshipOpportunity) -> bool:
    """Year 3 and 4 students may take any level; years 1 and 2 only BASIC."""
    if student.year_of_study >= 3:
        return True
    return opp.level == InternshipLevel.BASIC


def is_open_for(student: Student, opp: InternshipOpportunity, today: date) -> bool:
    return opp.is_published and opp.is_open_on(today) and is_eligible(student, opp)


def matches_filter(opp: InternshipOpportunity, f: Optional[OpportunityFilter]) -> bool:
    if f is None:
        return True
    if f.status is not None and opp.status != f.status:
        return False
    if f.preferred_major is not None:
        if opp.preferred_major is None:
            return False
        if opp.preferred_major.strip().lower() != f.preferred_major.strip().lower():
            return False
    if f.level is not None and opp.level != f.level:
        return False
    if f.closing_on_or_before is not None:
        if opp.close_date is None or opp.close_date > f.closing_on_or_before:
            return False
    return True


def _sort_value(opp: InternshipOpportunity, key: SortKey):
    if key == SortKey.CLOSING_DATE_ASC:
        return opp.close_date
    if key == SortKey.COMPANY_ASC:
        return opp.company_name.lower() if opp.company_name else None
    if key == SortKey.LEVEL_ASC:
        return opp.level.rank if opp.level is not None else None
    return opp.title.lower() if opp.title else None


def sort_opportunities(
    opportunities: Iterable[InternshipOpportunity],
    key: Optional[SortKey] = SortKey.TITLE_ASC,
) -> List[InternshipOpportunity]:
    """Stable sort; opportunities missing the sort field go last."""
    key = key or SortKey.TITLE_ASC

    def sort_key(opp: InternshipOpportunity):
        value = _sort_value(opp, key)
        return (value is None, value if value is not None else 0)

    return sorted(opportunities, key=sort_key)


def visible_for(
    student: Student,
    opportunities: Iterable[InternshipOpportunity],
    f: Optional[OpportunityFilter],
    today: date,
) -> List[InternshipOpportunity]:
    """Opportunities a student can browse today, filtered and sorted."""
    selected = [
        o
        for o in opportunities
        if o.status == OpportunityStatus.APPROVED
        and is_open_for(student, o, today)
        and matches_filter(o, f)
    ]
    return sort_opportunities(selected, f.sort_key if f else SortKey.TITLE_ASC)


def filter_and_sort(
    opportunities: Iterable[InternshipOpportunity],
    f: Optional[OpportunityFilter],
) -> List[InternshipOpportunity]:
    selected = [o for o in opportunities if matches_filter(o, f)]
    return sort_opportunities(selected, f.sort_key if f else SortKey.TITLE_ASC)
