from typing import List, Optional

from placement_cli.models import NEVER, Application, ApplicationStatus
from placement_cli.repositories.base import DelimitedFileRepository
from placement_cli.utils.delimited import (
    clean_text,
    format_bool,
    format_datetime,
    format_enum,
    parse_bool,
    parse_datetime,
    parse_enum,
)
from placement_cli.utils.id_generator import APPLICATION_PREFIX

HEADER = (
    "id",
    "studentId",
    "opportunityId",
    "status",
    "appliedAt",
    "withdrawalRequested",
    "lastUpdated",
)


class ApplicationRepository(DelimitedFileRepository[Application]):
    header = HEADER
    id_prefix = APPLICATION_PREFIX
    entity_name = "application"

    def find_by_student(self, student_id: str) -> List[Application]:
        student_id = student_id.lower()
        return [a for a in self._items.values() if a.student_id.lower() == student_id]

    def find_by_opportunity(self, opportunity_id: str) -> List[Application]:
        opportunity_id = opportunity_id.lower()
        return [
            a
            for a in self._items.values()
            if a.opportunity_id.lower() == opportunity_id
        ]

    def count_successful_by_opportunity(self, opportunity_id: str) -> int:
        return sum(
            1
            for a in self.find_by_opportunity(opportunity_id)
            if a.status == ApplicationStatus.SUCCESSFUL
        )

    def find_accepted_by_student(self, student_id: str) -> Optional[Application]:
        for app in self.find_by_student(student_id):
            if app.status == ApplicationStatus.ACCEPTED:
                return app
        return None

    def _to_row(self, a: Application) -> List[str]:
        return [
            clean_text(a.id),
            clean_text(a.student_id),
            clean_text(a.opportunity_id),
            format_enum(a.status),
            format_datetime(a.applied_at),
            format_bool(a.withdrawal_requested),
            format_datetime(a.last_updated),
        ]

    def _from_row(self, row: List[str]) -> Optional[Application]:
        applied_at = parse_datetime(row[4], NEVER)
        return Application(
            id=row[0],
            student_id=row[1],
            opportunity_id=row[2],
            status=parse_enum(ApplicationStatus, row[3], ApplicationStatus.PENDING),
            applied_at=applied_at,
            withdrawal_requested=parse_bool(row[5]),
            last_updated=parse_datetime(row[6], applied_at),
        )
