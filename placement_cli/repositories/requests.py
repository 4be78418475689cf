from typing import List, Optional

from placement_cli.models import (
    NEVER,
    RegistrationRequest,
    RequestStatus,
    WithdrawalRequest,
)
from placement_cli.repositories.base import DelimitedFileRepository
from placement_cli.utils.delimited import (
    clean_text,
    format_datetime,
    format_enum,
    parse_datetime,
    parse_enum,
)
from placement_cli.utils.id_generator import REGISTRATION_PREFIX, WITHDRAWAL_PREFIX

WITHDRAWAL_HEADER = (
    "id",
    "applicationId",
    "studentId",
    "status",
    "requestedAt",
    "reason",
    "lastUpdated",
)
REGISTRATION_HEADER = ("id", "repId", "status", "requestedAt", "lastUpdated")


class WithdrawalRequestRepository(DelimitedFileRepository[WithdrawalRequest]):
    header = WITHDRAWAL_HEADER
    id_prefix = WITHDRAWAL_PREFIX
    entity_name = "withdrawal request"

    def find_by_student(self, student_id: str) -> List[WithdrawalRequest]:
        student_id = student_id.lower()
        return [r for r in self._items.values() if r.student_id.lower() == student_id]

    def find_by_application(self, application_id: str) -> List[WithdrawalRequest]:
        application_id = application_id.lower()
        return [
            r
            for r in self._items.values()
            if r.application_id.lower() == application_id
        ]

    def find_pending_withdrawals(self) -> List[WithdrawalRequest]:
        return [r for r in self._items.values() if r.status == RequestStatus.PENDING]

    def _to_row(self, r: WithdrawalRequest) -> List[str]:
        return [
            clean_text(r.id),
            clean_text(r.application_id),
            clean_text(r.student_id),
            format_enum(r.status),
            format_datetime(r.requested_at),
            clean_text(r.reason),
            format_datetime(r.last_updated),
        ]

    def _from_row(self, row: List[str]) -> Optional[WithdrawalRequest]:
        requested_at = parse_datetime(row[4], NEVER)
        return WithdrawalRequest(
            id=row[0],
            application_id=row[1],
            student_id=row[2],
            status=parse_enum(RequestStatus, row[3], RequestStatus.PENDING),
            requested_at=requested_at,
            reason=row[5],
            last_updated=parse_datetime(row[6], requested_at),
        )


class RegistrationRequestRepository(DelimitedFileRepository[RegistrationRequest]):
    header = REGISTRATION_HEADER
    id_prefix = REGISTRATION_PREFIX
    entity_name = "registration request"

    def find_pending_rep_registrations(self) -> List[RegistrationRequest]:
        return [r for r in self._items.values() if r.status == RequestStatus.PENDING]

    def find_by_rep(self, rep_id: str) -> List[RegistrationRequest]:
        rep_id = rep_id.lower()
        return [r for r in self._items.values() if r.rep_id.lower() == rep_id]

    def _to_row(self, r: RegistrationRequest) -> List[str]:
        return [
            clean_text(r.id),
            clean_text(r.rep_id),
            format_enum(r.status),
            format_datetime(r.requested_at),
            format_datetime(r.last_updated),
        ]

    def _from_row(self, row: List[str]) -> Optional[RegistrationRequest]:
        requested_at = parse_datetime(row[3], NEVER)
        return RegistrationRequest(
            id=row[0],
            rep_id=row[1],
            status=parse_enum(RequestStatus, row[2], RequestStatus.PENDING),
            requested_at=requested_at,
            last_updated=parse_datetime(row[4], requested_at),
        )
