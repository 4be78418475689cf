"""Company representative registration and roster imports."""

from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List

from placement_cli import config
from placement_cli.errors import NotFoundError, PreconditionError, ValidationError
from placement_cli.models import (
    CareerCenterStaff,
    CompanyRepresentative,
    RegistrationRequest,
    RequestStatus,
    Student,
)
from placement_cli.repositories import RegistrationRequestRepository, UserRepository
from placement_cli.utils.delimited import parse_enum, parse_int, read_records
from placement_cli.utils.logging_config import get_logger
from placement_cli.utils.passwords import DEFAULT_PASSWORD, hash_password
from placement_cli.utils.validators import (
    is_not_blank,
    is_valid_company_email,
    is_valid_staff_email,
    is_valid_student_id,
)

logger = get_logger(__name__)


def _first(record: Dict[str, str], *keys: str) -> str:
    for key in keys:
        value = record.get(key, "").strip()
        if value:
            return value
    return ""


class UserService:
    def __init__(
        self,
        users: UserRepository,
        registrations: RegistrationRequestRepository,
        bcrypt_rounds: int = config.BCRYPT_ROUNDS,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.users = users
        self.registrations = registrations
        self.bcrypt_rounds = bcrypt_rounds
        self.clock = clock

    # Registration workflow

    def register_company_rep(
        self,
        email: str,
        name: str,
        password: str,
        company_name: str,
        department: str = "",
        position: str = "",
    ) -> RegistrationRequest:
        """Create a PENDING representative and the registration request staff review."""
        email = (email or "").strip()
        if not is_valid_company_email(email):
            raise ValidationError(f"Invalid company email: {email}")
        if not is_not_blank(name):
            raise ValidationError("Name is required")
        if not is_not_blank(company_name):
            raise ValidationError("Company name is required")
        if not is_not_blank(password):
            raise ValidationError("Password is required")
        if self.users.find_by_id(email) is not None:
            raise ValidationError(f"An account for {email} already exists")

        rep = CompanyRepresentative(
            user_id=email,
            name=name.strip(),
            password_digest=hash_password(password, self.bcrypt_rounds),
            company_name=company_name.strip(),
            department=(department or "").strip(),
            position=(position or "").strip(),
            approval_status=RequestStatus.PENDING,
        )
        self.users.save(rep)
        return self._open_registration(rep)

    def _open_registration(self, rep: CompanyRepresentative) -> RegistrationRequest:
        now = self.clock()
        request = RegistrationRequest(
            id=self.registrations.next_id(),
            rep_id=rep.user_id,
            status=RequestStatus.PENDING,
            requested_at=now,
            last_updated=now,
        )
        self.registrations.save(request)
        logger.info(f"Registration {request.id} opened for {rep.user_id}")
        return request

    def approve_registration(
        self, staff: CareerCenterStaff, request: RegistrationRequest
    ) -> CompanyRepresentative:
        return self._decide(staff, request, RequestStatus.APPROVED)

    def reject_registration(
        self, staff: CareerCenterStaff, request: RegistrationRequest
    ) -> CompanyRepresentative:
        return self._decide(staff, request, RequestStatus.REJECTED)

    def _decide(
        self,
        staff: CareerCenterStaff,
        request: RegistrationRequest,
        outcome: RequestStatus,
    ) -> CompanyRepresentative:
        if not isinstance(staff, CareerCenterStaff):
            raise PreconditionError("Only career center staff can review registrations")
        if request.status != RequestStatus.PENDING:
            raise PreconditionError(
                f"Registration {request.id} is already {request.status.value}"
            )
        rep = self.users.find_rep(request.rep_id)
        if rep is None:
            raise NotFoundError(f"Representative {request.rep_id} not found")

        now = self.clock()
        rep.approval_status = outcome
        self.users.save(rep)
        request.status = outcome
        request.last_updated = now
        self.registrations.save(request)
        logger.info(
            f"Staff {staff.user_id} set registration {request.id} to {outcome.value}"
        )
        return rep

    def find_registration(self, key: str) -> RegistrationRequest:
        """Look a registration up by request id, or by representative email."""
        request = self.registrations.find_by_id(key)
        if request is not None:
            return request
        pending = [
            r
            for r in self.registrations.find_by_rep(key)
            if r.status == RequestStatus.PENDING
        ]
        if pending:
            return pending[0]
        raise NotFoundError(f"Registration {key} not found")

    def list_pending_registrations(self) -> List[RegistrationRequest]:
        return sorted(
            self.registrations.find_pending_rep_registrations(),
            key=lambda r: r.requested_at,
        )

    # Roster imports

    def import_students(self, path: Path) -> List[Student]:
        imported = []
        digest = hash_password(DEFAULT_PASSWORD, self.bcrypt_rounds)
        for record in read_records(Path(path)):
            student_id = _first(record, "studentid", "id", "userid")
            if not is_valid_student_id(student_id):
                logger.warning(f"Skipping student row with invalid id: {student_id!r}")
                continue
            if self.users.find_by_id(student_id) is not None:
                logger.info(f"Student {student_id} already exists, skipping")
                continue
            try:
                student = Student(
                    user_id=student_id,
                    name=_first(record, "name"),
                    password_digest=digest,
                    year_of_study=parse_int(_first(record, "year", "yearofstudy"), 1),
                    major=_first(record, "major"),
                )
            except ValidationError as e:
                logger.warning(f"Skipping student {student_id}: {e.message}")
                continue
            self.users.save(student)
            imported.append(student)
        logger.info(f"Imported {len(imported)} student(s) from {path}")
        return imported

    def import_staff(self, path: Path) -> List[CareerCenterStaff]:
        imported = []
        digest = hash_password(DEFAULT_PASSWORD, self.bcrypt_rounds)
        for record in read_records(Path(path)):
            email = _first(record, "email")
            if not is_valid_staff_email(email):
                logger.warning(f"Skipping staff row with invalid email: {email!r}")
                continue
            if self.users.find_by_id(email) is not None:
                logger.info(f"Staff {email} already exists, skipping")
                continue
            staff = CareerCenterStaff(
                user_id=email,
                name=_first(record, "name"),
                password_digest=digest,
                department=_first(record, "department"),
                email=email,
            )
            self.users.save(staff)
            imported.append(staff)
        logger.info(f"Imported {len(imported)} staff from {path}")
        return imported

    def import_reps(self, path: Path) -> List[CompanyRepresentative]:
        """Import representatives; those without a status get a PENDING registration."""
        imported = []
        for record in read_records(Path(path)):
            email = _first(record, "email", "companyrepid")
            if not is_valid_company_email(email):
                logger.warning(f"Skipping rep row with invalid email: {email!r}")
                continue
            if self.users.find_by_id(email) is not None:
                logger.info(f"Representative {email} already exists, skipping")
                continue
            raw_status = _first(record, "status")
            password = _first(record, "password") or DEFAULT_PASSWORD
            rep = CompanyRepresentative(
                user_id=email,
                name=_first(record, "name"),
                password_digest=hash_password(password, self.bcrypt_rounds),
                company_name=_first(record, "companyname"),
                department=_first(record, "department"),
                position=_first(record, "position"),
                approval_status=parse_enum(
                    RequestStatus, raw_status, RequestStatus.PENDING
                ),
            )
            self.users.save(rep)
            if rep.approval_status == RequestStatus.PENDING:
                self._open_registration(rep)
            imported.append(rep)
        logger.info(f"Imported {len(imported)} representative(s) from {path}")
        return imported
