from pathlib import Path
from typing import List, Optional

from placement_cli.errors import PersistenceError, ValidationError
from placement_cli.models import (
    NEVER,
    CareerCenterStaff,
    CompanyRepresentative,
    RequestStatus,
    Student,
    User,
)
from placement_cli.repositories.base import (
    DelimitedFileRepository,
    logger,
    persistence_logger,
)
from placement_cli.utils.delimited import (
    clean_text,
    format_bool,
    format_datetime,
    format_enum,
    parse_bool,
    parse_datetime,
    parse_enum,
    parse_int,
    read_rows,
    write_rows,
)
from placement_cli.utils.id_generator import IdGenerator

STUDENT_HEADER = (
    "id",
    "name",
    "major",
    "year",
    "passwordDigest",
    "visible",
    "lastNotificationCheck",
    "acceptedApplicationId",
)
STAFF_HEADER = (
    "id",
    "name",
    "department",
    "email",
    "passwordDigest",
    "lastNotificationCheck",
)
REP_HEADER = (
    "id",
    "name",
    "companyName",
    "department",
    "position",
    "status",
    "passwordDigest",
    "lastNotificationCheck",
)


class UserRepository(DelimitedFileRepository[User]):
    """Students, staff and representatives keyed by user id.

    Each role lives in its own file; saving a user rewrites only that role's file.
    """

    entity_name = "user"

    def __init__(
        self,
        students_path: Optional[Path] = None,
        staff_path: Optional[Path] = None,
        reps_path: Optional[Path] = None,
        id_generator: Optional[IdGenerator] = None,
    ):
        super().__init__(None, id_generator)
        self.students_path = Path(students_path) if students_path else None
        self.staff_path = Path(staff_path) if staff_path else None
        self.reps_path = Path(reps_path) if reps_path else None

    def _key(self, entity: User) -> str:
        return entity.user_id

    @property
    def is_bound(self) -> bool:
        return any((self.students_path, self.staff_path, self.reps_path))

    def save(self, entity: User) -> User:
        if entity is None:
            raise ValueError("Cannot save an empty user")
        key = self._lookup_key(entity.user_id)
        if key is not None:
            previous = self._items.pop(key)
            if type(previous) is not type(entity):
                self._persist_role(type(previous))
        self._items[entity.user_id] = entity
        self._persist_role(type(entity))
        return entity

    def delete(self, entity: User) -> bool:
        key = self._lookup_key(entity.user_id)
        if key is None:
            return False
        removed = self._items.pop(key)
        self._persist_role(type(removed))
        return True

    def persist(self) -> None:
        for role in (Student, CareerCenterStaff, CompanyRepresentative):
            self._persist_role(role)

    def find_all_students(self) -> List[Student]:
        return [u for u in self._items.values() if isinstance(u, Student)]

    def find_all_staff(self) -> List[CareerCenterStaff]:
        return [u for u in self._items.values() if isinstance(u, CareerCenterStaff)]

    def find_all_reps(self) -> List[CompanyRepresentative]:
        return [
            u for u in self._items.values() if isinstance(u, CompanyRepresentative)
        ]

    def find_pending_reps(self) -> List[CompanyRepresentative]:
        return [
            rep
            for rep in self.find_all_reps()
            if rep.approval_status == RequestStatus.PENDING
        ]

    def find_student(self, user_id: Optional[str]) -> Optional[Student]:
        user = self.find_by_id(user_id)
        return user if isinstance(user, Student) else None

    def find_rep(self, user_id: Optional[str]) -> Optional[CompanyRepresentative]:
        user = self.find_by_id(user_id)
        return user if isinstance(user, CompanyRepresentative) else None

    # Per-role files

    def _path_for(self, role: type) -> Optional[Path]:
        if role is Student:
            return self.students_path
        if role is CareerCenterStaff:
            return self.staff_path
        if role is CompanyRepresentative:
            return self.reps_path
        return None

    def _persist_role(self, role: type) -> None:
        path = self._path_for(role)
        if path is None:
            return
        if role is Student:
            header, to_row = STUDENT_HEADER, _student_row
        elif role is CareerCenterStaff:
            header, to_row = STAFF_HEADER, _staff_row
        else:
            header, to_row = REP_HEADER, _rep_row
        users = [u for u in self._items.values() if type(u) is role]
        try:
            write_rows(path, header, (to_row(u) for u in users))
        except PersistenceError as e:
            persistence_logger.error(e.message)

    def reload(self) -> None:
        if not self.is_bound:
            return
        loaded = {}
        sources = (
            (Student, self.students_path, STUDENT_HEADER, _student_from_row),
            (CareerCenterStaff, self.staff_path, STAFF_HEADER, _staff_from_row),
            (CompanyRepresentative, self.reps_path, REP_HEADER, _rep_from_row),
        )
        for role, path, header, from_row in sources:
            if path is None:
                # Unbound roles keep whatever is in memory
                for user in self._items.values():
                    if type(user) is role:
                        loaded[user.user_id] = user
                continue
            try:
                rows = read_rows(path, len(header))
            except PersistenceError as e:
                persistence_logger.error(e.message)
                continue
            for row in rows:
                if not row[0]:
                    continue
                try:
                    user = from_row(row)
                except ValidationError as e:
                    logger.warning(f"Skipping user {row[0]} in {path}: {e.message}")
                    continue
                loaded[user.user_id] = user
        self._items = loaded
        logger.debug(f"Loaded {len(loaded)} user(s)")


def _student_row(s: Student) -> List[str]:
    return [
        clean_text(s.user_id),
        clean_text(s.name),
        clean_text(s.major),
        str(s.year_of_study),
        s.password_digest,
        format_bool(s.visible),
        format_datetime(s.last_notification_check),
        clean_text(s.accepted_application_id),
    ]


def _student_from_row(row: List[str]) -> Student:
    return Student(
        user_id=row[0],
        name=row[1],
        major=row[2],
        year_of_study=parse_int(row[3], 1),
        password_digest=row[4],
        visible=parse_bool(row[5]),
        last_notification_check=parse_datetime(row[6], NEVER),
        accepted_application_id=row[7] or None,
    )


def _staff_row(s: CareerCenterStaff) -> List[str]:
    return [
        clean_text(s.user_id),
        clean_text(s.name),
        clean_text(s.department),
        clean_text(s.email),
        s.password_digest,
        format_datetime(s.last_notification_check),
    ]


def _staff_from_row(row: List[str]) -> CareerCenterStaff:
    return CareerCenterStaff(
        user_id=row[0],
        name=row[1],
        department=row[2],
        email=row[3],
        password_digest=row[4],
        last_notification_check=parse_datetime(row[5], NEVER),
    )


def _rep_row(r: CompanyRepresentative) -> List[str]:
    return [
        clean_text(r.user_id),
        clean_text(r.name),
        clean_text(r.company_name),
        clean_text(r.department),
        clean_text(r.position),
        format_enum(r.approval_status),
        r.password_digest,
        format_datetime(r.last_notification_check),
    ]


def _rep_from_row(row: List[str]) -> CompanyRepresentative:
    return CompanyRepresentative(
        user_id=row[0],
        name=row[1],
        company_name=row[2],
        department=row[3],
        position=row[4],
        approval_status=parse_enum(RequestStatus, row[5], RequestStatus.PENDING),
        password_digest=row[6],
        last_notification_check=parse_datetime(row[7], NEVER),
    )
