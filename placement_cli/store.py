from typing import Optional

from placement_cli.config import Settings
from placement_cli.models import ApplicationStatus
from placement_cli.repositories import (
    ApplicationRepository,
    OpportunityRepository,
    RegistrationRequestRepository,
    UserRepository,
    WithdrawalRequestRepository,
)
from placement_cli.utils.id_generator import IdGenerator
from placement_cli.utils.logging_config import get_logger

logger = get_logger(__name__)


class DataStore:
    """All repositories sharing one id generator.

    Built unbound (pure memory) when no settings are given, otherwise each
    repository is bound to its file under ``settings.data_dir``.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings
        self.id_generator = IdGenerator()
        if settings is None:
            self.users = UserRepository(id_generator=self.id_generator)
            self.opportunities = OpportunityRepository(id_generator=self.id_generator)
            self.applications = ApplicationRepository(id_generator=self.id_generator)
            self.withdrawals = WithdrawalRequestRepository(
                id_generator=self.id_generator
            )
            self.registrations = RegistrationRequestRepository(
                id_generator=self.id_generator
            )
            return

        self.users = UserRepository(
            settings.students_path,
            settings.staff_path,
            settings.reps_path,
            self.id_generator,
        )
        self.opportunities = OpportunityRepository(
            settings.opportunities_path, self.id_generator
        )
        self.applications = ApplicationRepository(
            settings.applications_path, self.id_generator
        )
        self.withdrawals = WithdrawalRequestRepository(
            settings.withdrawals_path, self.id_generator
        )
        self.registrations = RegistrationRequestRepository(
            settings.registrations_path, self.id_generator
        )

    def reload_all(self) -> None:
        """Reload every file, then re-link accepted placements to their students."""
        self.users.reload()
        self.opportunities.reload()
        self.applications.reload()
        self.withdrawals.reload()
        self.registrations.reload()
        self._relink_accepted_placements()

    def _relink_accepted_placements(self) -> None:
        for student in self.users.find_all_students():
            accepted = self.applications.find_accepted_by_student(student.user_id)
            student.accepted_application_id = accepted.id if accepted else None
        missing = [
            a.id
            for a in self.applications.find_all()
            if a.status == ApplicationStatus.ACCEPTED
            and self.users.find_student(a.student_id) is None
        ]
        if missing:
            logger.warning(
                f"Accepted application(s) {', '.join(missing)} reference unknown students"
            )
