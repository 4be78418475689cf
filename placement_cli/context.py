from datetime import datetime
from typing import Callable, Optional

from placement_cli.config import Settings
from placement_cli.services.applications import ApplicationService
from placement_cli.services.auth import AuthService
from placement_cli.services.notifications import NotificationService
from placement_cli.services.opportunities import OpportunityService
from placement_cli.services.reports import ReportService
from placement_cli.services.users import UserService
from placement_cli.store import DataStore


class AppContext:
    """The data store and every service wired over it, sharing one clock."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        clock: Callable[[], datetime] = datetime.now,
        store: Optional[DataStore] = None,
    ):
        self.settings = settings
        self.clock = clock
        self.store = store or DataStore(settings)

        max_pending = settings.max_pending_applications if settings else 3
        rounds = settings.bcrypt_rounds if settings else 12
        s = self.store

        self.auth = AuthService(s.users, bcrypt_rounds=rounds)
        self.users = UserService(
            s.users, s.registrations, bcrypt_rounds=rounds, clock=clock
        )
        self.opportunities = OpportunityService(s.opportunities, clock=clock)
        self.applications = ApplicationService(
            s.users,
            s.opportunities,
            s.applications,
            s.withdrawals,
            max_pending=max_pending,
            clock=clock,
        )
        self.notifications = NotificationService(
            s.users,
            s.opportunities,
            s.applications,
            s.withdrawals,
            s.registrations,
            clock=clock,
        )
        self.reports = ReportService(s.opportunities, s.applications, clock=clock)

    @classmethod
    def load(
        cls, settings: Settings, clock: Callable[[], datetime] = datetime.now
    ) -> "AppContext":
        context = cls(settings, clock)
        context.store.reload_all()
        return context
