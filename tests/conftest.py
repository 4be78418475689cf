from datetime import date, datetime, timedelta
from pathlib import Path

import pytest

from placement_cli.config import Settings
from placement_cli.context import AppContext
from placement_cli.models import (
    CareerCenterStaff,
    CompanyRepresentative,
    InternshipLevel,
    InternshipOpportunity,
    OpportunityStatus,
    RequestStatus,
    Student,
)
from placement_cli.store import DataStore
from placement_cli.utils.passwords import hash_password

TODAY = date(2025, 3, 10)
PASSWORD = "s3cret!"


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture(scope="session")
def password_digest() -> str:
    """One low-cost digest shared by every fixture user."""
    return hash_password(PASSWORD, rounds=4)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2025, 3, 10, 9, 0, 0))


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        data_dir=tmp_path / "data",
        export_dir=tmp_path / "exports",
        max_pending_applications=3,
        bcrypt_rounds=4,
    )


@pytest.fixture
def app(settings: Settings, clock: FakeClock) -> AppContext:
    """Services over an in-memory store."""
    return AppContext(settings, clock, store=DataStore())


@pytest.fixture
def bound_app(settings: Settings, clock: FakeClock) -> AppContext:
    """Services over a store bound to files under tmp_path."""
    return AppContext(settings, clock)


@pytest.fixture
def store(app: AppContext) -> DataStore:
    return app.store


@pytest.fixture
def make_student(store: DataStore, password_digest: str):
    def _make(user_id: str = "U2310001A", year: int = 3, major: str = "CSC", **kwargs):
        student = Student(
            user_id=user_id,
            name=kwargs.pop("name", f"Student {user_id}"),
            password_digest=kwargs.pop("password_digest", password_digest),
            year_of_study=year,
            major=major,
            visible=kwargs.pop("visible", True),
            **kwargs,
        )
        return store.users.save(student)

    return _make


@pytest.fixture
def student(make_student) -> Student:
    return make_student("U2310001A", year=3)


@pytest.fixture
def junior(make_student) -> Student:
    return make_student("U2410002B", year=1)


@pytest.fixture
def staff(store: DataStore, password_digest: str) -> CareerCenterStaff:
    return store.users.save(
        CareerCenterStaff(
            user_id="sng001@ntu.edu.sg",
            name="Ng Siew Ling",
            password_digest=password_digest,
            department="CCDS",
            email="sng001@ntu.edu.sg",
        )
    )


@pytest.fixture
def make_rep(store: DataStore, password_digest: str):
    def _make(
        email: str = "hr@acme.com",
        company: str = "Acme Corp",
        status: RequestStatus = RequestStatus.APPROVED,
    ):
        return store.users.save(
            CompanyRepresentative(
                user_id=email,
                name=f"Rep {email}",
                password_digest=password_digest,
                company_name=company,
                department="HR",
                position="Recruiter",
                approval_status=status,
            )
        )

    return _make


@pytest.fixture
def rep(make_rep) -> CompanyRepresentative:
    return make_rep()


@pytest.fixture
def make_opportunity(store: DataStore, clock: FakeClock):
    """Persist a published opportunity owned by ``owner``, open around today."""

    def _make(owner: CompanyRepresentative, **overrides):
        fields = dict(
            id=store.opportunities.next_id(),
            title="Software Engineering Intern",
            description="Backend services",
            level=InternshipLevel.BASIC,
            preferred_major="CSC",
            open_date=TODAY - timedelta(days=5),
            close_date=TODAY + timedelta(days=20),
            status=OpportunityStatus.APPROVED,
            company_name=owner.company_name,
            owner_id=owner.user_id,
            slots=2,
            visible=True,
            last_updated=clock() - timedelta(days=5),
        )
        fields.update(overrides)
        return store.opportunities.save(InternshipOpportunity(**fields))

    return _make


@pytest.fixture
def opportunity(make_opportunity, rep) -> InternshipOpportunity:
    return make_opportunity(rep)
