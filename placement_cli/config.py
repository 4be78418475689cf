import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

DATA_DIR = os.getenv("IPMS_DATA_DIR", "data")
EXPORT_DIR = os.getenv("IPMS_EXPORT_DIR", "exports")
MAX_PENDING_APPLICATIONS = int(os.getenv("IPMS_MAX_PENDING_APPLICATIONS", "3"))
BCRYPT_ROUNDS = int(os.getenv("IPMS_BCRYPT_ROUNDS", "12"))

STUDENTS_FILE = "students.csv"
STAFF_FILE = "staff.csv"
REPS_FILE = "reps.csv"
OPPORTUNITIES_FILE = "opportunities.csv"
APPLICATIONS_FILE = "applications.csv"
WITHDRAWALS_FILE = "withdrawals.csv"
REGISTRATIONS_FILE = "registrations.csv"


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    export_dir: Path
    max_pending_applications: int = 3
    bcrypt_rounds: int = 12

    @property
    def students_path(self) -> Path:
        return self.data_dir / STUDENTS_FILE

    @property
    def staff_path(self) -> Path:
        return self.data_dir / STAFF_FILE

    @property
    def reps_path(self) -> Path:
        return self.data_dir / REPS_FILE

    @property
    def opportunities_path(self) -> Path:
        return self.data_dir / OPPORTUNITIES_FILE

    @property
    def applications_path(self) -> Path:
        return self.data_dir / APPLICATIONS_FILE

    @property
    def withdrawals_path(self) -> Path:
        return self.data_dir / WITHDRAWALS_FILE

    @property
    def registrations_path(self) -> Path:
        return self.data_dir / REGISTRATIONS_FILE


def get_settings(data_dir: Optional[str] = None) -> Settings:
    """Resolve settings from the environment, optionally overriding the data directory."""
    settings = Settings(
        data_dir=Path(DATA_DIR),
        export_dir=Path(EXPORT_DIR),
        max_pending_applications=MAX_PENDING_APPLICATIONS,
        bcrypt_rounds=BCRYPT_ROUNDS,
    )
    if data_dir:
        settings = replace(settings, data_dir=Path(data_dir))
    return settings
