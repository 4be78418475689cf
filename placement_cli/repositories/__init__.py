from placement_cli.repositories.applications import ApplicationRepository
from placement_cli.repositories.base import DelimitedFileRepository
from placement_cli.repositories.opportunities import OpportunityRepository
from placement_cli.repositories.requests import (
    RegistrationRequestRepository,
    WithdrawalRequestRepository,
)
from placement_cli.repositories.users import UserRepository

__all__ = [
    "ApplicationRepository",
    "DelimitedFileRepository",
    "OpportunityRepository",
    "RegistrationRequestRepository",
    "UserRepository",
    "WithdrawalRequestRepository",
]
