from dataclasses import dataclass

from placement_cli import config
from placement_cli.errors import NotFoundError, PreconditionError, ValidationError
from placement_cli.models import CompanyRepresentative, User
from placement_cli.repositories import UserRepository
from placement_cli.utils.logging_config import get_logger
from placement_cli.utils.passwords import (
    DEFAULT_PASSWORD,
    hash_password,
    is_default_password,
    verify_password,
)
from placement_cli.utils.validators import is_not_blank

logger = get_logger(__name__)


@dataclass
class LoginResult:
    user: User
    must_change_password: bool = False


def must_change_password(user: User) -> bool:
    """Students and staff still on the provisioned default password."""
    if isinstance(user, CompanyRepresentative):
        return False
    return is_default_password(user.password_digest)


class AuthService:
    def __init__(
        self, users: UserRepository, bcrypt_rounds: int = config.BCRYPT_ROUNDS
    ):
        self.users = users
        self.bcrypt_rounds = bcrypt_rounds

    def login(self, user_id: str, password: str) -> LoginResult:
        user = self.users.find_by_id((user_id or "").strip())
        if user is None:
            raise NotFoundError(f"No user found with ID: {user_id}")
        if not verify_password(password or "", user.password_digest):
            logger.warning(f"Failed login for {user.user_id}")
            raise ValidationError("Invalid credentials")
        if isinstance(user, CompanyRepresentative) and not user.is_approved:
            raise PreconditionError(
                f"Account {user.user_id} is {user.approval_status.value.lower()}; "
                "wait for career center approval"
            )
        user.logged_in = True
        logger.info(f"{user.role.value} {user.user_id} logged in")
        return LoginResult(user, must_change_password(user))

    def logout(self, user: User) -> None:
        user.logged_in = False

    def change_password(self, user: User, old_password: str, new_password: str) -> User:
        if not verify_password(old_password or "", user.password_digest):
            raise ValidationError("Current password is incorrect")
        if not is_not_blank(new_password):
            raise ValidationError("New password cannot be blank")
        if new_password == DEFAULT_PASSWORD:
            raise ValidationError("New password cannot be the default password")
        user.password_digest = hash_password(new_password, self.bcrypt_rounds)
        self.users.save(user)
        logger.info(f"Password changed for {user.user_id}")
        return user
