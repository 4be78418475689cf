import bcrypt

from placement_cli import config

DEFAULT_PASSWORD = "password"


def hash_password(raw_password: str, rounds: int = config.BCRYPT_ROUNDS) -> str:
    """Hash a plaintext password; the salt is embedded in the returned digest."""
    return bcrypt.hashpw(raw_password.encode("utf-8"), bcrypt.gensalt(rounds)).decode(
        "utf-8"
    )


def verify_password(raw_password: str, digest: str) -> bool:
    if not digest:
        return False
    if not digest.startswith("$2"):
        # Rosters imported before hashing carry the plaintext default
        return raw_password == digest
    try:
        return bcrypt.checkpw(raw_password.encode("utf-8"), digest.encode("utf-8"))
    except ValueError:
        return False


def is_default_password(digest: str) -> bool:
    return verify_password(DEFAULT_PASSWORD, digest)
