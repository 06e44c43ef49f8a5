"""Password hashing for actor accounts (Argon2 through pwdlib)."""

from pwdlib import PasswordHash

password_hash = PasswordHash.recommended()


def hash_password(password: str) -> str:
    return password_hash.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return password_hash.verify(plain_password, hashed_password)


def verify_and_rehash(plain_password: str, hashed_password: str) -> tuple[bool, str | None]:
    """Verify a password and return a fresh hash when the stored one is outdated.

    Returns (valid, new_hash); new_hash is None when no upgrade is needed.
    """
    return password_hash.verify_and_update(plain_password, hashed_password)
