"""Password hashing for the credential store (Argon2 via pwdlib)."""

from __future__ import annotations

from functools import lru_cache

from pwdlib import PasswordHash


@lru_cache(maxsize=1)
def _hasher() -> PasswordHash:
    return PasswordHash.recommended()


def hash_password(password: str) -> str:
    return _hasher().hash(password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    return _hasher().verify(plain_password, password_hash)
