from typing import cast

from passlib.context import CryptContext

# Hashes below the minimum work factor are upgraded on the next successful login.
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto", pbkdf2_sha256__min_rounds=29000)


def hash_password(password: str) -> str:
    return cast(str, pwd_context.hash(password))


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return cast(bool, pwd_context.verify(plain_password, hashed_password))


def password_needs_rehash(hashed_password: str) -> bool:
    return cast(bool, pwd_context.needs_update(hashed_password))
