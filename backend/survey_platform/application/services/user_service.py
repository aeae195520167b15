from collections.abc import Mapping
from typing import Any

from survey_platform.application.errors import ConflictError, database_errors
from survey_platform.application.services.security_service import hash_password, password_needs_rehash, verify_password
from survey_platform.domain.roles import UserRole
from survey_platform.infrastructure.db.datastore import DataStore, Query, Row
from survey_platform.infrastructure.logging import get_logger
from survey_platform.interfaces.web.schemas.auth import LoginForm, RegistrationForm

logger = get_logger(__name__)


def get_user_by_id(store: DataStore, user_id: int) -> Row | None:
    with database_errors("load user"):
        return store.select_one(
            Query("SELECT id, name, email, role, created_at FROM users WHERE id = :id", {"id": user_id})
        )


def get_user_by_email(store: DataStore, email: str) -> Row | None:
    with database_errors("load user by email"):
        return store.select_one(Query("SELECT * FROM users WHERE email = :email", {"email": email}))


def register_user(store: DataStore, payload: RegistrationForm, role: UserRole = UserRole.user) -> int:
    if get_user_by_email(store, payload.email) is not None:
        raise ConflictError(
            f"Registration rejected, email already in use: {payload.email}",
            "An account with this email already exists",
        )
    with database_errors("register user"):
        user_id = store.insert(
            Query(
                "INSERT INTO users (name, email, password, role) VALUES (:name, :email, :password, :role)",
                {
                    "name": payload.name,
                    "email": payload.email,
                    "password": hash_password(payload.password),
                    "role": role.value,
                },
            )
        )
    logger.info("user_registered", user_id=user_id)
    return user_id


def authenticate_user(store: DataStore, payload: LoginForm) -> Row | None:
    user = get_user_by_email(store, payload.email)
    if user is None:
        return None
    if not verify_password(payload.password, user["password"]):
        return None
    if password_needs_rehash(user["password"]):
        with database_errors("rehash password"):
            store.execute(
                Query(
                    "UPDATE users SET password = :password WHERE id = :id",
                    {"password": hash_password(payload.password), "id": user["id"]},
                )
            )
        logger.info("password_rehashed", user_id=user["id"])
    return user


def is_admin(user: Mapping[str, Any] | None) -> bool:
    return user is not None and user["role"] == UserRole.admin.value
