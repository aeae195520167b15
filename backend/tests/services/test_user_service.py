import pytest

from survey_platform.application.errors import ConflictError
from survey_platform.application.services.security_service import verify_password
from survey_platform.application.services.user_service import (
    authenticate_user,
    get_user_by_email,
    is_admin,
    register_user,
)
from survey_platform.domain.roles import UserRole
from survey_platform.interfaces.web.schemas.auth import LoginForm, RegistrationForm


def registration(email: str = "ada@example.com") -> RegistrationForm:
    return RegistrationForm(name="Ada", email=email, password="secret1", confirm_password="secret1")


def test_register_user_hashes_password(datastore):
    """
    Validate user registration storage.

    1. Register a user.
    2. Validate the stored password is a hash of the given password.
    3. Validate the default role is user.
    """
    register_user(datastore, registration())
    user = get_user_by_email(datastore, "ada@example.com")
    assert user["password"] != "secret1"
    assert verify_password("secret1", user["password"])
    assert user["role"] == UserRole.user.value
    assert is_admin(user) is False


def test_register_user_rejects_duplicate_email(datastore):
    register_user(datastore, registration())
    with pytest.raises(ConflictError) as exc_info:
        register_user(datastore, registration("ADA@example.com"))
    assert exc_info.value.user_message == "An account with this email already exists"


def test_authenticate_user_checks_password(datastore):
    """
    Validate credential checks.

    1. Register a user.
    2. Validate correct credentials return the user.
    3. Validate wrong password and unknown email return None.
    """
    user_id = register_user(datastore, registration(), role=UserRole.admin)
    user = authenticate_user(datastore, LoginForm(email=" Ada@Example.com ", password="secret1"))
    assert user["id"] == user_id
    assert is_admin(user) is True
    assert authenticate_user(datastore, LoginForm(email="ada@example.com", password="wrong")) is None
    assert authenticate_user(datastore, LoginForm(email="nobody@example.com", password="secret1")) is None
