from survey_platform.application.services.user_service import get_user_by_email
from survey_platform.domain.roles import UserRole
from tests.helpers.auth import login
from tests.helpers.factories import create_user


def test_register_logs_user_in(client, datastore):
    """
    Validate registration through the HTML form.

    1. Post a valid registration form.
    2. Validate redirect to the survey list with a welcome flash.
    3. Validate the user exists and the navigation shows the name.
    """
    response = client.post(
        "/register",
        data={"name": "Ada", "email": "ada@example.com", "password": "secret1", "confirm_password": "secret1"},
        follow_redirects=False,
    )
    assert response.status_code == 303
    assert response.headers["location"] == "/surveys"
    assert get_user_by_email(datastore, "ada@example.com") is not None

    page = client.get("/surveys")
    assert "Registration complete" in page.text
    assert "Hello, Ada!" in page.text


def test_register_rerenders_form_with_errors(client, datastore):
    """
    Validate registration form errors.

    1. Post mismatching passwords.
    2. Validate the form is shown again with the message and the entered name.
    3. Post an email that is already registered and validate the conflict message.
    """
    mismatch = client.post(
        "/register",
        data={"name": "Ada", "email": "ada@example.com", "password": "secret1", "confirm_password": "other12"},
    )
    assert mismatch.status_code == 422
    assert "Passwords do not match" in mismatch.text
    assert 'value="Ada"' in mismatch.text

    create_user(datastore, "taken@example.com")
    taken = client.post(
        "/register",
        data={"name": "Bob", "email": "taken@example.com", "password": "secret1", "confirm_password": "secret1"},
    )
    assert taken.status_code == 409
    assert "An account with this email already exists" in taken.text


def test_login_and_logout(client, datastore):
    """
    Validate the session lifecycle.

    1. Try wrong credentials and validate the form error.
    2. Log in with valid credentials.
    3. Log out and validate protected pages ask for login again.
    """
    create_user(datastore, "grace@example.com", name="Grace")

    wrong = client.post("/login", data={"email": "grace@example.com", "password": "nope"})
    assert wrong.status_code == 401
    assert "Invalid email or password" in wrong.text

    login(client, "grace@example.com")
    assert client.get("/surveys/my").status_code == 200
    assert client.get("/login", follow_redirects=False).status_code == 303

    logout = client.get("/logout", follow_redirects=False)
    assert logout.status_code == 303
    protected = client.get("/surveys/my")
    assert protected.status_code == 401
    assert 'href="/login"' in protected.text


def test_admin_badge_follows_user_role(client, datastore):
    """
    Validate the navigation marks administrators.

    1. Log in a regular user and validate no admin badge is shown.
    2. Log in an administrator and validate the admin badge is shown.
    """
    create_user(datastore, "user@example.com")
    create_user(datastore, "admin@example.com", role=UserRole.admin)

    login(client, "user@example.com")
    assert "badge-admin" not in client.get("/surveys").text
    client.get("/logout")

    login(client, "admin@example.com")
    assert "badge-admin" in client.get("/surveys").text
