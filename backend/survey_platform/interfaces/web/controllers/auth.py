from fastapi.responses import Response
from pydantic import ValidationError as PydanticValidationError

from survey_platform.application.errors import ConflictError, validation_error_from_pydantic
from survey_platform.application.services.user_service import authenticate_user, get_user_by_id, register_user
from survey_platform.infrastructure.logging import get_logger
from survey_platform.interfaces.web.context import RequestContext
from survey_platform.interfaces.web.controllers.base import BaseController
from survey_platform.interfaces.web.schemas.auth import LoginForm, RegistrationForm

logger = get_logger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"


class AuthController(BaseController):
    def show_login(self, ctx: RequestContext) -> Response:
        if ctx.is_authenticated:
            return self.redirect("/surveys")
        return self.render(ctx, "auth/login.html", {"email": "", "errors": {}}, title="Log in")

    def login(self, ctx: RequestContext) -> Response:
        email = ctx.form_value("email")
        try:
            payload = LoginForm(email=email, password=ctx.form_value("password"))
        except PydanticValidationError as exc:
            error = validation_error_from_pydantic(exc, "Login form is invalid")
            return self._login_form(ctx, email, error.field_errors)

        user = authenticate_user(self.store, payload)
        if user is None:
            logger.info("login_failed", email=payload.email)
            return self._login_form(ctx, email, {"__all__": [INVALID_CREDENTIALS_MESSAGE]}, status_code=401)

        self._start_session(ctx, user)
        logger.info("login_succeeded", user_id=user["id"])
        return self.redirect_with_message(ctx, "/surveys", f"Welcome back, {user['name']}!")

    def show_register(self, ctx: RequestContext) -> Response:
        if ctx.is_authenticated:
            return self.redirect("/surveys")
        return self.render(ctx, "auth/register.html", {"name": "", "email": "", "errors": {}}, title="Register")

    def register(self, ctx: RequestContext) -> Response:
        values = ctx.form_dict("name", "email", "password", "confirm_password")
        try:
            payload = RegistrationForm(**values)
            user_id = register_user(self.store, payload)
        except PydanticValidationError as exc:
            error = validation_error_from_pydantic(exc, "Registration form is invalid")
            return self._register_form(ctx, values, error.field_errors, error.http_status_code)
        except ConflictError as exc:
            return self._register_form(ctx, values, {"email": [exc.user_message]}, exc.http_status_code)

        user = get_user_by_id(self.store, user_id)
        self._start_session(ctx, user)
        return self.redirect_with_message(ctx, "/surveys", "Registration complete. Welcome!")

    def logout(self, ctx: RequestContext) -> Response:
        user_id = ctx.user_id
        ctx.session.clear()
        if user_id is not None:
            logger.info("logout", user_id=user_id)
        return self.redirect_with_message(ctx, "/", "You have been logged out")

    def _start_session(self, ctx: RequestContext, user) -> None:
        ctx.session.clear()
        ctx.session["user_id"] = user["id"]
        ctx.session["user_name"] = user["name"]
        ctx.session["user_email"] = user["email"]
        ctx.session["user_role"] = user["role"]

    def _login_form(self, ctx: RequestContext, email: str, errors: dict, status_code: int = 422) -> Response:
        return self.render(
            ctx, "auth/login.html", {"email": email, "errors": errors}, title="Log in", status_code=status_code
        )

    def _register_form(self, ctx: RequestContext, values: dict, errors: dict, status_code: int) -> Response:
        return self.render(
            ctx,
            "auth/register.html",
            {"name": values["name"], "email": values["email"], "errors": errors},
            title="Register",
            status_code=status_code,
        )
