from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass, field
from typing import Any

from starlette.datastructures import FormData, QueryParams

from survey_platform.interfaces.web.views.flash import SessionFlashStore


@dataclass
class RequestContext:
    """Everything a controller may read from the incoming request."""

    method: str
    path: str
    query: QueryParams
    form: FormData = field(default_factory=FormData)
    session: MutableMapping[str, Any] = field(default_factory=dict)
    client_host: str | None = None

    def param(self, name: str, default: str | None = None) -> str | None:
        return self.query.get(name, default)

    def param_int(self, name: str, default: int = 0) -> int:
        raw = self.query.get(name)
        if raw is None:
            return default
        try:
            return int(raw)
        except ValueError:
            return default

    def form_value(self, name: str, default: str = "") -> str:
        value = self.form.get(name)
        return value if isinstance(value, str) else default

    def form_int(self, name: str, default: int = 0) -> int:
        try:
            return int(self.form_value(name))
        except ValueError:
            return default

    def form_list(self, name: str) -> list[str]:
        return [value for value in self.form.getlist(name) if isinstance(value, str)]

    def form_dict(self, *names: str) -> dict[str, str]:
        return {name: self.form_value(name) for name in names}

    @property
    def user_id(self) -> int | None:
        return self.session.get("user_id")

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @property
    def flash(self) -> SessionFlashStore:
        return SessionFlashStore(self.session)


def session_user(session: Mapping[str, Any]) -> dict[str, Any] | None:
    if session.get("user_id") is None:
        return None
    return {
        "id": session["user_id"],
        "name": session.get("user_name", ""),
        "email": session.get("user_email", ""),
        "role": session.get("user_role", ""),
    }
