from collections.abc import Mapping
from typing import Any

from fastapi.responses import RedirectResponse, Response

from survey_platform.application.errors import UnauthorizedError
from survey_platform.application.services.user_service import is_admin
from survey_platform.config import Settings
from survey_platform.infrastructure.db.datastore import DataStore
from survey_platform.interfaces.web.context import RequestContext, session_user
from survey_platform.interfaces.web.views.flash import FLASH_SUCCESS
from survey_platform.interfaces.web.views.renderer import Layout, ViewRenderer


class BaseController:
    def __init__(self, store: DataStore, renderer: ViewRenderer, app_settings: Settings):
        self.store = store
        self.renderer = renderer
        self.settings = app_settings

    def current_user(self, ctx: RequestContext) -> dict[str, Any] | None:
        return session_user(ctx.session)

    def require_login(self, ctx: RequestContext) -> int:
        if ctx.user_id is None:
            raise UnauthorizedError(f"Anonymous access to {ctx.method} {ctx.path}", "Please log in to continue")
        return ctx.user_id

    def render(
        self,
        ctx: RequestContext,
        template: str,
        context: Mapping[str, Any] | None = None,
        *,
        title: str,
        status_code: int = 200,
    ) -> Response:
        user = self.current_user(ctx)
        return self.renderer.render_page(
            template,
            context,
            title=title,
            layout=Layout.app,
            flash=ctx.flash,
            user=user,
            is_admin=is_admin(user),
            status_code=status_code,
        )

    def redirect(self, url: str) -> Response:
        return RedirectResponse(url, status_code=303)

    def redirect_with_message(self, ctx: RequestContext, url: str, message: str, key: str = FLASH_SUCCESS) -> Response:
        ctx.flash.set(key, message)
        return self.redirect(url)
