from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from typing import Any

from fastapi.responses import HTMLResponse
from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

from survey_platform.config import settings
from survey_platform.interfaces.web.views import components
from survey_platform.interfaces.web.views.flash import FLASH_ERROR, FLASH_SUCCESS, FlashStore

TEMPLATES_DIR = Path(__file__).resolve().parents[1] / "templates"


class Layout(str, Enum):
    app = "app"
    admin = "admin"


class ViewRenderer:
    """Renders page fragments with Jinja2 and wraps them in a site or admin layout."""

    def __init__(self, templates_dir: Path = TEMPLATES_DIR):
        self.env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=select_autoescape(["html"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.globals.update(
            app_name=settings.app_name,
            flash_message=components.flash_message,
            navigation=components.navigation,
            admin_navigation=components.admin_navigation,
            pagination=components.pagination,
        )

    def render_content(self, template: str, context: Mapping[str, Any] | None = None) -> Markup:
        return Markup(self.env.get_template(template).render(**dict(context or {})))

    def render_layout(
        self,
        content: Markup,
        *,
        title: str,
        layout: Layout = Layout.app,
        flash: FlashStore | None = None,
        user: Mapping[str, Any] | None = None,
        is_admin: bool = False,
    ) -> str:
        flash_success = flash.get_and_clear(FLASH_SUCCESS) if flash is not None else None
        flash_error = flash.get_and_clear(FLASH_ERROR) if flash is not None else None
        return self.env.get_template(f"layouts/{layout.value}.html").render(
            content=content,
            title=title,
            flash_success=flash_success,
            flash_error=flash_error,
            user=user,
            is_admin=is_admin,
        )

    def render_page(
        self,
        template: str,
        context: Mapping[str, Any] | None = None,
        *,
        title: str,
        layout: Layout = Layout.app,
        flash: FlashStore | None = None,
        user: Mapping[str, Any] | None = None,
        is_admin: bool = False,
        status_code: int = 200,
    ) -> HTMLResponse:
        page_context = {**dict(context or {}), "user": user, "is_admin": is_admin}
        content = self.render_content(template, page_context)
        html = self.render_layout(content, title=title, layout=layout, flash=flash, user=user, is_admin=is_admin)
        return HTMLResponse(html, status_code=status_code)
