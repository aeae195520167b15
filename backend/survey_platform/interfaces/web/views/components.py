"""Small stateless HTML fragments shared by layouts and pages.

Every value that may come from a user is passed through ``escape`` before it
is embedded; the returned ``Markup`` is safe to insert into templates as is.
"""

from collections.abc import Mapping
from typing import Any
from urllib.parse import urlencode

from markupsafe import Markup

FLASH_TYPES = ("success", "error", "info", "warning")


def flash_message(message_type: str, message: str | None) -> Markup:
    if not message:
        return Markup("")
    css_type = message_type if message_type in FLASH_TYPES else "info"
    return Markup('<div class="flash-message {}">{}</div>').format(css_type, message)


def navigation(user: Mapping[str, Any] | None, is_admin: bool = False) -> Markup:
    if user is None:
        return Markup(
            '<div class="user-nav">'
            '<a href="/login" class="btn btn-sm">Log in</a>'
            '<a href="/register" class="btn btn-sm">Register</a>'
            "</div>"
        )
    admin_badge = Markup('<span class="badge badge-admin">Admin</span>') if is_admin else Markup("")
    return Markup(
        '<div class="user-nav">'
        "<span>Hello, {}!</span>"
        '<a href="/surveys/my" class="btn btn-sm">My surveys</a>'
        "{}"
        '<a href="/logout" class="btn btn-sm">Log out</a>'
        "</div>"
    ).format(user.get("name") or user.get("email") or "", admin_badge)


def admin_navigation() -> Markup:
    return Markup(
        '<nav class="admin-nav">'
        '<a href="/surveys/my" class="admin-nav-link">Dashboard</a>'
        '<a href="/surveys" class="admin-nav-link">Surveys</a>'
        '<a href="/" class="admin-nav-link">Back to site</a>'
        '<a href="/logout" class="admin-nav-link">Log out</a>'
        "</nav>"
    )


def page_window(current_page: int, total_pages: int, radius: int = 2) -> range:
    return range(max(1, current_page - radius), min(total_pages, current_page + radius) + 1)


def _page_url(base_url: str, params: Mapping[str, Any], page: int) -> str:
    query = {**params, "page": page}
    return f"{base_url}?{urlencode(query, doseq=True)}"


def pagination(
    base_url: str,
    current_page: int,
    total_pages: int,
    params: Mapping[str, Any] | None = None,
) -> Markup:
    if total_pages <= 1:
        return Markup("")
    params = dict(params or {})
    params.pop("page", None)

    links: list[Markup] = []
    if current_page > 1:
        links.append(
            Markup('<a href="{}" class="page-link page-prev">&larr; Previous</a>').format(
                _page_url(base_url, params, current_page - 1)
            )
        )
    for page in page_window(current_page, total_pages):
        active = " active" if page == current_page else ""
        links.append(
            Markup('<a href="{}" class="page-link{}">{}</a>').format(_page_url(base_url, params, page), active, page)
        )
    if current_page < total_pages:
        links.append(
            Markup('<a href="{}" class="page-link page-next">Next &rarr;</a>').format(
                _page_url(base_url, params, current_page + 1)
            )
        )
    return Markup('<div class="pagination">{}</div>').format(Markup("").join(links))
