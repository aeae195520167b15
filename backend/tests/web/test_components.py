import re

from survey_platform.interfaces.web.routes import build_route_table
from survey_platform.interfaces.web.views.components import (
    admin_navigation,
    flash_message,
    navigation,
    page_window,
    pagination,
)
from survey_platform.interfaces.web.views.renderer import ViewRenderer


def page_numbers(html: str) -> list[int]:
    return [int(number) for number in re.findall(r'class="page-link(?: active)?">(\d+)</a>', html)]


def test_pagination_window_around_current_page():
    """
    Validate pagination links for a page in the middle.

    1. Render page five of ten.
    2. Validate numbered links cover pages three to seven.
    3. Validate previous and next links point at neighbour pages.
    """
    html = str(pagination("/surveys", 5, 10))
    assert page_numbers(html) == [3, 4, 5, 6, 7]
    assert 'href="/surveys?page=4" class="page-link page-prev"' in html
    assert 'href="/surveys?page=6" class="page-link page-next"' in html
    assert 'class="page-link active">5</a>' in html


def test_pagination_edges_and_single_page():
    assert str(pagination("/surveys", 1, 1)) == ""
    assert str(pagination("/surveys", 1, 0)) == ""
    first = str(pagination("/surveys", 1, 3))
    assert "page-prev" not in first
    assert "page-next" in first
    last = str(pagination("/surveys", 3, 3))
    assert "page-next" not in last
    assert list(page_window(1, 10)) == [1, 2, 3]


def test_pagination_keeps_extra_params():
    html = str(pagination("/surveys", 1, 2, {"q": "a&b", "page": 9}))
    assert "/surveys?q=a%26b&amp;page=2" in html


def test_components_escape_user_values():
    """
    Validate escaping of user supplied text.

    1. Render a flash and navigation with markup in the values.
    2. Validate no raw tag reaches the output.
    """
    flash = str(flash_message("success", "<script>alert(1)</script>"))
    assert "<script>" not in flash
    assert "&lt;script&gt;" in flash
    assert str(flash_message("error", None)) == ""

    nav = str(navigation({"name": "<b>Eve</b>", "email": "eve@example.com"}))
    assert "<b>Eve</b>" not in nav
    assert "&lt;b&gt;Eve&lt;/b&gt;" in nav
    assert 'href="/login"' in str(navigation(None))


def test_navigation_links_point_at_registered_routes(datastore, test_settings):
    """
    Validate every navigation link resolves to a registered route.

    1. Build the application route table.
    2. Collect hrefs from the user, admin user and admin navigations.
    3. Validate each href is a registered GET route.
    """
    renderer = ViewRenderer()
    router = build_route_table(datastore, renderer, test_settings).freeze(renderer)
    user = {"name": "Ada", "email": "ada@example.com"}
    html = "".join(
        str(fragment)
        for fragment in (navigation(None), navigation(user), navigation(user, is_admin=True), admin_navigation())
    )

    hrefs = set(re.findall(r'href="([^"]+)"', html))
    assert hrefs
    for href in hrefs:
        assert router.has_route("GET", href.split("?")[0]), href
    assert "badge-admin" in str(navigation(user, is_admin=True))
