from survey_platform.interfaces.web.views.flash import FLASH_ERROR, FLASH_SUCCESS, SessionFlashStore
from survey_platform.interfaces.web.views.renderer import Layout, ViewRenderer


def test_layouts_pick_their_own_stylesheet():
    """
    Validate site and admin layouts.

    1. Wrap the same content in the app and admin layouts.
    2. Validate each layout links its own stylesheet and navigation.
    """
    renderer = ViewRenderer()
    content = renderer.render_content("errors/error.html", {"status_code": 404, "message": "Gone"})

    app_html = renderer.render_layout(content, title="Missing")
    admin_html = renderer.render_layout(content, title="Missing", layout=Layout.admin)

    assert "/assets/css/style.css" in app_html
    assert "/assets/css/admin.css" not in app_html
    assert "/assets/css/admin.css" in admin_html
    assert 'class="admin-nav"' in admin_html
    assert "Gone" in app_html and "Gone" in admin_html


def test_flash_messages_render_once():
    """
    Validate flash messages are read and cleared by the layout.

    1. Store a success and an error flash in a session.
    2. Render two pages with the same flash store.
    3. Validate messages appear on the first page only.
    """
    session: dict = {}
    flash = SessionFlashStore(session)
    flash.set(FLASH_SUCCESS, "Saved")
    flash.set(FLASH_ERROR, "Careful")
    renderer = ViewRenderer()

    first = renderer.render_page("home/index.html", {"survey_count": 0, "latest_surveys": []}, title="Home", flash=flash)
    second = renderer.render_page("home/index.html", {"survey_count": 0, "latest_surveys": []}, title="Home", flash=flash)

    assert "Saved" in first.body.decode() and "Careful" in first.body.decode()
    assert "Saved" not in second.body.decode()
    assert session == {}


def test_templates_escape_context_values():
    renderer = ViewRenderer()
    html = str(renderer.render_content("errors/error.html", {"status_code": 400, "message": "<i>bad</i>"}))
    assert "<i>bad</i>" not in html
    assert "&lt;i&gt;bad&lt;/i&gt;" in html
