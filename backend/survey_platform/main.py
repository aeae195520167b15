from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware

from survey_platform.config import Settings, settings
from survey_platform.infrastructure.db.datastore import DataStore
from survey_platform.infrastructure.logging import configure_logging, get_logger
from survey_platform.interfaces.web.routes import build_route_table
from survey_platform.interfaces.web.views.renderer import ViewRenderer

logger = get_logger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "interfaces" / "web" / "static"


def create_app(app_settings: Settings | None = None, datastore: DataStore | None = None) -> FastAPI:
    app_settings = app_settings or settings
    store = datastore or DataStore.from_settings(app_settings)

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        configure_logging(app_settings)
        store.connect()
        logger.info("app_startup", app_name=app_settings.app_name, version=app_settings.app_version)
        yield
        store.close()
        logger.info("app_shutdown", app_name=app_settings.app_name)

    app = FastAPI(
        title=app_settings.app_name,
        version=app_settings.app_version,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.add_middleware(
        SessionMiddleware,
        secret_key=app_settings.session_secret_key,
        session_cookie=app_settings.session_cookie,
    )
    app.mount("/assets", StaticFiles(directory=str(STATIC_DIR)), name="assets")

    renderer = ViewRenderer()
    router = build_route_table(store, renderer, app_settings).freeze(renderer)
    router.mount(app)

    app.state.datastore = store
    app.state.router = router
    return app


app = create_app()
