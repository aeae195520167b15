"""Method and path routing for the server-rendered pages.

Routes are collected in a ``RouteTable`` while the app is being built and then
frozen into a ``Router``. The router is the single error boundary: every
``AppError`` raised by a handler is turned into an error page using its kind,
and anything else becomes a generic 500 page. Diagnostic text never reaches
the response body.
"""

import time
from collections.abc import Callable
from dataclasses import dataclass
from types import MappingProxyType

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse, Response
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import FormData

from survey_platform.application.errors import AppError, ErrorKind, ValidationError
from survey_platform.infrastructure.logging import bind_request_context, clear_request_context, get_logger
from survey_platform.interfaces.web.context import RequestContext, session_user
from survey_platform.interfaces.web.views.renderer import ViewRenderer

logger = get_logger(__name__)

Handler = Callable[[RequestContext], Response]

GENERIC_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."
NOT_FOUND_MESSAGE = "Page not found"
ROUTED_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]

_LOG_LEVEL_BY_KIND: dict[ErrorKind, str] = {
    ErrorKind.validation: "info",
    ErrorKind.unauthorized: "info",
    ErrorKind.forbidden: "info",
    ErrorKind.not_found: "info",
    ErrorKind.conflict: "info",
    ErrorKind.database: "error",
    ErrorKind.business_logic: "info",
}


class RouteTableFrozenError(RuntimeError):
    pass


def normalize_path(path: str) -> str:
    if not path:
        return "/"
    if not path.startswith("/"):
        path = "/" + path
    if len(path) > 1:
        path = path.rstrip("/") or "/"
    return path


@dataclass(frozen=True)
class Route:
    method: str
    path: str
    handler: Handler


class RouteTable:
    """Mutable registry used while wiring the app; ``freeze`` ends registration."""

    def __init__(self) -> None:
        self._routes: dict[tuple[str, str], Route] = {}
        self._frozen = False

    def register(self, method: str, path: str, handler: Handler) -> None:
        if self._frozen:
            raise RouteTableFrozenError(f"Cannot register {method} {path}: route table is frozen")
        route = Route(method.upper(), normalize_path(path), handler)
        if (route.method, route.path) in self._routes:
            logger.warning("route_overridden", method=route.method, path=route.path)
        self._routes[(route.method, route.path)] = route

    def get(self, path: str, handler: Handler) -> None:
        self.register("GET", path, handler)

    def post(self, path: str, handler: Handler) -> None:
        self.register("POST", path, handler)

    def freeze(self, renderer: ViewRenderer) -> "Router":
        self._frozen = True
        return Router(self._routes, renderer)


class Router:
    def __init__(self, routes: dict[tuple[str, str], Route], renderer: ViewRenderer):
        self._routes = MappingProxyType(dict(routes))
        self.renderer = renderer

    @property
    def routes(self) -> list[Route]:
        return list(self._routes.values())

    def has_route(self, method: str, path: str) -> bool:
        return (method.upper(), normalize_path(path)) in self._routes

    def resolve(self, method: str, path: str) -> Route | None:
        return self._routes.get((method.upper(), normalize_path(path)))

    def mount(self, app: FastAPI) -> None:
        app.add_route("/{path:path}", self.dispatch, methods=ROUTED_METHODS, include_in_schema=False)

    async def dispatch(self, request: Request) -> Response:
        method = request.method.upper()
        path = normalize_path(request.url.path)
        client_host = request.client.host if request.client else None
        session = request.session if "session" in request.scope else {}
        bind_request_context(method, path, client_host)
        started = time.perf_counter()

        try:
            route = self.resolve(method, path)
            if route is None:
                logger.info("route_not_found")
                response = self._error_page(404, NOT_FOUND_MESSAGE, session)
            else:
                response = await self._run(route, request, session)
            logger.info(
                "request_completed",
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            return response
        finally:
            clear_request_context()

    async def _run(self, route: Route, request: Request, session) -> Response:
        try:
            form = await request.form() if route.method == "POST" else FormData()
            context = RequestContext(
                method=route.method,
                path=route.path,
                query=request.query_params,
                form=form,
                session=session,
                client_host=request.client.host if request.client else None,
            )
            return await run_in_threadpool(route.handler, context)
        except AppError as exc:
            return self.handle_app_error(exc, session)
        except Exception:
            logger.exception("unhandled_request_error", handler=getattr(route.handler, "__qualname__", None))
            return self._error_page(500, GENERIC_ERROR_MESSAGE, session)

    def handle_app_error(self, exc: AppError, session) -> Response:
        kind = exc.kind
        log = getattr(logger, _LOG_LEVEL_BY_KIND[kind])
        extra = {"exc_info": exc} if kind.status_code >= 500 else {}
        log(
            "app_error",
            kind=kind.name,
            status_code=kind.status_code,
            error_type=type(exc).__name__,
            internal_message=exc.internal_message,
            **extra,
        )
        field_errors = exc.field_errors if isinstance(exc, ValidationError) else None
        return self._error_page(kind.status_code, exc.user_message, session, field_errors)

    def _error_page(self, status_code: int, message: str, session, field_errors=None) -> Response:
        try:
            return self.renderer.render_page(
                "errors/error.html",
                {"status_code": status_code, "message": message, "field_errors": field_errors},
                title=f"Error {status_code}",
                user=session_user(session),
                status_code=status_code,
            )
        except Exception:
            logger.exception("error_page_render_failed", status_code=status_code)
            return PlainTextResponse(message, status_code=status_code)
