from fastapi.responses import JSONResponse, Response

from survey_platform.application.services.health_service import get_health_status
from survey_platform.application.services.pagination_service import build_page
from survey_platform.application.services.survey_service import count_active_surveys, list_active_surveys
from survey_platform.interfaces.web.context import RequestContext
from survey_platform.interfaces.web.controllers.base import BaseController

LATEST_SURVEYS = 5


class HomeController(BaseController):
    def index(self, ctx: RequestContext) -> Response:
        survey_count = count_active_surveys(self.store)
        latest = list_active_surveys(self.store, build_page(survey_count, 1, LATEST_SURVEYS))
        return self.render(
            ctx,
            "home/index.html",
            {"survey_count": survey_count, "latest_surveys": latest},
            title="Home",
        )

    def health(self, ctx: RequestContext) -> Response:
        payload = get_health_status(self.store)
        return JSONResponse(payload, status_code=200 if payload["db_connected"] else 503)
