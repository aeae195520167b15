from fastapi.responses import Response

from survey_platform.application.services.results_service import get_survey_results
from survey_platform.interfaces.web.context import RequestContext
from survey_platform.interfaces.web.controllers.base import BaseController


class ResultsController(BaseController):
    def show(self, ctx: RequestContext) -> Response:
        results = get_survey_results(self.store, ctx.param_int("id"))
        return self.render(ctx, "surveys/results.html", results, title=f"Results: {results['survey']['title']}")
