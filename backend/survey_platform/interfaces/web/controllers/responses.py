from fastapi.responses import Response

from survey_platform.application.errors import ValidationError
from survey_platform.application.services.response_service import get_response_details, submit_response
from survey_platform.application.services.survey_service import get_survey
from survey_platform.interfaces.web.context import RequestContext
from survey_platform.interfaces.web.controllers.surveys import SurveyController

ANSWER_PREFIX = "answer_"


def collect_answers(ctx: RequestContext) -> dict[int, list[str]]:
    """Group ``answer_<question id>`` form fields by question id."""
    answers: dict[int, list[str]] = {}
    for key in set(ctx.form.keys()):
        if not key.startswith(ANSWER_PREFIX):
            continue
        suffix = key[len(ANSWER_PREFIX) :]
        if not suffix.isdigit():
            continue
        answers[int(suffix)] = ctx.form_list(key)
    return answers


class ResponseController(SurveyController):
    def submit(self, ctx: RequestContext) -> Response:
        survey_id = ctx.form_int("survey_id")
        try:
            submit_response(
                self.store,
                survey_id,
                collect_answers(ctx),
                user_id=ctx.user_id,
                ip_address=ctx.client_host,
            )
        except ValidationError as exc:
            survey = get_survey(self.store, survey_id)
            return self.render_survey_form(ctx, survey, exc.field_errors, status_code=exc.http_status_code)
        return self.redirect_with_message(
            ctx, f"/surveys/results?id={survey_id}", "Thank you! Your answers have been saved."
        )

    def details(self, ctx: RequestContext) -> Response:
        details = get_response_details(self.store, ctx.param_int("id"))
        return self.render(
            ctx,
            "surveys/response_details.html",
            details,
            title=f"Response to {details['survey']['title']}",
        )
