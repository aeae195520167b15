from fastapi.responses import Response
from pydantic import ValidationError as PydanticValidationError

from survey_platform.application.errors import ForbiddenError, NotFoundError, validation_error_from_pydantic
from survey_platform.application.services.pagination_service import build_page, parse_page_number
from survey_platform.application.services.response_service import has_user_responded
from survey_platform.application.services.survey_service import (
    add_question,
    count_active_surveys,
    create_survey,
    delete_question,
    ensure_author,
    get_question,
    get_questions_with_options,
    get_survey,
    list_active_surveys,
    list_user_surveys,
)
from survey_platform.domain.question_types import QuestionType
from survey_platform.interfaces.web.context import RequestContext
from survey_platform.interfaces.web.controllers.base import BaseController
from survey_platform.interfaces.web.schemas.survey import QuestionCreate, SurveyCreate
from survey_platform.interfaces.web.views.flash import FLASH_ERROR

OPTION_SLOTS = 4


class SurveyController(BaseController):
    def index(self, ctx: RequestContext) -> Response:
        total = count_active_surveys(self.store)
        page = build_page(total, parse_page_number(ctx.param("page")), self.settings.surveys_per_page)
        surveys = list_active_surveys(self.store, page)
        return self.render(ctx, "surveys/list.html", {"surveys": surveys, "page": page}, title="Surveys")

    def create(self, ctx: RequestContext) -> Response:
        self.require_login(ctx)
        return self.render(
            ctx, "surveys/create.html", {"title": "", "description": "", "errors": {}}, title="Create a survey"
        )

    def store_survey(self, ctx: RequestContext) -> Response:
        user_id = self.require_login(ctx)
        values = ctx.form_dict("title", "description")
        try:
            payload = SurveyCreate(**values)
        except PydanticValidationError as exc:
            error = validation_error_from_pydantic(exc, "Survey form is invalid")
            return self.render(
                ctx,
                "surveys/create.html",
                {**values, "errors": error.field_errors},
                title="Create a survey",
                status_code=error.http_status_code,
            )
        survey_id = create_survey(self.store, payload, user_id)
        return self.redirect_with_message(
            ctx, f"/surveys/edit?id={survey_id}", "Survey created. Now add some questions."
        )

    def my(self, ctx: RequestContext) -> Response:
        user_id = self.require_login(ctx)
        return self.render(ctx, "surveys/my.html", {"surveys": list_user_surveys(self.store, user_id)}, title="My surveys")

    def edit(self, ctx: RequestContext) -> Response:
        user_id = self.require_login(ctx)
        survey = get_survey(self.store, ctx.param_int("id"))
        ensure_author(survey, user_id)
        return self._editor(ctx, survey, {}, {})

    def add_question(self, ctx: RequestContext) -> Response:
        user_id = self.require_login(ctx)
        survey = get_survey(self.store, ctx.form_int("survey_id"))
        ensure_author(survey, user_id)

        form = {
            "question_text": ctx.form_value("question_text"),
            "question_type": ctx.form_value("question_type"),
            "is_required": bool(ctx.form_value("is_required")),
            "options": ctx.form_list("options"),
        }
        try:
            payload = QuestionCreate(**form)
        except PydanticValidationError as exc:
            error = validation_error_from_pydantic(exc, "Question form is invalid")
            return self._editor(ctx, survey, form, error.field_errors, status_code=error.http_status_code)

        add_question(self.store, survey, payload)
        return self.redirect_with_message(ctx, f"/surveys/edit?id={survey['id']}", "Question added")

    def view(self, ctx: RequestContext) -> Response:
        survey = get_survey(self.store, ctx.param_int("id"))
        if not survey["is_active"]:
            raise ForbiddenError(f"Survey {survey['id']} is inactive", "This survey is not active")
        if ctx.user_id is not None and has_user_responded(self.store, survey["id"], ctx.user_id):
            return self.redirect_with_message(
                ctx, f"/surveys/results?id={survey['id']}", "You have already completed this survey", FLASH_ERROR
            )
        return self.render_survey_form(ctx, survey, {})

    def render_survey_form(self, ctx: RequestContext, survey, errors: dict, status_code: int = 200) -> Response:
        questions = get_questions_with_options(self.store, survey["id"])
        return self.render(
            ctx,
            "surveys/view.html",
            {"survey": survey, "questions": questions, "errors": errors},
            title=survey["title"],
            status_code=status_code,
        )

    def _editor(self, ctx: RequestContext, survey, form: dict, errors: dict, status_code: int = 200) -> Response:
        return self.render(
            ctx,
            "surveys/edit.html",
            {
                "survey": survey,
                "questions": get_questions_with_options(self.store, survey["id"]),
                "question_types": list(QuestionType),
                "option_slots": max(OPTION_SLOTS, len(form.get("options", []))),
                "form": form,
                "errors": errors,
            },
            title=f"Edit {survey['title']}",
            status_code=status_code,
        )

    def delete_question(self, ctx: RequestContext) -> Response:
        user_id = self.require_login(ctx)
        survey_id = ctx.form_int("survey_id")
        try:
            question = get_question(self.store, ctx.form_int("question_id"))
        except NotFoundError as exc:
            return self.redirect_with_message(ctx, f"/surveys/edit?id={survey_id}", exc.user_message, FLASH_ERROR)

        survey = get_survey(self.store, question["survey_id"])
        ensure_author(survey, user_id)
        delete_question(self.store, question)
        return self.redirect_with_message(ctx, f"/surveys/edit?id={survey['id']}", "Question deleted")
