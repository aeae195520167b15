from collections.abc import Mapping, Sequence

from survey_platform.application.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError, database_errors
from survey_platform.application.services.survey_service import get_questions_with_options, get_survey
from survey_platform.domain.question_types import QuestionType
from survey_platform.infrastructure.db.datastore import DataStore, Query
from survey_platform.infrastructure.logging import get_logger

logger = get_logger(__name__)


def answer_field(question_id: int) -> str:
    return f"answer_{question_id}"


def has_user_responded(store: DataStore, survey_id: int, user_id: int) -> bool:
    with database_errors("check previous response"):
        row = store.select_one(
            Query(
                "SELECT COUNT(*) AS total FROM survey_responses WHERE survey_id = :survey_id AND user_id = :user_id",
                {"survey_id": survey_id, "user_id": user_id},
            )
        )
    return bool(row and row["total"])


def _clean_answers(questions: list[dict], raw_answers: Mapping[int, Sequence[str]]) -> dict[int, list]:
    """Validate submitted values against the questions; return accepted values per question."""
    errors: dict[str, list[str]] = {}
    cleaned: dict[int, list] = {}

    for question in questions:
        field = answer_field(question["id"])
        text = question["question_text"]
        values = [value.strip() for value in raw_answers.get(question["id"], []) if value and value.strip()]

        if not values:
            if question["is_required"]:
                errors.setdefault(field, []).append(f"Question '{text}' is required")
            continue

        question_type: QuestionType = question["question_type"]
        if question_type.has_options:
            valid_ids = {option["id"] for option in question["options"]}
            try:
                option_ids = [int(value) for value in values]
            except ValueError:
                errors.setdefault(field, []).append(f"Invalid answer format for question '{text}'")
                continue
            if any(option_id not in valid_ids for option_id in option_ids):
                errors.setdefault(field, []).append(f"Unknown option selected for question '{text}'")
                continue
            if question_type is QuestionType.radio and len(option_ids) != 1:
                errors.setdefault(field, []).append(f"Choose exactly one option for question '{text}'")
                continue
            cleaned[question["id"]] = list(dict.fromkeys(option_ids))
        else:
            cleaned[question["id"]] = [values[0]]

    if errors:
        raise ValidationError("Survey answers failed validation", errors, "Please correct the highlighted answers")
    return cleaned


def submit_response(
    store: DataStore,
    survey_id: int,
    raw_answers: Mapping[int, Sequence[str]],
    *,
    user_id: int | None,
    ip_address: str | None,
) -> int:
    survey = get_survey(store, survey_id)
    if not survey["is_active"]:
        raise ForbiddenError(f"Survey {survey_id} is inactive", "This survey is not active")
    if user_id is not None and has_user_responded(store, survey_id, user_id):
        raise ConflictError(
            f"User {user_id} already answered survey {survey_id}",
            "You have already completed this survey",
        )

    questions = get_questions_with_options(store, survey_id)
    if not questions:
        raise ValidationError(
            f"Survey {survey_id} has no questions",
            {"__all__": ["This survey has no questions yet"]},
            "This survey has no questions yet",
        )
    answers = _clean_answers(questions, raw_answers)

    # The response row and its answers are committed together or not at all.
    with database_errors("save survey response"), store.transaction() as scope:
        response_id = scope.insert(
            Query(
                "INSERT INTO survey_responses (survey_id, user_id, ip_address) VALUES (:survey_id, :user_id, :ip)",
                {"survey_id": survey_id, "user_id": user_id, "ip": ip_address},
            )
        )
        for question in questions:
            for value in answers.get(question["id"], []):
                params = {
                    "response_id": response_id,
                    "question_id": question["id"],
                    "option_id": value if question["has_options"] else None,
                    "answer_text": None if question["has_options"] else value,
                }
                scope.insert(
                    Query(
                        "INSERT INTO question_answers (response_id, question_id, option_id, answer_text) "
                        "VALUES (:response_id, :question_id, :option_id, :answer_text)",
                        params,
                    )
                )

    logger.info(
        "survey_response_saved",
        survey_id=survey_id,
        response_id=response_id,
        user_id=user_id,
        answered_questions=len(answers),
    )
    return response_id


def get_response_details(store: DataStore, response_id: int) -> dict:
    """Load one stored response with its survey and the answers grouped per question."""
    if response_id <= 0:
        raise NotFoundError(f"Invalid response id {response_id}", "Response not found")
    with database_errors("load response"):
        response = store.select_one(
            Query(
                "SELECT r.id, r.survey_id, r.user_id, r.created_at, u.name AS user_name "
                "FROM survey_responses r LEFT JOIN users u ON r.user_id = u.id WHERE r.id = :id",
                {"id": response_id},
            )
        )
    if response is None:
        raise NotFoundError(f"Response {response_id} does not exist", "Response not found")

    survey = get_survey(store, response["survey_id"])
    with database_errors("load response answers"):
        rows = store.select_many(
            Query(
                "SELECT a.question_id, q.question_text, o.option_text, a.answer_text "
                "FROM question_answers a "
                "JOIN questions q ON a.question_id = q.id "
                "LEFT JOIN question_options o ON a.option_id = o.id "
                "WHERE a.response_id = :response_id "
                "ORDER BY q.order_number, q.id, o.order_number, a.id",
                {"response_id": response_id},
            )
        )

    answers: dict[int, dict] = {}
    for row in rows:
        entry = answers.setdefault(row["question_id"], {"question_text": row["question_text"], "replies": []})
        entry["replies"].append(row["option_text"] if row["option_text"] is not None else row["answer_text"])

    return {"response": response, "survey": survey, "answers": list(answers.values())}
