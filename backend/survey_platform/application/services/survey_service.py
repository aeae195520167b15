from survey_platform.application.errors import ForbiddenError, NotFoundError, database_errors
from survey_platform.domain.question_types import QuestionType
from survey_platform.infrastructure.db.datastore import DataStore, Query, Row
from survey_platform.infrastructure.logging import get_logger
from survey_platform.interfaces.web.schemas.pagination import PageMeta
from survey_platform.interfaces.web.schemas.survey import QuestionCreate, SurveyCreate

logger = get_logger(__name__)

_SURVEY_WITH_AUTHOR = """
    SELECT s.id, s.title, s.description, s.user_id, s.is_active, s.created_at, s.updated_at,
           u.name AS author_name,
           (SELECT COUNT(*) FROM survey_responses r WHERE r.survey_id = s.id) AS response_count
    FROM surveys s
    JOIN users u ON s.user_id = u.id
"""


def create_survey(store: DataStore, payload: SurveyCreate, user_id: int) -> int:
    with database_errors("create survey"):
        survey_id = store.insert(
            Query(
                "INSERT INTO surveys (title, description, user_id) VALUES (:title, :description, :user_id)",
                {"title": payload.title, "description": payload.description, "user_id": user_id},
            )
        )
    logger.info("survey_created", survey_id=survey_id, user_id=user_id)
    return survey_id


def count_active_surveys(store: DataStore) -> int:
    with database_errors("count surveys"):
        row = store.select_one(Query("SELECT COUNT(*) AS total FROM surveys WHERE is_active = :active", {"active": True}))
    return int(row["total"]) if row else 0


def list_active_surveys(store: DataStore, page: PageMeta) -> list[Row]:
    with database_errors("list surveys"):
        return store.select_many(
            Query(
                _SURVEY_WITH_AUTHOR
                + " WHERE s.is_active = :active ORDER BY s.created_at DESC, s.id DESC LIMIT :limit OFFSET :offset",
                {"active": True, "limit": page.per_page, "offset": page.offset},
            )
        )


def list_user_surveys(store: DataStore, user_id: int) -> list[Row]:
    with database_errors("list user surveys"):
        return store.select_many(
            Query(
                _SURVEY_WITH_AUTHOR + " WHERE s.user_id = :user_id ORDER BY s.created_at DESC, s.id DESC",
                {"user_id": user_id},
            )
        )


def get_survey(store: DataStore, survey_id: int) -> Row:
    if survey_id <= 0:
        raise NotFoundError(f"Invalid survey id {survey_id}", "Survey not found")
    with database_errors("load survey"):
        survey = store.select_one(Query(_SURVEY_WITH_AUTHOR + " WHERE s.id = :id", {"id": survey_id}))
    if survey is None:
        raise NotFoundError(f"Survey {survey_id} does not exist", "Survey not found")
    return survey


def ensure_author(survey: Row, user_id: int) -> None:
    if survey["user_id"] != user_id:
        raise ForbiddenError(
            f"User {user_id} is not the author of survey {survey['id']}",
            "You do not have permission to edit this survey",
        )


def get_questions_with_options(store: DataStore, survey_id: int) -> list[dict]:
    with database_errors("load questions"):
        questions = store.select_many(
            Query(
                "SELECT id, survey_id, question_text, question_type, is_required, order_number "
                "FROM questions WHERE survey_id = :survey_id ORDER BY order_number, id",
                {"survey_id": survey_id},
            )
        )
        options = store.select_many(
            Query(
                "SELECT o.id, o.question_id, o.option_text, o.order_number "
                "FROM question_options o JOIN questions q ON o.question_id = q.id "
                "WHERE q.survey_id = :survey_id ORDER BY o.question_id, o.order_number, o.id",
                {"survey_id": survey_id},
            )
        )

    options_by_question: dict[int, list[dict]] = {}
    for option in options:
        options_by_question.setdefault(option["question_id"], []).append(dict(option))

    result: list[dict] = []
    for question in questions:
        question_type = QuestionType(question["question_type"])
        result.append(
            {
                **dict(question),
                "is_required": bool(question["is_required"]),
                "question_type": question_type,
                "has_options": question_type.has_options,
                "options": options_by_question.get(question["id"], []),
            }
        )
    return result


def add_question(store: DataStore, survey: Row, payload: QuestionCreate) -> int:
    with database_errors("add question"):
        row = store.select_one(
            Query(
                "SELECT COALESCE(MAX(order_number), 0) + 1 AS next_order FROM questions WHERE survey_id = :survey_id",
                {"survey_id": survey["id"]},
            )
        )
        order_number = int(row["next_order"]) if row else 1
        question_id = store.insert(
            Query(
                "INSERT INTO questions (survey_id, question_text, question_type, is_required, order_number) "
                "VALUES (:survey_id, :question_text, :question_type, :is_required, :order_number)",
                {
                    "survey_id": survey["id"],
                    "question_text": payload.question_text,
                    "question_type": payload.question_type.value,
                    "is_required": payload.is_required,
                    "order_number": order_number,
                },
            )
        )
        for position, option_text in enumerate(payload.options, start=1):
            store.insert(
                Query(
                    "INSERT INTO question_options (question_id, option_text, order_number) "
                    "VALUES (:question_id, :option_text, :order_number)",
                    {"question_id": question_id, "option_text": option_text, "order_number": position},
                )
            )
    logger.info(
        "question_added",
        survey_id=survey["id"],
        question_id=question_id,
        question_type=payload.question_type.value,
        option_count=len(payload.options),
    )
    return question_id


def get_question(store: DataStore, question_id: int) -> Row:
    if question_id <= 0:
        raise NotFoundError(f"Invalid question id {question_id}", "Question not found")
    with database_errors("load question"):
        question = store.select_one(
            Query(
                "SELECT id, survey_id, question_text, question_type, is_required, order_number "
                "FROM questions WHERE id = :id",
                {"id": question_id},
            )
        )
    if question is None:
        raise NotFoundError(f"Question {question_id} does not exist", "Question not found")
    return question


def delete_question(store: DataStore, question: Row) -> None:
    """Remove a question with its options and any answers given to it."""
    params = {"question_id": question["id"]}
    with database_errors("delete question"), store.transaction() as scope:
        scope.execute(Query("DELETE FROM question_answers WHERE question_id = :question_id", params))
        scope.execute(Query("DELETE FROM question_options WHERE question_id = :question_id", params))
        scope.execute(Query("DELETE FROM questions WHERE id = :question_id", params))
    logger.info("question_deleted", survey_id=question["survey_id"], question_id=question["id"])
