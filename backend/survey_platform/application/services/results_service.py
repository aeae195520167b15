from survey_platform.application.errors import database_errors
from survey_platform.application.services.survey_service import get_questions_with_options, get_survey
from survey_platform.infrastructure.db.datastore import DataStore, Query, Row

MAX_TEXT_ANSWERS = 50
MAX_RECENT_RESPONSES = 20


def count_responses(store: DataStore, survey_id: int) -> int:
    with database_errors("count responses"):
        row = store.select_one(
            Query("SELECT COUNT(*) AS total FROM survey_responses WHERE survey_id = :survey_id", {"survey_id": survey_id})
        )
    return int(row["total"]) if row else 0


def _option_counts(store: DataStore, question_id: int) -> dict[int, int]:
    rows = store.select_many(
        Query(
            "SELECT o.id AS option_id, COUNT(a.id) AS total_selected "
            "FROM question_options o LEFT JOIN question_answers a ON a.option_id = o.id "
            "WHERE o.question_id = :question_id GROUP BY o.id",
            {"question_id": question_id},
        )
    )
    return {row["option_id"]: int(row["total_selected"]) for row in rows}


def _text_answers(store: DataStore, question_id: int) -> list[str]:
    rows = store.select_many(
        Query(
            "SELECT answer_text FROM question_answers "
            "WHERE question_id = :question_id AND answer_text IS NOT NULL "
            "ORDER BY created_at DESC, id DESC LIMIT :limit",
            {"question_id": question_id, "limit": MAX_TEXT_ANSWERS},
        )
    )
    return [row["answer_text"] for row in rows]


def get_survey_results(store: DataStore, survey_id: int) -> dict:
    survey = get_survey(store, survey_id)
    questions = get_questions_with_options(store, survey_id)
    total_responses = count_responses(store, survey_id)

    question_stats: list[dict] = []
    with database_errors("load survey results"):
        for question in questions:
            if question["has_options"]:
                counts = _option_counts(store, question["id"])
                answered = sum(counts.values())
                options = [
                    {
                        "option_text": option["option_text"],
                        "total_selected": counts.get(option["id"], 0),
                        "percentage": round(counts.get(option["id"], 0) * 100 / total_responses, 1)
                        if total_responses
                        else 0.0,
                    }
                    for option in question["options"]
                ]
                question_stats.append({"question": question, "options": options, "answered": answered})
            else:
                answers = _text_answers(store, question["id"])
                question_stats.append({"question": question, "text_answers": answers, "answered": len(answers)})

    return {
        "survey": survey,
        "total_responses": total_responses,
        "questions": question_stats,
        "recent_responses": list_recent_responses(store, survey_id),
    }


def list_recent_responses(store: DataStore, survey_id: int, limit: int = MAX_RECENT_RESPONSES) -> list[Row]:
    with database_errors("list responses"):
        return store.select_many(
            Query(
                "SELECT r.id, r.created_at, u.name AS user_name "
                "FROM survey_responses r LEFT JOIN users u ON r.user_id = u.id "
                "WHERE r.survey_id = :survey_id ORDER BY r.created_at DESC, r.id DESC LIMIT :limit",
                {"survey_id": survey_id, "limit": limit},
            )
        )
