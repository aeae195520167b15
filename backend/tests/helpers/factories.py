from survey_platform.application.services.security_service import hash_password
from survey_platform.application.services.survey_service import add_question as add_survey_question
from survey_platform.application.services.survey_service import get_survey
from survey_platform.domain.question_types import QuestionType
from survey_platform.domain.roles import UserRole
from survey_platform.infrastructure.db.datastore import DataStore, Query, Row
from survey_platform.interfaces.web.schemas.survey import QuestionCreate


def create_user(
    store: DataStore,
    email: str,
    password: str = "pass123",
    name: str = "Test User",
    role: UserRole = UserRole.user,
) -> Row:
    user_id = store.insert(
        Query(
            "INSERT INTO users (name, email, password, role) VALUES (:name, :email, :password, :role)",
            {"name": name, "email": email, "password": hash_password(password), "role": role.value},
        )
    )
    return store.select_one(Query("SELECT * FROM users WHERE id = :id", {"id": user_id}))


def create_survey(
    store: DataStore,
    user_id: int,
    title: str = "Test survey",
    description: str = "",
    is_active: bool = True,
) -> Row:
    survey_id = store.insert(
        Query(
            "INSERT INTO surveys (title, description, user_id, is_active) "
            "VALUES (:title, :description, :user_id, :is_active)",
            {"title": title, "description": description, "user_id": user_id, "is_active": is_active},
        )
    )
    return get_survey(store, survey_id)


def add_question(
    store: DataStore,
    survey: Row,
    text: str,
    question_type: QuestionType = QuestionType.text,
    options: list[str] | None = None,
    is_required: bool = False,
) -> int:
    payload = QuestionCreate(
        question_text=text,
        question_type=question_type,
        is_required=is_required,
        options=options or [],
    )
    return add_survey_question(store, survey, payload)


def option_ids(store: DataStore, question_id: int) -> list[int]:
    rows = store.select_many(
        Query("SELECT id FROM question_options WHERE question_id = ? ORDER BY order_number", [question_id])
    )
    return [row["id"] for row in rows]
