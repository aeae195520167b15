from survey_platform.application.services.survey_service import add_question, create_survey, list_user_surveys
from survey_platform.application.services.user_service import get_user_by_email, register_user
from survey_platform.config import settings
from survey_platform.domain.question_types import QuestionType
from survey_platform.domain.roles import UserRole
from survey_platform.infrastructure.db.datastore import DataStore, Row
from survey_platform.infrastructure.logging import configure_logging, get_logger
from survey_platform.interfaces.web.schemas.auth import RegistrationForm
from survey_platform.interfaces.web.schemas.survey import QuestionCreate, SurveyCreate

logger = get_logger(__name__)

DEMO_SURVEY_TITLE = "Team lunch preferences"
DEMO_QUESTIONS = [
    QuestionCreate(
        question_text="Which day works best for a team lunch?",
        question_type=QuestionType.radio,
        is_required=True,
        options=["Monday", "Wednesday", "Friday"],
    ),
    QuestionCreate(
        question_text="Which cuisines do you enjoy?",
        question_type=QuestionType.checkbox,
        options=["Italian", "Japanese", "Mexican", "Indian"],
    ),
    QuestionCreate(question_text="Any dietary requirements?", question_type=QuestionType.text),
    QuestionCreate(question_text="Anything else we should know?", question_type=QuestionType.textarea),
]


def create_user_if_missing(store: DataStore, name: str, email: str, password: str, role: UserRole) -> Row:
    existing = get_user_by_email(store, email)
    if existing is not None:
        return existing
    form = RegistrationForm(name=name, email=email, password=password, confirm_password=password)
    register_user(store, form, role=role)
    return get_user_by_email(store, email)


def create_demo_survey_if_missing(store: DataStore, author: Row) -> None:
    if any(survey["title"] == DEMO_SURVEY_TITLE for survey in list_user_surveys(store, author["id"])):
        return
    survey_id = create_survey(
        store,
        SurveyCreate(title=DEMO_SURVEY_TITLE, description="Help us plan the next team lunch."),
        author["id"],
    )
    survey = {"id": survey_id}
    for question in DEMO_QUESTIONS:
        add_question(store, survey, question)


def main() -> None:
    configure_logging()
    store = DataStore.from_settings(settings)
    try:
        admin = create_user_if_missing(store, "Admin", "admin@example.com", "admin123", UserRole.admin)
        create_user_if_missing(store, "Demo User", "demo@example.com", "demo123", UserRole.user)
        create_demo_survey_if_missing(store, admin)
        logger.info("seed_completed")
    finally:
        store.close()


if __name__ == "__main__":
    main()
