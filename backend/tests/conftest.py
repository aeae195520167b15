from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from fastapi.testclient import TestClient

from survey_platform.config import Settings, settings
from survey_platform.infrastructure.db.datastore import DataStore, Query
from survey_platform.main import create_app

# Children first so foreign keys never block the cleanup.
TABLES = ("question_answers", "survey_responses", "question_options", "questions", "surveys", "users")


def run_migrations(database_url: str) -> None:
    settings.database_url = database_url
    alembic_config = Config(str(Path(__file__).resolve().parents[1] / "alembic.ini"))
    command.upgrade(alembic_config, "head")


@pytest.fixture(scope="session")
def database_url(tmp_path_factory):
    path = tmp_path_factory.mktemp("db") / "survey_platform_test.db"
    url = f"sqlite:///{path}"
    run_migrations(url)
    return url


@pytest.fixture(scope="session")
def test_settings(database_url):
    return Settings(database_url=database_url, session_secret_key="test-secret", surveys_per_page=2)


@pytest.fixture(scope="session")
def datastore(test_settings):
    store = DataStore.from_settings(test_settings)
    try:
        yield store
    finally:
        store.close()


@pytest.fixture(autouse=True)
def clean_database(datastore):
    for table in TABLES:
        datastore.execute(Query(f"DELETE FROM {table}"))


@pytest.fixture
def client(datastore, test_settings):
    app = create_app(app_settings=test_settings, datastore=datastore)
    with TestClient(app) as test_client:
        yield test_client
