from survey_platform.config import Settings
from survey_platform.infrastructure.db.datastore import DataStore
from survey_platform.interfaces.web.controllers.auth import AuthController
from survey_platform.interfaces.web.controllers.home import HomeController
from survey_platform.interfaces.web.controllers.responses import ResponseController
from survey_platform.interfaces.web.controllers.results import ResultsController
from survey_platform.interfaces.web.controllers.surveys import SurveyController
from survey_platform.interfaces.web.router import RouteTable
from survey_platform.interfaces.web.views.renderer import ViewRenderer


def build_route_table(store: DataStore, renderer: ViewRenderer, app_settings: Settings) -> RouteTable:
    home = HomeController(store, renderer, app_settings)
    auth = AuthController(store, renderer, app_settings)
    surveys = SurveyController(store, renderer, app_settings)
    responses = ResponseController(store, renderer, app_settings)
    results = ResultsController(store, renderer, app_settings)

    table = RouteTable()
    table.get("/", home.index)
    table.get("/health", home.health)

    table.get("/login", auth.show_login)
    table.post("/login", auth.login)
    table.get("/register", auth.show_register)
    table.post("/register", auth.register)
    table.get("/logout", auth.logout)

    table.get("/surveys", surveys.index)
    table.get("/surveys/create", surveys.create)
    table.post("/surveys/store", surveys.store_survey)
    table.get("/surveys/my", surveys.my)
    table.get("/surveys/edit", surveys.edit)
    table.post("/surveys/add-question", surveys.add_question)
    table.post("/surveys/delete-question", surveys.delete_question)
    table.get("/surveys/view", surveys.view)
    table.post("/surveys/submit", responses.submit)
    table.get("/surveys/results", results.show)
    table.get("/surveys/response-details", responses.details)
    return table
