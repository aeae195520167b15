from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL


class Settings(BaseSettings):
    app_name: str = "Survey Platform"
    app_version: str = "0.1.0"
    database_url: str | None = "sqlite:///./survey_platform.db"
    db_driver: str = "mysql+pymysql"
    db_host: str = "localhost"
    db_port: int | None = None
    db_name: str = "survey_platform"
    db_user: str = "root"
    db_password: str = ""
    db_charset: str = "utf8mb4"
    session_secret_key: str = "change-me"
    session_cookie: str = "survey_session"
    surveys_per_page: int = 10
    log_level: str = "INFO"
    log_json: bool = False

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    def sqlalchemy_url(self) -> str:
        if self.database_url:
            return self.database_url
        url = URL.create(
            self.db_driver,
            username=self.db_user,
            password=self.db_password or None,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
            query={"charset": self.db_charset},
        )
        return url.render_as_string(hide_password=False)


settings = Settings()
