# caseguard/core/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = "caseguard"

    # ---------------------------------------------------------------------
    # API contract / OpenAPI
    # ---------------------------------------------------------------------

    api_version: str = "1.0.0"
    api_description: str = (
        "Case management API.\n\n"
        "A customer (organization or individual) may have at most one active case. "
        "Write endpoints require headers: X-Actor-User-Id, X-Role."
    )

    env: str = "local"
    debug: bool = True

    # ---------------------------------------------------------------------
    # Logging
    # ---------------------------------------------------------------------

    log_level: str = "INFO"
    log_json: bool = True

    # ---------------------------------------------------------------------
    # Database
    # ---------------------------------------------------------------------

    db_host: str = "127.0.0.1"
    db_port: int = 5432
    db_name: str = "caseguard"
    db_user: str = "caseguard"
    db_password: str = "caseguard"

    # Full SQLAlchemy URL; when set it wins over the db_* parts above.
    db_url: str | None = None

    @property
    def database_url(self) -> str:
        if self.db_url:
            return self.db_url
        return (
            f"postgresql+psycopg://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )


settings = Settings()
