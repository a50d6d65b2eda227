"""API configuration loaded from environment variables."""
from pydantic import computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """API configuration loaded from environment variables.

    Attributes:
        host: Bind address for the API server.
        port: Port number for the API server.
        debug: Enable debug logging and API documentation.
        log_json: Render log lines as JSON; console output otherwise.
        cors_origins_raw: Raw comma-separated CORS origins string.
        shutdown_timeout: Seconds uvicorn waits for in-flight requests on exit.
        application_name: Prefix used in entity alert headers.
        enable_translation: Emit translation keys instead of plain sentences
            in alert headers.
        database_path: SQLite database for the record store.
    """

    model_config = SettingsConfigDict(
        env_prefix="FORMS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    host: str = "127.0.0.1"
    port: int = 8080
    debug: bool = False
    log_json: bool = True
    cors_origins_raw: str = "http://localhost:9000"
    shutdown_timeout: float = 30.0

    application_name: str = "formsApp"
    enable_translation: bool = True
    database_path: str = ":memory:"

    @computed_field
    @property
    def cors_origins(self) -> list[str]:
        """Parse CORS origins from comma-separated string.

        Returns:
            List of allowed origin URLs.
        """
        return [
            origin.strip()
            for origin in self.cors_origins_raw.split(",")
            if origin.strip()
        ]
