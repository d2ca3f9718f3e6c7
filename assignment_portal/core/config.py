from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db_name: str = "assignment_portal"
    mongo_server_selection_timeout_ms: int = 5000
    mongo_socket_timeout_ms: int = 45000

    # il token viene emesso dal servizio di autenticazione, qui lo decodifichiamo soltanto
    jwt_secret: str = "change-me"
    jwt_algorithm: str = "HS256"

    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="PORTAL_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()
