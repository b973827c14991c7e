from pathlib import Path
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    data_path: Path = Path.home() / ".resume_builder"
    api_prefix: str = "/api/v1"
    token_ttl_seconds: int = 3600
    min_password_chars: int = 6
    # Cap stored documents so one save cannot blow up the key-value table.
    max_title_chars: int = 200
    max_payload_bytes: int = 256 * 1024
    interview_question_limit: int = 10
    cors_origins: list[str] = ["*"]

    @property
    def db_path(self) -> Path:
        return self.data_path / "db.sqlite"

    model_config = {"env_prefix": "RESUME_"}


settings = Settings()
