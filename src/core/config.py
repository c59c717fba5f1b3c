"""Application settings. Read from the environment (prefix ABALONE_) or a local .env file."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    log_level: str = "INFO"

    # Multiplayer sessions switch this off: an undo on one peer would diverge from the other.
    undo_enabled: bool = True

    # Require every move request to carry the turn token (number of moves already played).
    enforce_move_numbers: bool = False

    model_config = SettingsConfigDict(
        env_prefix="ABALONE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


settings = Settings()
