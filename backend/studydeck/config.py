from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    studydeck_data_dir: Path = Path.home() / ".studydeck" / "data"
    sqlite_filename: str = "studydeck.db"
    catch_up_batch_size: int = 10  # cards studied when nothing is due
    default_question_count: int = 10
    default_time_limit_seconds: int = 300
    recent_sessions_limit: int = 5
    finished_session_retention_seconds: int = 300  # how long finished sessions stay readable
    log_level: str = "warning"
    host: str = "127.0.0.1"
    port: int = 0  # 0 picks a free port

    model_config = {"env_prefix": "STUDYDECK_"}


settings = Settings()
