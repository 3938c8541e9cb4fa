from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_prefix": "SM_"}

    # Database
    database_url: str = "sqlite+aiosqlite:///./monitor.db"
    create_tables: bool = True

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 3000

    # Liveness
    offline_threshold_seconds: int = 60

    # Sweep
    sweep_enabled: bool = True
    sweep_interval_seconds: float = 60.0

    # History
    history_default_limit: int = 100
    history_max_limit: int = 1000

    # Logging
    log_level: str = "INFO"
    log_format: str = "console"


settings = Settings()
