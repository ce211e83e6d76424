from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    APP_NAME: str = "FocusFlow"

    # Persistence
    STORAGE_DIR: str = "./data"
    STORAGE_KEY: str = "focusflow_tasks_data_v2"

    # Timer
    TICK_INTERVAL: float = 1.0  # seconds between ticks
    MIN_TICK_DELTA: float = 0.1  # deltas below this are carried to the next tick
    DEFAULT_LEARN_TARGET: int = 3600

    # Suggestions (Ollama)
    OLLAMA_HOST: str = "http://localhost:11434"
    OLLAMA_MODEL: str = "gemma:2b"
    LLM_TIMEOUT: float = 60.0
    DEFAULT_SUGGESTED_MINUTES: int = 25

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_prefix="FOCUSFLOW_")


settings = Settings()
