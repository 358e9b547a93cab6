from pathlib import Path

from pydantic import ConfigDict, field_validator
from pydantic_settings import BaseSettings

RESOURCES_DIR = Path(__file__).parent / "resources"


class Settings(BaseSettings):
    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    service_name: str = "AI Code Challenge Generator API"

    # Ollama
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "deepseek-coder:6.7b"
    ollama_timeout_seconds: float = 300.0  # local inference is slow

    # Sampling
    llm_temperature: float = 0.7
    llm_top_p: float = 0.9
    llm_num_predict: int = 3072

    # Response handling
    min_response_length: int = 50
    preview_head_chars: int = 1000
    preview_tail_chars: int = 500

    # Assets
    schema_path: Path = RESOURCES_DIR / "challenge_schema.json"
    system_prompt_path: Path = RESOURCES_DIR / "system_prompt.md"

    # Rate Limiting
    rate_limit_generate: str = "10/minute"

    # Logging
    log_level: str = "INFO"
    log_format: str = "console"  # "console" or "json"

    # CORS
    cors_origins: list[str] | str = ["http://localhost:5173", "http://127.0.0.1:5173"]

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from comma-separated string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v


settings = Settings()
