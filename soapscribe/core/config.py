"""
Runtime settings for the API server and the Streamlit recorder.

Every model name, URL and limit used by the pipeline is a field here so it
can be changed from the environment without touching code.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from soapscribe.core.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Values read from the process environment, then `.env`.

    Env var names are the upper-cased field names.

    Attributes:
        openai_api_key: Shared credential for the transcription and default
            completion services. Validated per request, not at startup.
        llm_provider: Completion backend for note generation
            ("openai", "claude" or "ollama").
        max_audio_bytes: Upload ceiling imposed by the transcription service.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Credential ---
    openai_api_key: str = ""
    openai_api_key_prefix: str = "sk-"

    # --- Transcription (OpenAI audio API) ---
    transcription_url: str = "https://api.openai.com/v1/audio/transcriptions"
    transcription_model: str = "gpt-4o-transcribe"
    transcription_response_format: str = "json"
    transcription_language: str = "en"  # Language hint sent with every upload

    # --- Note generation ---
    llm_provider: str = "openai"
    openai_chat_model: str = "gpt-4o"
    llm_temperature: float = 0.3  # Low temperature for consistent clinical phrasing
    llm_timeout: float = 120.0  # Seconds, applied to the completion connection
    llm_max_retries: int = 2

    # Claude (LLM_PROVIDER=claude)
    claude_api_key: str = ""
    claude_model: str = "claude-sonnet-4-20250514"
    claude_max_tokens: int = 2048

    # Ollama (LLM_PROVIDER=ollama)
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "llama3.2"

    # --- Upload limits ---
    max_audio_bytes: int = 25 * 1024 * 1024  # 25 MiB transcription ceiling

    # --- Application ---
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    log_level: str = "INFO"
    cors_origins: list[str] = [
        "http://localhost:8501",  # Streamlit
        "http://localhost:3000",  # Dev frontend
    ]

    # --- UI ---
    api_base_url: str = "http://localhost:8000"  # Backend URL used by the Streamlit UI


@lru_cache
def get_settings() -> Settings:
    """Settings for this process; `.env` is read on the first call only."""
    return Settings()


def validate_api_key(settings: Settings) -> str:
    """Return the service credential or raise ``ConfigurationError``.

    Only presence and the fixed prefix are checked; the downstream service
    remains the authority on whether the key is actually valid.
    """
    key = settings.openai_api_key
    if not key:
        raise ConfigurationError(
            "OpenAI API key is not configured. Please set OPENAI_API_KEY in .env"
        )
    if not key.startswith(settings.openai_api_key_prefix):
        raise ConfigurationError(
            "Invalid OpenAI API key format. API keys should start with "
            f'"{settings.openai_api_key_prefix}".'
        )
    return key
