"""
Application configuration via pydantic-settings.

Loads values from .env file with sensible defaults for local development.
Use ``get_settings()`` to obtain the cached singleton instance.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Comm-It application settings loaded from environment / .env file.

    All settings can be overridden via environment variables or a `.env` file.
    Field names map directly to env var names (case-insensitive).

    Attributes:
        environment: "development" (file store) or "production" (Redis store).
        storage_backend: Explicit backend override ("file", "redis", "database").
        stt_provider: Speech-to-text backend ("groq" or "local").
        llm_provider: Extraction LLM backend ("groq", "claude" or "ollama").
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Silently ignore unrecognized env vars
    )

    # --- Environment ---
    environment: str = "development"

    # --- Storage ---
    # Empty = derive from environment (production -> redis, otherwise file)
    storage_backend: str = ""
    posts_file: str = "data/posts.json"
    redis_url: str = "redis://localhost:6379/0"
    redis_posts_key: str = "comm-it:posts"
    database_url: str = "sqlite+aiosqlite:///data/comm_it.db"
    seed_demo_posts: bool = True  # Initialize empty stores with the demo posts

    # --- Groq (speech-to-text + LLM) ---
    groq_api_key: str = ""
    groq_base_url: str = "https://api.groq.com/openai/v1"
    groq_stt_model: str = "distil-whisper-large-v3-en"  # English-only, faster
    groq_llm_model: str = "llama3-8b-8192"

    # --- Providers ---
    stt_provider: str = "groq"
    llm_provider: str = "groq"

    # Claude (Anthropic API) settings
    claude_api_key: str = ""  # Required when llm_provider="claude"
    claude_model: str = "claude-sonnet-4-20250514"

    # Ollama (local LLM) settings
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "llama3.2"

    # Local faster-whisper model size: tiny, base, small, medium, large-v3
    whisper_model: str = "base"

    # --- Extraction ---
    extraction_max_attempts: int = 3
    request_timeout: float = 60.0  # Seconds, for HTTP-based providers

    # --- Application ---
    app_host: str = "0.0.0.0"  # Bind address for the FastAPI server
    app_port: int = 8000
    log_level: str = "INFO"  # Python logging level
    api_base_url: str = "http://localhost:8000"  # Used by the Streamlit UI

    @property
    def resolved_storage_backend(self) -> str:
        """Return the storage backend name after applying the environment default."""
        if self.storage_backend:
            return self.storage_backend.lower()
        return "redis" if self.environment.lower() == "production" else "file"


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings singleton.

    Uses ``functools.lru_cache`` so the .env file is read only once.
    Subsequent calls return the same ``Settings`` instance.

    Returns:
        Settings: The application-wide configuration object.
    """
    return Settings()
