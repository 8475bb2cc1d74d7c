"""
Application configuration using Pydantic Settings.

All configuration is loaded from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    PROJECT_NAME: str = "ADHDone MCP Server"

    # Server Configuration
    HOST: str = "0.0.0.0"
    PORT: int = 8080

    # Streaming transport
    SSE_KEEPALIVE_SECONDS: float = 30.0
    # Replies buffered per stream before further ones are dropped
    SSE_QUEUE_MAXSIZE: int = 100

    # Upper bound for a single tool invocation
    TOOL_CALL_TIMEOUT_SECONDS: float = 10.0

    # Reject unknown methods with METHOD_NOT_FOUND instead of an empty result
    STRICT_PROTOCOL: bool = True

    # Header carrying the opaque caller identifier set by the chat host
    CALLER_ID_HEADER: str = "x-openai-subject"

    # Logging Configuration
    LOG_LEVEL: str = "INFO"
    LOG_REQUESTS: bool = True

    model_config = SettingsConfigDict(case_sensitive=True, env_file=".env")


settings = Settings()
