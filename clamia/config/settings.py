"""
Configuration Settings.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings."""

    # App info
    app_name: str = "Clamia"
    app_version: str = "1.0.0"
    debug: bool = False

    # LLM Provider settings
    llm_provider: str = "openai"
    openai_api_key: Optional[str] = None
    llm_model: str = "gpt-4"
    llm_base_url: Optional[str] = None  # uses provider default if not set
    llm_temperature: float = 0.7
    llm_max_tokens: int = 1024
    llm_timeout_seconds: float = 30.0

    # Rate limiting (per client address)
    rate_limit_window_seconds: float = 60.0
    rate_limit_max_requests: int = 10

    # Knowledge retrieval
    knowledge_backend: str = "pinecone"  # pinecone, memory, none
    pinecone_api_key: Optional[str] = None
    pinecone_index_host: Optional[str] = None  # e.g. https://therapy-xxxx.svc.us-east1-gcp.pinecone.io
    pinecone_namespace: str = ""
    embedding_model: str = "text-embedding-ada-002"
    retrieval_top_k: int = 3

    # CORS
    cors_origins: list[str] = ["*"]

    # Logging configuration
    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file_path: str = "./logs/clamia.log"
    log_file_enabled: bool = True
    log_console_enabled: bool = True
    log_json_format: bool = True  # JSON format for files, human-readable for console
    log_api_requests: bool = True  # One NDJSON line per API request

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
