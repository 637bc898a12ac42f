from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings

_DEFAULT_CORPUS = Path(__file__).resolve().parent.parent / "data" / "documents.json"


class Settings(BaseSettings):

    gemini_api_key: Optional[str] = None

    host: str = "0.0.0.0"
    port: int = 3000

    llm_base_url: str = "https://generativelanguage.googleapis.com/v1beta/openai/"
    llm_model: str = "gemini-2.0-flash"
    llm_max_tokens: int = 1024
    llm_temperature: float = 0.7

    embedding_model: str = "text-embedding-004"

    corpus_path: str = str(_DEFAULT_CORPUS)

    rag_top_k: int = 3
    # Upper bound (seconds) for every external call
    request_timeout: float = 30.0

    chat_history_limit: int = 20

    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def llm_configured(self) -> bool:
        """Whether a generative-API credential is present."""
        return bool(self.gemini_api_key and self.gemini_api_key.strip())


settings = Settings()
