
from pydantic_settings import BaseSettings


class Settings(BaseSettings):

    openai_api_key: str | None = None
    openai_base_url: str | None = None
    openai_max_retries: int = 0

    # "openai" or "sentence_transformer"
    embedding_provider: str = "openai"
    embedding_model: str = "text-embedding-3-small"
    local_embedding_model: str = "sentence-transformers/all-MiniLM-L6-v2"

    llm_model: str = "gpt-4o"
    llm_max_tokens: int = 1024
    llm_temperature: float = 0.3

    docs_path: str = "./docs"

    rag_top_k: int = 5
    chunk_size: int = 1000
    snippet_length: int = 200
    embed_concurrency: int = 8
    request_timeout: float = 30.0
    embedding_cache_enabled: bool = False

    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_prefix = "DOCQUERY_"
        extra = "ignore"


settings = Settings()
