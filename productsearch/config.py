import logging
from pydantic import Field
from pydantic_settings import BaseSettings
from productsearch.schemas.pagination import MAX_PAGE_SIZE

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    SEARCH_BACKEND: str = "sql"  # "sql" | "elasticsearch"
    SEARCH_INDEX: str = "products"
    SEARCH_FIELDS: list[str] = ["name", "description"]
    PAGE_SIZE: int = Field(10, ge=1, le=MAX_PAGE_SIZE)

    DATABASE_URL: str = "sqlite:///./data/products.db"

    ELASTICSEARCH_URL: str = "https://localhost:9200"
    ELASTICSEARCH_USER: str = "elastic"
    ELASTICSEARCH_PASSWORD: str = ""
    ELASTICSEARCH_CA_CERTS: str | None = None
    ELASTICSEARCH_REFRESH: bool = False
    ELASTICSEARCH_REQUEST_TIMEOUT: float = 10.0

    class Config:
        env_file = ".env"


settings = Settings()

if settings.SEARCH_BACKEND == "elasticsearch" and not settings.ELASTICSEARCH_PASSWORD:
    if settings.APP_ENV == "production":
        raise RuntimeError("ELASTICSEARCH_PASSWORD must be set in production! Check your .env file.")
    else:
        logger.warning("ELASTICSEARCH_PASSWORD is empty, connecting to the cluster without credentials")
