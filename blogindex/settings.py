from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

from blogindex.schemas.post import ErrorPolicy


def choose_env_file() -> str:
    return ".env.local" if Path(".env.local").exists() else ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=choose_env_file(),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # tolerate unrelated env vars
    )

    # Blog content
    BLOG_POSTS_DIR: str = "src/content/blog"
    BLOG_POST_EXTENSIONS: List[str] = [".md", ".mdx", ".markdown"]
    BLOG_POST_ENCODING: str = "utf-8"

    # Loader
    BLOG_ON_ERROR: ErrorPolicy = ErrorPolicy.ABORT
    BLOG_INCLUDE_DRAFTS: bool = False
    BLOG_LOADER_MAX_WORKERS: int = 1
    WORDS_PER_MINUTE: int = 200

    # Logging
    LOG_LEVEL: str = "INFO"

    @property
    def posts_path(self) -> Path:
        return Path(self.BLOG_POSTS_DIR)


# Global settings instance (evaluated at import, but reads env on construction)
settings = Settings()
