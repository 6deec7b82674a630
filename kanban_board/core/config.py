from pydantic_settings import BaseSettings
import os
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    # Database settings
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./kanban.db")
    RUN_MIGRATIONS: bool = os.getenv("RUN_MIGRATIONS", "True").lower() in ("true", "1", "t")
    SQLITE_BUSY_TIMEOUT_MS: int = int(os.getenv("SQLITE_BUSY_TIMEOUT_MS", "5000"))

    # Application settings
    DEBUG: bool = os.getenv("DEBUG", "False").lower() in ("true", "1", "t")
    PROJECT_NAME: str = "Kanban Board API"
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))

    # CORS settings
    ALLOWED_ORIGINS: list[str] = ["*"]

    # Ordering settings
    # Below this distance to a neighbour the container gets respaced
    POSITION_MIN_GAP: float = float(os.getenv("POSITION_MIN_GAP", "1e-9"))

    # Quick card creation defaults
    DEFAULT_BOARD_NAME: str = os.getenv("DEFAULT_BOARD_NAME", "Main Board")
    DEFAULT_LIST_NAME: str = os.getenv("DEFAULT_LIST_NAME", "Backlog")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


def get_settings() -> Settings:
    return Settings()
