import asyncio
from contextlib import asynccontextmanager
from typing import AsyncGenerator
import os
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from alembic.config import Config
from alembic import command

from kanban_board.db import init_db
from kanban_board.core import get_settings
from kanban_board.core.exceptions import register_exception_handlers
from kanban_board.api.v1 import api_router
from kanban_board.core.middleware import RequestLoggingMiddleware
from kanban_board.logs.server_log import api_logger

# Get application settings
settings = get_settings()


def run_migrations() -> None:
    alembic_cfg = Config(os.path.join(Path(__file__).parent.parent, "alembic.ini"))
    command.upgrade(alembic_cfg, "head")


# Lifespan event handler
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    try:
        if settings.RUN_MIGRATIONS:
            # env.py drives its own event loop, so keep it off ours
            await asyncio.to_thread(run_migrations)
            api_logger.info("Database migrations applied")

        # Initialize database on startup
        await init_db()
        api_logger.info("Database initialized")
    except Exception as e:
        api_logger.error(f"Error initializing database: {e}")
        raise

    yield


# Initialize FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="API for Kanban boards with fractional ordering of lists and cards",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Length"],
    max_age=3600,
)

# Add request logging middleware
app.add_middleware(RequestLoggingMiddleware)

register_exception_handlers(app)

# Include API router
app.include_router(api_router)


@app.get("/")
async def root():
    """Service banner"""
    return {"message": f"{settings.PROJECT_NAME} is running"}


if __name__ == "__main__":
    import uvicorn

    api_logger.info(f"Starting server on http://{settings.HOST}:{settings.PORT}")

    uvicorn.run(
        "kanban_board.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="info"
    )
