import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv

# Load environment variables before settings are read
load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from taskboard.api import tasks, users
from taskboard.core.config import settings
from taskboard.core.database import engine, init_models
from taskboard.core.errors import register_exception_handlers
from taskboard.core.logging import configure_logging, log_requests

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler"""
    # Startup
    logger.info(f"Starting {settings.project_name} API on port {settings.api_port}...")
    if settings.create_tables_on_startup:
        logger.info("Creating database tables...")
        await init_models()
    yield
    # Shutdown
    logger.info(f"Shutting down {settings.project_name} API...")
    await engine.dispose()


app = FastAPI(
    title="Task Board API",
    description="Multi-user task board with per-category task ordering",
    version="0.1.0",
    lifespan=lifespan
)

allowed_origins = list(dict.fromkeys([settings.frontend_url, *settings.allowed_origins]))

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.middleware("http")(log_requests)

register_exception_handlers(app)

# Include API routers
app.include_router(users.router)
app.include_router(tasks.router)


@app.get("/")
async def root():
    return {"message": "Hello from Task Board Server."}


def run():
    """Console entry point."""
    import uvicorn

    uvicorn.run("taskboard.main:app", host="0.0.0.0", port=settings.api_port)
