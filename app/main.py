from pathlib import Path

from dotenv import load_dotenv

# Ensure repo-root .env is loaded for the running server process.
load_dotenv(dotenv_path=Path(__file__).resolve().parents[1] / ".env", override=False)

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.config import settings
from app.config import build_sqlalchemy_db_url
from app.database import Base, engine
from app.api.routes.health import router as health_router
from app.error_handlers import register_exception_handlers
from app.models import Profession, User  # noqa: F401  # register tables on Base.metadata
from app.routers import professions


def create_app() -> FastAPI:
    application = FastAPI(
        title=settings.app_name,
        version=settings.version,
        debug=settings.debug,
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(application)

    # Health endpoints (do not depend on API_PREFIX)
    application.include_router(health_router)
    application.include_router(professions.router, prefix=settings.api_prefix)

    # Shared MySQL schemas are managed explicitly (scripts/create_orm_tables.py);
    # sqlite is convenient to auto-create for local and test runs.
    db_url = build_sqlalchemy_db_url(settings)
    if db_url.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)
    return application


app = create_app()
