# backend/app/main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from backend.app.api.v1.router import api_router
from backend.app.core.config import Settings, get_settings
from backend.app.core.errors import register_exception_handlers
from backend.app.db.session import Database

logger = logging.getLogger(__name__)

API_INDEX = {
    "endpoints": [
        {"method": "GET", "path": "/", "description": "This documentation"},
        {"method": "GET", "path": "/health", "description": "Liveness probe"},
        {"method": "GET", "path": "/thoughts", "description": "List thoughts (?category=&sort=hearts|date&page=&limit=)"},
        {"method": "GET", "path": "/thoughts/:id", "description": "Get one thought by ID"},
        {"method": "POST", "path": "/thoughts", "description": "Create a thought"},
        {"method": "PATCH", "path": "/thoughts/:id", "description": "Edit your own thought"},
        {"method": "POST", "path": "/thoughts/:id/like", "description": "Like a thought"},
        {"method": "DELETE", "path": "/thoughts/:id", "description": "Delete your own thought"},
        {"method": "GET", "path": "/categories", "description": "List categories in use"},
        {"method": "POST", "path": "/users", "description": "Register new user"},
        {"method": "POST", "path": "/sessions", "description": "Login (get access token)"},
        {"method": "DELETE", "path": "/users/me", "description": "Delete your account and thoughts"},
        {"method": "GET", "path": "/users", "description": "List users (admin)"},
        {"method": "DELETE", "path": "/users/:id", "description": "Delete a user (self or admin)"},
    ],
    "authentication": {
        "description": "Some endpoints require authentication",
        "howTo": "Include 'Authorization' header with your access token",
        "protectedEndpoints": [
            "POST /thoughts",
            "PATCH /thoughts/:id",
            "DELETE /thoughts/:id",
            "DELETE /users/me",
            "GET /users",
            "DELETE /users/:id",
        ],
    },
}


def create_application(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # --- LIFESPAN: connect the store, create tables, dispose on shutdown ---
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database = Database.from_settings(settings)
        database.connect()
        await database.create_all()
        app.state.db = database
        logger.info("%s started (%s)", settings.PROJECT_NAME, settings.ENVIRONMENT)
        try:
            yield
        finally:
            await database.dispose()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.PROJECT_VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings

    if settings.BACKEND_CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.BACKEND_CORS_ORIGINS,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app, expose_details=not settings.is_production)
    app.include_router(api_router)

    @app.get("/")
    def root():
        return {"message": f"Welcome to {settings.PROJECT_NAME}", **API_INDEX}

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


app = create_application()
