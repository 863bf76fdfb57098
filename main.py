import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.engine import Engine

from app.config import Settings, get_settings
from app.infrastructure import database
from app.infrastructure.database import build_session_factory, initialize_database
from app.infrastructure.realtime import ChangeEventPublisher, ChangeFeed
from app.interfaces.api.routes import register_routes


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the schema on startup and release the engine on shutdown."""

    initialize_database(app.state.engine)
    yield
    app.state.engine.dispose()


def create_app(settings: Settings | None = None, engine: Engine | None = None) -> FastAPI:
    """Build the FastAPI application with its own change feed and session factory."""

    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(title="Book Exchange", lifespan=lifespan)

    app.state.engine = engine or database.engine
    app.state.session_factory = build_session_factory(app.state.engine)
    app.state.change_feed = ChangeFeed()
    app.state.publisher = ChangeEventPublisher(app.state.change_feed)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app


app = create_app()
