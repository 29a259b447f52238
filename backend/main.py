"""
ReactionRace FastAPI Application

Main entry point for the reaction race server.
Configures FastAPI with CORS, routes, the room registry and database.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import uvicorn

from reaction_race.config import get_settings
from reaction_race.core.room_registry import RoomRegistry
from reaction_race.database import init_db
from reaction_race.api.routes import health, racing, records, config

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.

    Handles:
    - Database initialisation and room registry creation on startup
    - Room registry teardown on shutdown
    """
    # Startup
    print(f"Starting {settings.APP_NAME} v{settings.VERSION}")
    init_db()
    app.state.room_registry = RoomRegistry()
    print(f"Server ready on {settings.server.HOST}:{settings.server.PORT}")

    yield

    # Shutdown
    print("Shutting down server...")
    app.state.room_registry.close()


# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.VERSION,
    description="A multiplayer reaction-time racing mini-game",
    lifespan=lifespan,
    debug=settings.DEBUG,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.server.CORS_ORIGINS),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router, tags=["health"])
app.include_router(racing.router, tags=["racing"])
app.include_router(records.router)
app.include_router(config.router)


@app.get("/")
async def root() -> dict:
    """
    Root endpoint.

    Returns:
        dict: Welcome message and API information.
    """
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.VERSION,
        "docs": "/docs",
        "health": "/health",
    }


if __name__ == "__main__":
    uvicorn.run(app, host=settings.server.HOST, port=settings.server.PORT)
