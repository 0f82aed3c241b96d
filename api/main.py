"""
FastAPI Application - Content Ranking Engine API
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import settings, ensure_directories
from database import init_engine, close_engine, init_database_async
from utils.logger import init_logging
from .routes import router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    # Startup
    ensure_directories()
    init_logging("api")
    await init_engine()
    await init_database_async()
    yield
    # Shutdown
    await close_engine()


app = FastAPI(
    title="Content Ranking Engine",
    description="New, Popular, Trending and Featured listings for tracks, bundles and kits",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify actual origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routes
app.include_router(router, prefix="/api")


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "Content Ranking Engine",
        "version": "1.0.0",
        "status": "running"
    }


def main():
    import uvicorn
    uvicorn.run("api.main:app", host=settings.API_HOST, port=settings.API_PORT)


if __name__ == "__main__":
    main()
