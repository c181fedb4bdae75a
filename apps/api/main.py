"""
ScriptOS - FastAPI Backend
Main application entry point: creation studio for video scripts, styles and
channel identity.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import settings, validate_security_settings
from database import engine, Base
import models  # noqa: F401
from routers import (
    health,
    youtube,
    writer,
    scripts,
    styles,
    trends,
    profile,
    automations,
    chat,
    ux,
)
from routers.ux import WorkspaceState


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    # Startup
    print("🚀 Starting ScriptOS API...")
    validate_security_settings()
    if settings.AUTO_CREATE_DB_SCHEMA:
        try:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            print("🗄️ Store schema verified.")
        except Exception as e:
            print(f"⚠️ Store bootstrap skipped: {e}")
    app.state.workspace = WorkspaceState()
    yield
    # Shutdown
    await engine.dispose()
    print("👋 Shutting down API...")


app = FastAPI(
    title="ScriptOS API",
    description="Write, analyze and produce YouTube scripts with channel-aware AI assistance",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router, tags=["Health"])
app.include_router(youtube.router, prefix="/youtube", tags=["YouTube"])
app.include_router(writer.router, prefix="/writer", tags=["Writer"])
app.include_router(scripts.router, prefix="/scripts", tags=["Scripts"])
app.include_router(styles.router, prefix="/styles", tags=["Styles"])
app.include_router(trends.router, prefix="/trends", tags=["Trends"])
app.include_router(profile.router, prefix="/profile", tags=["Profile"])
app.include_router(automations.router, prefix="/automations", tags=["Automations"])
app.include_router(chat.router, prefix="/chat", tags=["Chat"])
app.include_router(ux.router, prefix="/ux", tags=["UX"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "ScriptOS API",
        "version": "0.1.0",
        "status": "running"
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host=settings.API_HOST, port=settings.API_PORT, reload=False)
