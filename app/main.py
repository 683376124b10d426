import logging
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from .core.settings import get_settings
from codemove import RoleAssignor, RoomHub, RoomRegistry
from app.api.restful.codeblocks import CodeBlockCatalog, router as codeblocks_router
from app.api.restful.rooms import router as rooms_router
from app.api.ws.room import router as room_router
from app.api.ws.connection.connection_manager import ConnectionManager

# Get settings instance
settings = get_settings()

# Configure logging
handlers = [logging.StreamHandler()]
if settings.log_file:
    handlers.append(logging.FileHandler(settings.log_file))
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format=settings.log_format,
    handlers=handlers,
)

logger = logging.getLogger(__name__)


def build_hub(settings) -> RoomHub:
    """Wire registry, role policy and delivery limits from settings."""
    registry = RoomRegistry(
        assignor=RoleAssignor(allow_mentor_reclaim=settings.allow_mentor_reclaim),
        strict=settings.invariants_are_fatal,
    )
    return RoomHub(
        registry,
        send_timeout=settings.send_timeout,
        max_code_length=settings.max_code_length,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    current = get_settings()
    logger.info("FastAPI server is starting up...")
    app.state.connection_manager = ConnectionManager(build_hub(current))
    app.state.catalog = CodeBlockCatalog(seed=current.seed_catalog)
    yield
    logger.info("FastAPI server is shutting down...")
    await app.state.connection_manager.close_all()


app = FastAPI(
    title=settings.app_name,
    description=settings.app_description,
    version=settings.app_version,
    debug=settings.debug,
    lifespan=lifespan
)

# Add CORS middleware with configurable settings
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_credentials,
    allow_methods=settings.cors_methods,
    allow_headers=settings.cors_headers,
)

app.include_router(codeblocks_router)
app.include_router(rooms_router)
app.include_router(room_router)


@app.get("/")
async def root():
    logger.info("Root endpoint accessed")
    return {"message": "Welcome to CodeMove", "status": "running"}


@app.get("/health")
async def health_check():
    logger.info("Health check endpoint accessed")
    manager = app.state.connection_manager
    return {
        "status": "healthy",
        "service": settings.app_name,
        "rooms": len(manager.hub.registry),
        "connections": manager.get_total_connections(),
    }


@app.get("/settings")
async def get_app_settings():
    """Get current application settings (excluding sensitive information)"""
    logger.info("Settings endpoint accessed")
    current = get_settings()
    return {
        "app_name": current.app_name,
        "app_version": current.app_version,
        "environment": current.environment,
        "debug": current.debug,
        "host": current.host,
        "port": current.port,
        "log_level": current.log_level,
        "allow_mentor_reclaim": current.allow_mentor_reclaim,
        "strict_invariants": current.invariants_are_fatal,
        "send_timeout": current.send_timeout,
        "max_code_length": current.max_code_length,
    }

if __name__ == "__main__":
    logger.info("Starting server with Uvicorn...")
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_level=settings.log_level.lower()
    )
