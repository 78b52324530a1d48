from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from minietl.api.router import api_router
from minietl.config import get_settings
from minietl.core.logging import setup_logging
from minietl.dependencies import get_run_controller

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    # Startup: produce the initial run so the first page load has data
    setup_logging()
    controller = get_run_controller()
    await controller.run_once()
    yield
    # Shutdown
    controller.simulator.cancel()


app = FastAPI(
    title="MiniETL",
    description="Demo Extract -> Transform -> Load pipeline over SpaceX launches",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/api/docs" if settings.debug else None,
    redoc_url="/api/redoc" if settings.debug else None,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint for load balancers."""
    return {"status": "healthy"}
