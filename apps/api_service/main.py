"""
Caliber API Service

FastAPI application serving the compliance matrix, gap reports, and
requirement / certification management.
"""

import uuid
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from shared.utils.config import get_settings
from shared.utils.logging import bind_request_context, clear_context, get_logger, setup_logging

setup_logging()
logger = get_logger("api_service")
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    logger.info("Starting API service", debug=settings.debug)
    yield
    logger.info("Shutting down API service")


app = FastAPI(
    title="Caliber API",
    description="Skill matrix and compliance tracking API",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_id_middleware(request: Request, call_next) -> Response:
    """Add request_id to all requests and responses."""
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id
    bind_request_context(request_id, path=request.url.path)

    try:
        response = await call_next(request)
    finally:
        clear_context()

    response.headers["X-Request-Id"] = request_id
    return response


@app.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "api_service",
        "version": "0.1.0",
    }


# Import and include routers
from apps.api_service.routers import certifications, dashboard, employees, matrix, requirements, skills

app.include_router(matrix.router, prefix="/matrix", tags=["matrix"])
app.include_router(employees.router, prefix="/employees", tags=["employees"])
app.include_router(requirements.router, prefix="/requirements", tags=["requirements"])
app.include_router(certifications.router, prefix="/certifications", tags=["certifications"])
app.include_router(skills.router, prefix="/skills", tags=["skills"])
app.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "apps.api_service.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
    )
