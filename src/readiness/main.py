"""
Strategic Readiness Platform FastAPI Application

Adaptive assessment engine that places respondents into AI-readiness personas.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from readiness import __version__
from readiness.assessment import AssessmentEngine
from readiness.config import settings
from readiness.core.database import close_db, engine


async def check_database() -> None:
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan events.

    Startup:
    - Report the assessment catalogue
    - Verify database connection (database session store only)

    Shutdown:
    - Close database connections
    """
    # Startup
    print("🚀 Strategic Readiness Platform starting...")

    assessment_types = AssessmentEngine.get_available_assessment_types()
    print(f"📋 {len(assessment_types)} assessment types available")

    if settings.SESSION_STORE == "database":
        try:
            await check_database()
            print("✅ Database connection verified")
        except Exception as e:
            print(f"❌ Database connection failed: {e}")
            raise
    else:
        print("💾 Using in-memory session store")

    print("✅ Strategic Readiness Platform ready!")

    yield

    # Shutdown
    print("🛑 Strategic Readiness Platform shutting down...")
    await close_db()
    print("✅ Shutdown complete")


def create_app() -> FastAPI:
    """Create and configure FastAPI application.

    Returns:
        Configured FastAPI app instance
    """
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="Strategic Readiness Platform",
        description="Adaptive assessment engine for AI-readiness personas",
        version=__version__,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.is_local else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health check endpoints
    @app.get("/", tags=["Health"])
    async def root() -> dict[str, str]:
        """Root endpoint."""
        return {
            "service": "Strategic Readiness Platform",
            "status": "operational",
            "version": __version__,
            "environment": settings.ENVIRONMENT,
        }

    @app.get("/health", tags=["Health"], response_model=None)
    async def health_check() -> JSONResponse:
        """Health check endpoint for load balancers.

        Returns:
            - status: healthy/unhealthy
            - checks: Individual health checks
        """
        checks: dict[str, dict[str, Any]] = {}

        # Session store health
        if settings.SESSION_STORE == "database":
            try:
                await check_database()
                checks["database"] = {"status": "healthy"}
            except Exception as e:
                checks["database"] = {"status": "unhealthy", "error": str(e)}
        else:
            checks["session_store"] = {"status": "healthy", "backend": "memory"}

        # Assessment catalogue health
        try:
            assessment_types = AssessmentEngine.get_available_assessment_types()
            checks["assessment_engine"] = {
                "status": "healthy",
                "assessment_types": len(assessment_types),
            }
        except Exception as e:
            checks["assessment_engine"] = {"status": "unhealthy", "error": str(e)}

        # Overall status
        all_healthy = all(check["status"] == "healthy" for check in checks.values())
        status_code = 200 if all_healthy else 503

        return JSONResponse(
            status_code=status_code,
            content={
                "status": "healthy" if all_healthy else "unhealthy",
                "environment": settings.ENVIRONMENT,
                "checks": checks,
            },
        )

    @app.get("/health/ready", tags=["Health"], response_model=None)
    async def readiness_check() -> dict[str, str] | JSONResponse:
        """Readiness check for Kubernetes.

        Returns 200 when app is ready to serve traffic.
        """
        if settings.SESSION_STORE != "database":
            return {"status": "ready"}

        try:
            await check_database()
            return {"status": "ready"}
        except Exception:
            return JSONResponse(
                status_code=503,
                content={"status": "not_ready"},
            )

    @app.get("/health/live", tags=["Health"])
    async def liveness_check() -> dict[str, str]:
        """Liveness check for Kubernetes.

        Returns 200 if app is alive (even if not fully functional).
        """
        return {"status": "alive"}

    # Register API routers
    from readiness.api.v1 import assessments

    app.include_router(assessments.router, prefix="/api/v1/assessments", tags=["Assessments"])

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "readiness.main:app",
        host="0.0.0.0",  # nosec B104 - Intentional for containerized deployment
        port=8000,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )
