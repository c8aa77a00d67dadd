"""
Signify - FastAPI Application

Main entry point for the Signify backend.

Architecture:
- People / Connections → relationship graph
- Signals → signal classifier → current risk badge
- Signal log → recomputation engine → timeline with risk after each event
- Remediation catalog → actions recorded against logged events
"""
import logging
import os
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .routers import people_router, signal_log_router, catalog_router, data_router, ai_router
from .database import SessionLocal, init_db
from .seed import seed_demo_data

logging.basicConfig(
    level=os.getenv("SIGNIFY_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

SEED_DEMO = os.getenv("SIGNIFY_SEED_DEMO", "1").lower() not in ("0", "false", "no")

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173").split(",")
    if origin.strip()
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize database (and demo caseload) on startup."""
    init_db()
    if SEED_DEMO:
        db = SessionLocal()
        try:
            seed_demo_data(db)
        finally:
            db.close()
    yield

# Create FastAPI app
app = FastAPI(
    lifespan=lifespan,
    title="Signify",
    description="""
    Signify - Youth Homelessness Risk Tracking

    Case workers track young people at risk of homelessness, the people around
    them, and the life events that move their risk up or down.

    ## Risk model
    1. **Signals**: seven yes/no indicators → current risk badge (count based)
    2. **Signal log**: dated life events with signed impact → cumulative risk timeline
    3. **Remediation**: catalog actions recorded against events (no effect on risk)

    ## Key Principles
    - Risk categories are always derived, never stored
    - Every signal log change refolds the whole timeline in date order
    - Unknown ids and unparseable numbers fail soft instead of erroring
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(people_router)
app.include_router(signal_log_router)
app.include_router(catalog_router)
app.include_router(data_router)
app.include_router(ai_router)


@app.get("/")
async def root():
    """Root endpoint - API information."""
    return {
        "name": "Signify",
        "version": __version__,
        "description": "Youth homelessness risk tracking",
        "docs": "/docs",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


# For running with: python -m signify.main
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "5050")))
