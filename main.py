"""
Scorebook - Live Cricket Match Scoring API
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from scorebook.config import settings
from scorebook.database import init_db
from scorebook.api.scoring import router as scoring_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Scorebook",
    description="Ball-by-ball live cricket scoring API",
    version="0.1.0",
)

# CORS origins - local scorer UIs plus anything from the environment
default_origins = [
    "http://localhost:5173",
    "http://localhost:5174",
    "http://127.0.0.1:5173",
    "http://127.0.0.1:5174",
]
default_origins.extend(o for o in settings.CORS_ORIGINS if o not in default_origins)

app.add_middleware(
    CORSMiddleware,
    allow_origins=default_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(scoring_router, prefix="/api")


@app.on_event("startup")
def startup_event():
    """Initialize database on startup"""
    init_db()
    logger.info("Scorebook API ready (db=%s)", settings.DATABASE_PATH)


@app.get("/")
def root():
    """Health check endpoint"""
    return {
        "name": "Scorebook API",
        "version": "0.1.0",
        "status": "running",
    }


@app.get("/api/health")
def health_check():
    """API health check"""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
