"""FastAPI application exposing the shift schedule optimizer."""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Config
from .logger import configure_logging
from .routes import optimize_router, run_router
from .services.singleton import shutdown_optimization_service

config = Config()

# Configure logging
configure_logging(config.LOG_LEVEL, config.LOG_FILE)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Cancel live runs and close the progress trace
    shutdown_optimization_service()


# Initialize FastAPI app
app = FastAPI(title="Shift Schedule Optimizer API", version="1.0.0", lifespan=lifespan)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(optimize_router)
app.include_router(run_router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": "Shift Schedule Optimizer API", "status": "running"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=config.API_HOST, port=config.API_PORT)
