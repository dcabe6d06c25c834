from dotenv import load_dotenv
from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import os
import logging
import sys

# Load environment variables from .env file, specifying the path
# Assumes .env is in the 'backend' directory
dotenv_path = os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", ".env")
load_dotenv(dotenv_path=dotenv_path)

# Import settings and database session management
from podcast_generator.core.config import settings
from podcast_generator.db.session import engine, Base
import podcast_generator.models  # noqa: F401  registers the tables on Base.metadata

# Configure logging for the entire application
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger(__name__)

# Import the API routers for each resource
from podcast_generator.api.v1 import podcast

# --- Database Table Creation ---
def create_tables():
    """
    Creates all database tables based on the SQLAlchemy Base metadata.
    """
    Base.metadata.create_all(bind=engine)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Runs when the FastAPI application starts; creates the database tables.
    """
    logger.debug("Main: Startup event triggered. Creating database tables.")
    create_tables()
    yield

# Create the main FastAPI application instance
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Generate AI-powered podcast conversations from content analysis",
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    lifespan=lifespan,
)

# --- Middleware ---
# The settings below are permissive; for production, you should restrict
# the allowed origins to your specific frontend domain.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- API Routers ---
app.include_router(podcast.router, prefix=f"{settings.API_V1_STR}/podcasts", tags=["Podcasts"])
logger.debug(f"Main: Including podcast router with prefix: {settings.API_V1_STR}/podcasts")

# --- Root Endpoint ---
@app.get("/", tags=["Root"])
def read_root():
    """
    A simple root endpoint for health checks and to welcome users.
    """
    return {"message": f"Welcome to the {settings.PROJECT_NAME}"}
