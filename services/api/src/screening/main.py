import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from services.api.src.screening.config import settings
from services.api.src.screening.routes import api_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup."""
    if settings.create_tables_on_startup:
        from services.api.src.screening.db.engine import create_tables, get_engine
        create_tables(get_engine())
        logger.info("tables_ensured")

    yield


app = FastAPI(title="Mental Health Screening API", lifespan=lifespan)

# CORS for frontend
cors_origins = [
    "http://localhost:3000",
    "https://localhost:3000",
]

if settings.cors_origin:
    cors_origins.append(settings.cors_origin)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.get("/")
def root() -> dict[str, str]:
    return {"service": "mental-health-screening-api", "docs": "/docs"}


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
