import logging
import time
from contextlib import asynccontextmanager
from typing import Any, Dict

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute

from stylemy.api import api_router
from stylemy.core.config import settings
from stylemy.core.logging_config import setup_logging
from stylemy.utils.image_workflow import build_genai_client

setup_logging()
logger = logging.getLogger(__name__)


def custom_generate_unique_id(route: APIRoute) -> str:
    """
    Custom function to generate unique operation IDs for OpenAPI schema.
    This creates cleaner method names for generated client code.
    """
    if route.tags:
        return f"{route.tags[0]}_{route.name}"
    return route.name


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Missing credentials abort startup before any request is served
    app.state.genai_client = build_genai_client(settings)
    logger.info(f"[lifespan] Gemini client ready, model: {settings.GEMINI_IMAGE_MODEL}")
    yield
    app.state.genai_client = None


app = FastAPI(
    title="StyleMyBE",
    version="1.0.0",
    contact={
        "name": "StyleMy Team",
        "email": "support@stylemy.app",
    },
    license_info={
        "name": "MIT",
    },
    lifespan=lifespan,
    # Custom operation ID generation for better client code
    generate_unique_id_function=custom_generate_unique_id,
)


@app.middleware("http")
async def log_requests(request, call_next):
    start_time = time.time()
    logger.info(f"[REQUEST] {request.method} {request.url}")
    response = await call_next(request)
    elapsed = time.time() - start_time
    logger.info(f"[RESPONSE] {request.method} {request.url.path} -> {response.status_code} ({elapsed:.2f}s)")
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.all_cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)
app.include_router(api_router)


@app.get("/")
def root():
    return {"message": "Welcome to StyleMy Outfit API"}


@app.get("/health")
def health() -> Dict[str, Any]:
    """
    Service health check endpoint
    """
    return {
        "status": "ok",
        "model": settings.GEMINI_IMAGE_MODEL,
        "max_image_size_bytes": settings.MAX_IMAGE_SIZE_BYTES,
    }
