from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging

from tripai.api import auth, trips, health
from tripai.config import get_settings
from tripai.database import init_db
from tripai.errors import TripAIError, ValidationError

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
# httpx logs every request URL at INFO
logging.getLogger("httpx").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting TripAI")
    init_db()
    if not settings.gemini_api_key:
        logger.warning("GEMINI_API_KEY not set - itinerary generation is disabled")

    yield

    logger.info("Shutting down TripAI")


app = FastAPI(
    title="TripAI",
    description="AI-generated travel itineraries",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE"],
    allow_headers=["*"],
)


@app.exception_handler(TripAIError)
async def tripai_error_handler(request: Request, exc: TripAIError):
    logger.info(f"{request.method} {request.url.path} -> {exc.kind}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    detail = "Invalid request body."
    if errors:
        location = ".".join(str(part) for part in errors[0].get("loc", ()) if part != "body")
        detail = f"{location}: {errors[0].get('msg')}" if location else errors[0].get("msg", detail)
    error = ValidationError(detail)
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(trips.router, prefix="/api/trips", tags=["trips"])
app.include_router(health.router, tags=["health"])


# Health check for monitoring/Docker
@app.get("/ping")
async def ping():
    """Simple ping endpoint for health checks."""
    return {"status": "ok"}
