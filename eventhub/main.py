# eventhub/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from eventhub.api.v1.api import api_router
from eventhub.core.config import settings
from eventhub.core.exceptions import EventHubError
from eventhub.core.limiter import limiter
from eventhub.scheduler import init_scheduler, shutdown_scheduler

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("EventHub service starting up (env=%s)", settings.ENV)
    if settings.SCHEDULER_ENABLED:
        init_scheduler()
    yield
    if settings.SCHEDULER_ENABLED:
        shutdown_scheduler()
    logger.info("EventHub service shutting down")


app = FastAPI(
    title="EventHub Community Events Service",
    version="1.0.0",
    description="""
        **EventHub** runs a community event calendar.

        * Hosts submit events, admins approve or reject them
        * Attendees register for published events, free or paid
        * Payments are reconciled from both the checkout redirect and gateway webhooks
        * Scheduled sweeps expire stale submissions and complete past events

        Host and admin endpoints require `Authorization: Bearer <token>`.
        Sweep endpoints require the cron secret as the bearer credential.
        """,
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(EventHubError)
async def eventhub_error_handler(request: Request, exc: EventHubError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api/v1")


@app.get("/")
def read_root():
    return {"status": "EventHub service is running"}
