import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from starlette.middleware.cors import CORSMiddleware

from timerapi import containers
from timerapi.config import settings
from timerapi.core.exception_handlers import (
    handle_base_api_exception,
    handle_http_exception,
    handle_service_exception,
    handle_unexpected_error,
    handle_validation_error,
)
from timerapi.core.exceptions import BaseAPIException, ServiceException
from timerapi.core.logging_middleware import LoggingMiddleware
from timerapi.logging_config import setup_logging
from timerapi.routers import (
    analytics_router,
    health_router,
    public_router,
    timer_router,
)

load_dotenv("timerapi/.env")
setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """스케줄러 시작/종료"""
    logger.info(f"Starting {settings.APP_NAME} ({settings.ENVIRONMENT})")

    scheduler = app.container.services.timer_scheduler()  # type: ignore[attr-defined]
    if settings.SCHEDULER_ENABLED:
        scheduler.start(run_immediately=settings.SCHEDULER_RUN_ON_START)
    else:
        logger.info("[Scheduler] Disabled by configuration")

    yield

    scheduler.stop()
    logger.info(f"Stopped {settings.APP_NAME}")


app = FastAPI(title=settings.APP_NAME, debug=settings.DEBUG, lifespan=lifespan)
app.container = containers.Container()  # type: ignore

app.add_middleware(LoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(BaseAPIException, handle_base_api_exception)
app.add_exception_handler(HTTPException, handle_http_exception)
app.add_exception_handler(RequestValidationError, handle_validation_error)
app.add_exception_handler(ServiceException, handle_service_exception)
app.add_exception_handler(Exception, handle_unexpected_error)


@app.get("/")
def hello() -> dict:
    return {"message": "Countdown timer API"}


app.include_router(health_router.router)
app.include_router(timer_router.router, prefix=settings.API_PREFIX)
app.include_router(public_router.router, prefix=settings.API_PREFIX)
app.include_router(analytics_router.router, prefix=settings.API_PREFIX)
