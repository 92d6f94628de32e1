# usbest/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from usbest.core.config import settings
from usbest.core.errors import UsBestError
from usbest.core.logging import setup_logging
from usbest.api.v1.endpoints import auth, content, dashboard, engagement, health, posts, surveys
from usbest.db.session import check_db_connection

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

API_V1_PREFIX = "/api/v1"

app = FastAPI(
    title=settings.APP_NAME,
    description="Feed, engagement and survey results for UsBest!",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(UsBestError)
def usbest_error_handler(request: Request, exc: UsBestError):
    logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
    body = {"detail": exc.message}
    if exc.details:
        body["errors"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=body)


# Versioned routers
app.include_router(health.router,     prefix=API_V1_PREFIX)
app.include_router(auth.router,       prefix=API_V1_PREFIX)
app.include_router(content.router,    prefix=API_V1_PREFIX)
app.include_router(posts.router,      prefix=API_V1_PREFIX)
app.include_router(engagement.router, prefix=API_V1_PREFIX)
app.include_router(surveys.router,    prefix=API_V1_PREFIX)
app.include_router(dashboard.router,  prefix=API_V1_PREFIX)


@app.get("/health")
def health_root():
    return {"status": "ok"}


@app.get("/api/v1/health/db")
def health_db():
    if not check_db_connection():
        return JSONResponse(status_code=503, content={"db": "unavailable"})
    return {"db": "ok"}


@app.get("/")
def root():
    return {
        "message": "UsBest! API",
        "version": "1.0.0",
        "docs": "/docs",
        "api_v1": API_V1_PREFIX,
    }
