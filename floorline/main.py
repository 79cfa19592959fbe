from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from floorline.api.middleware import AuditMiddleware
from floorline.api.v1.router import v1_router
from floorline.common.exceptions import SchedulingRejection
from floorline.common.logging import get_logger, setup_logging
from floorline.config import settings

VERSION = "1.0.0"

logger = get_logger("app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info("Floorline %s starting (env=%s)", VERSION, settings.APP_ENV)
    yield


app = FastAPI(
    title="Floorline API",
    description="Projects, quotes, change orders and job scheduling for flooring installs",
    version=VERSION,
    lifespan=lifespan,
)

origins = [o.strip() for o in settings.ALLOWED_ORIGINS.split(",")] if settings.ALLOWED_ORIGINS != "*" else ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(AuditMiddleware)


@app.exception_handler(SchedulingRejection)
async def scheduling_rejection_handler(request: Request, exc: SchedulingRejection):
    # ``detail`` is the user-facing message, ``reason`` the machine-readable code.
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "reason": exc.reason},
    )


app.include_router(v1_router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "service": "floorline",
        "version": VERSION,
        "env": settings.APP_ENV,
    }
