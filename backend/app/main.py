import logging
import traceback
from contextlib import asynccontextmanager

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.db import Base, async_session, engine
from app.exceptions import SubscriptionError
from app.routers import subscriptions
from app.services.scheduler import update_next_payment_dates
from app.services.store import SubscriptionStore

logging.basicConfig(level=logging.DEBUG if settings.DEBUG else logging.INFO)
logger = logging.getLogger(__name__)

scheduler = AsyncIOScheduler()


async def run_scheduled_tasks() -> None:
    async with async_session() as db:
        await update_next_payment_dates(SubscriptionStore(db))


@asynccontextmanager
async def lifespan(app: FastAPI):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    if settings.SCHEDULER_ENABLED:
        scheduler.add_job(run_scheduled_tasks, "cron", hour=9, minute=0)
        scheduler.start()

    yield

    if scheduler.running:
        scheduler.shutdown()
    await engine.dispose()


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(subscriptions.router, prefix="/api/v1")


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    field_errors: dict[str, list[str]] = {}
    for err in exc.errors():
        field = str(err["loc"][-1]) if err.get("loc") else "__root__"
        field_errors.setdefault(field, []).append(err["msg"])
    return JSONResponse(
        status_code=422,
        content={"detail": "入力内容を確認してください", "field_errors": field_errors},
    )


@app.exception_handler(SubscriptionError)
async def subscription_error_handler(request: Request, exc: SubscriptionError):
    logger.warning(f"Rejected request: {exc.code} {exc.message}")
    return JSONResponse(status_code=400, content={"detail": exc.message, "code": exc.code})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error: {exc}\n{traceback.format_exc()}")
    return JSONResponse(status_code=500, content={"detail": str(exc)})


@app.get("/health")
async def health_check():
    return {"status": "ok", "app": settings.APP_NAME}
