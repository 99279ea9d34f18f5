from contextlib import asynccontextmanager
import logging

from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from liftlog.api.v1.dashboard import router as dashboard_router
from liftlog.api.v1.me import router as me_router
from liftlog.api.v1.workouts import router as workouts_router
from liftlog.core.errors import InvalidDateInput, ProfileIncomplete, StorageUnavailable, Unauthenticated
from liftlog.db.session import dispose_engine, get_db, init_engine
from liftlog.middleware.request_logging import RequestLoggingMiddleware


@asynccontextmanager
async def lifespan(_app: FastAPI):
    init_engine()
    yield
    await dispose_engine()


app = FastAPI(title="LiftLog Dashboard API", lifespan=lifespan)
logging.basicConfig(level=logging.INFO)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ],
    allow_credentials=False,
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "X-Client-Timezone", "X-Request-ID"],
)
app.add_middleware(RequestLoggingMiddleware)
app.include_router(me_router)
app.include_router(workouts_router)
app.include_router(dashboard_router)


@app.exception_handler(Unauthenticated)
async def unauthenticated_handler(request: Request, exc: Unauthenticated):
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"detail": "Not authenticated"},
        headers={"WWW-Authenticate": "Bearer"},
    )


@app.exception_handler(ProfileIncomplete)
async def profile_incomplete_handler(request: Request, exc: ProfileIncomplete):
    return JSONResponse(
        status_code=status.HTTP_403_FORBIDDEN,
        content={"detail": "Profile incomplete: email address required"},
    )


@app.exception_handler(InvalidDateInput)
async def invalid_date_handler(request: Request, exc: InvalidDateInput):
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": str(exc)},
    )


@app.exception_handler(StorageUnavailable)
async def storage_unavailable_handler(request: Request, exc: StorageUnavailable):
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Storage unavailable"},
    )


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/healthz")
def healthz():
    return {"status": "ok"}


@app.get("/health/db")
async def health_db(db: AsyncSession = Depends(get_db)):
    await db.execute(text("SELECT 1"))
    return {"db": "ok"}
