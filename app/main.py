# === backend/app/main.py ===
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware
from contextlib import asynccontextmanager
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from app.api.v1.api import api_router
from app.db.database import create_db_and_tables, engine
from app.core.config import settings
import time
import logging

#logging
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

SLOW_REQUEST_SECONDS = 5

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting {settings.APP_NAME} {settings.APP_VERSION}")
    await create_db_and_tables()
    yield
    await engine.dispose()
    logger.info("Shut down")

app = FastAPI(
    lifespan=lifespan,
    title=settings.APP_NAME,
    description="Projects, notes, issues, teams, goals and credentials, with JSON/PDF backups to Google Drive",
    version=settings.APP_VERSION
)

app.add_middleware(TrustedHostMiddleware, allowed_hosts=["*"])

#CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL] if settings.FRONTEND_URL else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition", "X-Process-Time"],
    max_age=86400,
)

#Session middleware (Google sign-in state)
app.add_middleware(SessionMiddleware, secret_key=settings.SECRET_KEY)


@app.middleware("http")
async def time_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed = time.perf_counter() - started
    response.headers["X-Process-Time"] = f"{elapsed:.4f}"

    if elapsed > SLOW_REQUEST_SECONDS:
        logger.warning(f"Slow request: {request.method} {request.url.path} took {elapsed:.2f}s")
    return response

@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Database error on {request.method} {request.url.path}: {str(exc)}")
    return JSONResponse(status_code=500, content={"detail": "Database error"})

app.include_router(api_router, prefix="/api/v1")

@app.get("/health")
async def health_check():
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        database = "ok"
    except SQLAlchemyError as e:
        logger.error(f"Health check could not reach the database: {str(e)}")
        database = "unavailable"
    return {
        "status": "healthy" if database == "ok" else "degraded",
        "database": database,
        "timestamp": time.time(),
        "version": settings.APP_VERSION,
    }

@app.get("/")
async def root():
    return {
        "message": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "api": "/api/v1",
        "docs": "/docs",
        "health": "/health",
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=settings.LOG_LEVEL.lower(),
    )
