import os
import logging
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn
from sqlalchemy import text
from sqlalchemy.orm import Session

from noticias.api.api import api_router
from noticias.api import deps
from noticias.core.config import settings
from noticias.core.exceptions import NoticiasError
from noticias.crud.crud_category import seed_initial_categories
from noticias.db.base import Base
from noticias.db.session import engine, SessionLocal

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application is starting up")
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created")
    db = SessionLocal()
    try:
        seed_initial_categories(db)
        logger.info("Initial categories seeded successfully")
    finally:
        db.close()
    deps.category_cache.listen()
    yield
    deps.category_cache.unlisten()
    logger.info("Application is shutting down")


app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url="/api/openapi.json",
    lifespan=lifespan
)

app.include_router(api_router, prefix="/api")
logger.info("API router included")

if settings.BACKEND_CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT"],
        allow_headers=["*"],
    )
    logger.info(f"CORS middleware added with origins: {settings.BACKEND_CORS_ORIGINS}")
else:
    logger.warning("No CORS origins specified. CORS middleware not added.")


@app.get("/health")
def health_check(db: Session = Depends(deps.get_db)):
    try:
        db.execute(text("SELECT 1"))
        logger.info("Health check passed")
        return {"status": "healthy", "database": "connected"}
    except Exception as e:
        logger.error(f"Health check failed: {str(e)}")
        return JSONResponse(
            status_code=500,
            content={"status": "unhealthy", "database": "disconnected"}
        )


@app.exception_handler(NoticiasError)
async def noticias_exception_handler(request: Request, exc: NoticiasError):
    logger.warning(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {str(exc)}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"detail": "An unexpected error occurred."}
    )


@app.middleware("http")
async def add_request_id_header(request: Request, call_next):
    request_id = str(uuid.uuid4())
    logger.info(f"Request {request_id}: {request.method} {request.url}")
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    logger.info(f"Response {request_id}: Status {response.status_code}")
    return response


def run_server():
    environment = os.getenv("ENVIRONMENT", "development")
    logger.info(f"Running server in {environment} environment")
    port = int(os.getenv("PORT", 8080))
    if environment == "development":
        uvicorn.run("noticias.main:app", host="0.0.0.0", port=port, reload=True)
    else:
        uvicorn.run(app, host="0.0.0.0", port=port)


if __name__ == "__main__":
    run_server()
