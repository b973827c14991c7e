import logging
import sqlite3
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from resume_builder.config import settings
from resume_builder.database import init_db
from resume_builder.routers import assist, auth, documents, health
from resume_builder.utils.filesystem import ensure_data_dir

logger = logging.getLogger("resume_builder")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: create the schema and integrity-check the database
    ensure_data_dir()
    try:
        init_db()
        conn = sqlite3.connect(str(settings.db_path))
        result = conn.execute("PRAGMA integrity_check").fetchone()
        conn.close()
        if result and result[0] == "ok":
            logger.info("Database integrity check passed.")
        else:
            logger.error("DATABASE INTEGRITY CHECK FAILED: %s", result)
    except sqlite3.Error as exc:
        logger.error("Could not initialise database at %s: %s", settings.db_path, exc)
    yield


app = FastAPI(
    title="Resume Builder Server",
    description="Document storage, download and interview helpers for the Resume Builder app",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Server error on %s %s", request.method, request.url.path)
    return PlainTextResponse("Internal Server Error", status_code=500)


app.include_router(auth.router, prefix=settings.api_prefix)
app.include_router(documents.router, prefix=settings.api_prefix)
app.include_router(assist.router, prefix=settings.api_prefix)
app.include_router(health.router, prefix=settings.api_prefix)
