# /notegen/main.py

# --- Core FastAPI Imports ---
import os
from contextlib import asynccontextmanager
from urllib.parse import urlparse

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

# --- Application-specific Imports ---
from .core.config import Settings
from .core.errors import ErrorKind, FileTooLargeError, NotegenError
from .core.logging import configure_logging, get_logger
from .db.database import build_engine, init_db, SessionLocal
from .routers import auth_router, generations_router, upload_router
from .services.gemini_service import GeminiTextGenerator
from .services.object_store import build_object_store

logger = get_logger(__name__)

ERROR_STATUS_CODES = {
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.UNSUPPORTED_FORMAT: 415,
    ErrorKind.EXTRACTION_ERROR: 422,
    ErrorKind.LOW_SIGNAL: 422,
    ErrorKind.EMPTY_CONTENT: 422,
    ErrorKind.STORAGE_ERROR: 502,
    ErrorKind.GENERATION_ERROR: 502,
    ErrorKind.PERSISTENCE_ERROR: 500,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.INTERNAL: 500,
}

LOCAL_FILES_ROUTE_NAME = "local_files"


def mount_local_files(app: FastAPI, settings: Settings) -> None:
    """Serves the local object store's directory at the path of its public base URL."""
    mount_path = urlparse(settings.local_storage_base_url).path.rstrip("/") or "/files"
    os.makedirs(settings.local_storage_dir, exist_ok=True)
    # A restarted lifespan may point at a different directory; replace the old mount.
    app.router.routes[:] = [
        route for route in app.router.routes if getattr(route, "name", None) != LOCAL_FILES_ROUTE_NAME
    ]
    app.mount(mount_path, StaticFiles(directory=settings.local_storage_dir), name=LOCAL_FILES_ROUTE_NAME)


# --- Application Lifecycle Management ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Runs once at startup. A missing credential stops the process here.
    settings = Settings.from_env()
    configure_logging(settings.log_level)

    engine = build_engine(settings.database_url)
    SessionLocal.configure(bind=engine)
    init_db(bind=engine)

    app.state.settings = settings
    app.state.object_store = build_object_store(settings)
    app.state.text_generator = GeminiTextGenerator.from_settings(settings)
    if settings.object_store_backend == "local":
        mount_local_files(app, settings)
    logger.info("notegen_started", object_store=settings.object_store_backend, model=settings.gemini_model)
    yield
    engine.dispose()


# --- FastAPI Application Instance Creation ---
app = FastAPI(
    title="Notegen Backend API",
    description="Turns uploaded documents into summaries, flashcards and key points.",
    version="1.0.0",
    lifespan=lifespan,
)

# --- Middleware Configuration ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Classified Error Translation ---
@app.exception_handler(NotegenError)
async def notegen_error_handler(request: Request, exc: NotegenError):
    status_code = 413 if isinstance(exc, FileTooLargeError) else ERROR_STATUS_CODES.get(exc.kind, 500)
    detail = exc.message
    if exc.kind == ErrorKind.INTERNAL:
        # Details were logged where the error was raised.
        detail = "An unexpected error occurred."
    return JSONResponse(status_code=status_code, content={"kind": exc.kind.value, "detail": detail})


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    # Missing or malformed request fields are invalid input like any other.
    problems = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path"))
        problems.append(f"{field}: {error.get('msg')}" if field else str(error.get("msg")))
    detail = "Invalid request. " + "; ".join(problems)
    logger.warning("request_validation_failed", path=request.url.path, problems=problems)
    return JSONResponse(
        status_code=ERROR_STATUS_CODES[ErrorKind.INVALID_INPUT],
        content={"kind": ErrorKind.INVALID_INPUT.value, "detail": detail},
    )


# --- API Router Inclusion ---
app.include_router(auth_router.router, prefix="/api/auth", tags=["Auth"])
app.include_router(upload_router.router, prefix="/api/upload", tags=["Upload"])
app.include_router(generations_router.router, prefix="/api/generations", tags=["Generations"])


# --- Root / Health Check Endpoint ---
@app.get("/", tags=["Health Check"])
async def read_root():
    """A simple health check endpoint to confirm the API is online."""
    return {"status": "Notegen Backend is running!", "version": app.version}
