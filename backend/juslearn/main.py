"""FastAPI application entrypoint and HTTP controllers.

This module defines the HTTP endpoints of the JusLearn backend.
Controllers are intentionally thin: they accept requests, delegate to
services, and return JSON responses. Service errors are turned into a
`{"message": ...}` body with the matching status code.

Endpoints implemented:
- POST /api/signup
- POST /api/login
- GET /api/modules
- POST /api/upload/{user_id}/{topic_id}
- GET /api/progress/{user_id}
- GET /health
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Depends, UploadFile, File, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from sqlmodel import Session
import json
import logging
import time
import uuid

from . import services
from .config import Settings, settings as default_settings
from .database import Store, get_session
from .errors import ServiceError
from .repositories import PathId
from .schemas import SignupIn, LoginIn

logger = logging.getLogger("juslearn.api")


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def _path_id(value: str) -> PathId:
    """Numeric path segments become ints; anything else is kept verbatim."""
    try:
        return int(value)
    except ValueError:
        return value


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the store, apply the reset/seed policy, and dispose on shutdown."""
    cfg: Settings = app.state.settings
    store = Store(cfg.DATABASE_URL, enforce_foreign_keys=cfg.ENFORCE_FOREIGN_KEYS)
    store.initialize(reset=cfg.RESET_ON_STARTUP)
    cfg.UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
    app.state.store = store
    logger.info("store ready at %s (reset=%s)", cfg.DATABASE_URL, cfg.RESET_ON_STARTUP)
    try:
        yield
    finally:
        store.dispose()


async def service_error_handler(request: Request, exc: ServiceError):
    return JSONResponse(status_code=exc.status_code, content={'message': exc.message})


async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.info("rejected malformed request to %s: %s", request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={'message': 'Malformed request'})


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={'message': 'Internal server error'})


async def request_context_middleware(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID", uuid.uuid4().hex)
    request.state.request_id = req_id
    started = time.perf_counter()
    response: Response
    try:
        response = await call_next(request)
    except Exception:
        elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
        logger.exception(
            "request_failed %s",
            json.dumps(
                {
                    "request_id": req_id,
                    "path": request.url.path,
                    "method": request.method,
                    "duration_ms": elapsed_ms,
                },
                ensure_ascii=True,
            ),
        )
        raise
    response.headers["X-Request-ID"] = req_id
    elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
    logger.info(
        "request_done %s",
        json.dumps(
            {
                "request_id": req_id,
                "path": request.url.path,
                "method": request.method,
                "status_code": response.status_code,
                "duration_ms": elapsed_ms,
            },
            ensure_ascii=True,
        ),
    )
    return response


def signup(payload: Optional[SignupIn] = None, db: Session = Depends(get_session), cfg: Settings = Depends(get_settings)):
    """Register a new user.

    Returns the generated id. A duplicate email answers 409 with a
    message that does not reveal which field collided.
    """
    payload = payload or SignupIn()
    auth = services.AuthService(db, rounds=cfg.PASSWORD_ROUNDS)
    user = auth.register(payload.username, payload.email, payload.password)
    return {'message': 'User registered successfully', 'userId': user.id}


def login(payload: Optional[LoginIn] = None, db: Session = Depends(get_session), cfg: Settings = Depends(get_settings)):
    """Check credentials and return the user's id and display name.

    No token is issued; clients pass the id in later request paths.
    """
    payload = payload or LoginIn()
    auth = services.AuthService(db, rounds=cfg.PASSWORD_ROUNDS)
    user = auth.authenticate(payload.email, payload.password)
    return {'message': 'Login successful', 'userId': user.id, 'username': user.username}


def list_modules(db: Session = Depends(get_session)):
    """List every catalog topic, flattened one row per topic."""
    topics = services.CatalogService(db).list_modules()
    return [{'id': t.id, 'module_name': t.module_name, 'topic_name': t.topic_name} for t in topics]


def upload_assignment(
    user_id: str,
    topic_id: str,
    assignment: Optional[UploadFile] = File(default=None),
    db: Session = Depends(get_session),
    cfg: Settings = Depends(get_settings),
):
    """Upload the assignment file for a user/topic pair.

    The file arrives in the multipart field `assignment`. Re-uploading
    replaces the previous submission and marks the topic completed.
    """
    svc = services.SubmissionService(db, cfg.UPLOAD_DIR)
    filename = assignment.filename if assignment else None
    stream = assignment.file if assignment else None
    row = svc.upload(_path_id(user_id), _path_id(topic_id), filename, stream)
    return {'message': 'Assignment uploaded successfully', 'assignmentId': row.id}


def get_progress(user_id: str, db: Session = Depends(get_session)):
    """Return per-topic completion and marks for `user_id`."""
    return services.ProgressService(db).get_progress(_path_id(user_id))


def health():
    """Lightweight health check for uptime monitoring."""
    return {"status": "ok"}


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the FastAPI application around `settings`.

    The store is not opened here; it is created when the application
    starts up and disposed when it shuts down.
    """
    cfg = settings or default_settings
    if not logging.getLogger().handlers:
        logging.basicConfig(level=cfg.LOG_LEVEL)

    app = FastAPI(title="JusLearn API", lifespan=lifespan)
    app.state.settings = cfg

    # Wide-open CORS keeps local HTML frontends working without extra config in dev.
    if cfg.ALLOW_DEV_CORS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    app.middleware("http")(request_context_middleware)

    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.post('/api/signup')(signup)
    app.post('/api/login')(login)
    app.get('/api/modules')(list_modules)
    app.post('/api/upload/{user_id}/{topic_id}')(upload_assignment)
    app.get('/api/progress/{user_id}')(get_progress)
    app.get('/health')(health)

    # Uploaded files are served back as-is; the directory is created at startup.
    app.mount("/uploads", StaticFiles(directory=cfg.UPLOAD_DIR, check_dir=False), name="uploads")
    return app


app = create_app()


def run():
    """Serve `app` with uvicorn on port 5000."""
    import uvicorn
    uvicorn.run("juslearn.main:app", host="0.0.0.0", port=5000)
