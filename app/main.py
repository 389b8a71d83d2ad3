import os
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from app.db import Base, SessionLocal, engine, get_mongo_db
import app.models  # noqa: F401 ensure models are imported so tables are known
from app.api.routes import router as api_router
from app.sources import SourceUnavailableError, build_source, stats_backend
from app.utils import logger, retry

CONNECT_TRIES = int(os.getenv("DB_CONNECT_TRIES", 10))
CONNECT_DELAY = float(os.getenv("DB_CONNECT_DELAY", 2))
# comma separated; "*" lets any browser origin read the API
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# create FastAPI instance
app = FastAPI(title="Real Estate Listings API")
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(api_router)


def format_error(message):
    return {"error": True, "message": message}


@app.exception_handler(HTTPException)
def http_error_envelope(request: Request, exc: HTTPException):
    return JSONResponse(status_code=exc.status_code, content=format_error(str(exc.detail)))


@app.exception_handler(RequestValidationError)
def validation_error_envelope(request: Request, exc: RequestValidationError):
    fields = ", ".join(".".join(str(p) for p in err["loc"][1:]) or "request" for err in exc.errors())
    return JSONResponse(status_code=422, content=format_error(f"Invalid parameters: {fields}"))


@app.exception_handler(Exception)
def unhandled_error_envelope(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content=format_error("Internal Server Error"))


@retry(SourceUnavailableError, tries=CONNECT_TRIES, delay=CONNECT_DELAY, backoff=1)
def wait_for_backends():
    backend = stats_backend()
    db = SessionLocal()
    try:
        mongo_db = get_mongo_db() if backend == "mongo" else None
        build_source(backend, db=db, mongo_db=mongo_db).ping()
    finally:
        db.close()
    logger.info("Connected to %s statistics backend", backend)


@app.on_event("startup")
def on_startup():
    wait_for_backends()
    if stats_backend() == "sql":
        # read models only; the listings service owns migrations
        Base.metadata.create_all(bind=engine)
