import logging
import time
from contextlib import asynccontextmanager
from fastapi import FastAPI, Depends, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from sqlalchemy import text
from sqlalchemy.orm import Session

from database import get_db, init_db
from exceptions import BookNotFoundError, BusinessError, InvalidArgumentError
from routers import books
from config import settings
from logging_config import setup_logging

# Setup logging
setup_logging(settings.LOG_LEVEL, settings.LOG_FILE)
logger = logging.getLogger(__name__)

EMPTY_FIELD_ERRORS = {"missing", "string_too_short"}

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting up library-api...")
    if settings.AUTO_CREATE_TABLES:
        init_db()
    yield
    logger.info("Shutting down library-api...")

app = FastAPI(
    title="Library API",
    description="Book catalog service",
    version="1.0.0",
    lifespan=lifespan
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration_ms = (time.time() - start) * 1000
    logger.info(
        "%s %s -> %s (%.2f ms)",
        request.method,
        request.url.path,
        response.status_code,
        duration_ms,
    )
    return response


def _error_message(error: dict) -> str:
    loc = [str(part) for part in error.get("loc", ())]
    field = ".".join(loc[1:]) or (loc[0] if loc else "request")
    if error.get("type") in EMPTY_FIELD_ERRORS:
        return f"{field} must not be empty"
    if error.get("type") == "string_type" and error.get("input") is None:
        return f"{field} must not be empty"
    return f"{field}: {error.get('msg')}"


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = [_error_message(error) for error in exc.errors()]
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"errors": errors})


@app.exception_handler(BusinessError)
async def business_exception_handler(request: Request, exc: BusinessError):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"errors": [exc.message]})


@app.exception_handler(InvalidArgumentError)
async def invalid_argument_handler(request: Request, exc: InvalidArgumentError):
    logger.warning(f"Invalid argument on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"errors": [str(exc)]})


@app.exception_handler(BookNotFoundError)
async def not_found_handler(request: Request, exc: BookNotFoundError):
    return Response(status_code=status.HTTP_404_NOT_FOUND)


# Health check endpoint
@app.get("/health", tags=["System"])
def health_check(db: Session = Depends(get_db)):
    health_status = {"status": "healthy", "service": "library-api", "components": {}}

    # Check database
    try:
        db.execute(text("SELECT 1"))
        health_status["components"]["database"] = "connected"
    except Exception as e:
        logger.error(f"DB health check failed: {e}")
        health_status["components"]["database"] = "unhealthy"
        health_status["status"] = "degraded"

    if health_status["status"] != "healthy":
         raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=health_status
        )
    return health_status

app.include_router(books.router)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
