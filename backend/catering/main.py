# backend/catering/main.py
import logging
import os

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException

from catering import __version__
from catering.api import (
    admin_router,
    auth_router,
    bookings_router,
    menu_router,
    messages_router,
    offers_router,
    receipts_router,
    users_router,
)
from catering.errors import CateringError
from catering.storage import storage_from_env
from catering.utils.time_utils import iso_local

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="d'sis Catering Backend", version=__version__)

# Allow CORS for local dev (adjust in production)
app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ORIGINS", "*").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.storage = storage_from_env()


# ---------- Error rendering ----------
# Every failure leaves the API as {"error": "<message>"}.

def _error(status_code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)

@app.exception_handler(CateringError)
async def catering_error_handler(request: Request, exc: CateringError):
    if exc.status_code >= 500:
        logger.error("[api] %s %s failed: %s", request.method, request.url.path, exc.message)
    return _error(exc.status_code, exc.message)

@app.exception_handler(HTTPException)
async def http_error_handler(request: Request, exc: HTTPException):
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return _error(exc.status_code, message, headers=getattr(exc, "headers", None))

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
        message = f"{field}: {first.get('msg')}" if field else first.get("msg", "Invalid request")
    else:
        message = "Invalid request"
    return _error(400, message)

@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("[api] Database error on %s %s", request.method, request.url.path)
    return _error(500, "Database error")

# ---------- Routers ----------

for module in (
    auth_router,
    menu_router,
    bookings_router,
    receipts_router,
    messages_router,
    admin_router,
    users_router,
    offers_router,
):
    app.include_router(module.router)

@app.get("/api/health", summary="Health check")
async def health():
    return {"status": "OK", "message": "d'sis Catering API is running", "timestamp": iso_local()}
