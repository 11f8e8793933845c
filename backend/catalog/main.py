from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from catalog.config import get_settings
from catalog.database import check_db_health, close_db, init_db
from catalog.api import admin, auth, content, favorites
from catalog.api.deps import close_identity_client
from catalog.services.identity import IdentityProviderError
from catalog.services.scheduler import start_scheduler, stop_scheduler

settings = get_settings()
logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"Starting {settings.app_name}...")
    await init_db()
    start_scheduler()
    yield
    # Shutdown
    stop_scheduler()
    await close_identity_client()
    await close_db()
    logger.info("Shutdown complete")


app = FastAPI(
    title=settings.app_name,
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_error(request: Request, exc: StarletteHTTPException):
    body = exc.detail if isinstance(exc.detail, dict) else {"message": exc.detail}
    return JSONResponse(jsonable_encoder(body), status_code=exc.status_code, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError):
    return JSONResponse(
        {"message": "Invalid request data", "errors": jsonable_encoder(exc.errors())},
        status_code=400,
    )


@app.exception_handler(IdentityProviderError)
async def identity_error(request: Request, exc: IdentityProviderError):
    return JSONResponse({"message": "Identity provider unavailable"}, status_code=502)


@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse({"message": "Internal server error"}, status_code=500)


# Routers
app.include_router(auth.router)
app.include_router(content.router)
app.include_router(favorites.router)
app.include_router(admin.router)


@app.get("/health")
async def health():
    db_ok = await check_db_health()
    return {
        "status": "ok" if db_ok else "degraded",
        "app": settings.app_name,
        "database": "ok" if db_ok else "unavailable",
    }
