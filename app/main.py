import logging

from fastapi import FastAPI, APIRouter, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from app.core.config import settings
from .routers import users, maintenance, realtime, casinos, banners, homepage, media, forum, reports, content
from .core.storage import create_minio_bucket_if_not_exists
from .core.rate_limit import limiter
from .core.scheduler import init_scheduler, start_scheduler, shutdown_scheduler
from .database import init_db

logging.basicConfig(level=logging.INFO)

@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    create_minio_bucket_if_not_exists()
    init_scheduler()
    start_scheduler()
    yield
    shutdown_scheduler()

app = FastAPI(
    lifespan=lifespan,
    title="CGSG API",
    version="1.0.0",
    docs_url=None,
    redoc_url=None
)

#rate limiting
app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)

#security headers
@app.middleware("http")
async def security_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    response.headers["Permissions-Policy"] = "geolocation=(), microphone=(), camera=()"
    return response

#CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=[
        "Authorization",
        "Content-Type",
        "X-Requested-With",
        "Accept",
        "Origin",
        "Cache-Control",
    ],
)

#trusted hosts
app.add_middleware(
    TrustedHostMiddleware,
    allowed_hosts=settings.ALLOWED_HOSTS,
)

api_router = APIRouter(prefix=settings.API_V1_STR)

api_router.include_router(users.router)
api_router.include_router(maintenance.router)
api_router.include_router(realtime.router)
api_router.include_router(casinos.router)
api_router.include_router(banners.router)
api_router.include_router(homepage.router)
api_router.include_router(media.router)
api_router.include_router(forum.router)
api_router.include_router(reports.router)
api_router.include_router(content.router)

app.include_router(api_router)

@app.get("/", include_in_schema=False)
def read_root():
    return {"message": "OK"}

@app.get("/health", tags=["health"])
def health_check():
    return {
        "status": "healthy",
        "project_name": settings.PROJECT_NAME,
        "version": "1.0.0",
    }

@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(
        status_code=429,
        content={"detail": "Too many requests"}
    )
