import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from gardenbook import __version__
from gardenbook.config import get_settings
from gardenbook.database import dispose_engine, init_engine
from gardenbook.error_handlers import register_error_handlers
from gardenbook.routers import auth_router, categories_router, fish_router, plants_router
from gardenbook.routers.auth import limiter

settings = get_settings()
logger = logging.getLogger("gardenbook")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan for startup/shutdown events."""
    logging.basicConfig(level=settings.log_level.upper())
    init_engine(settings.database_url, pool_size=settings.database_pool_size)
    logger.info("MyGardenBook API started (%s)", settings.app_env)
    yield
    await dispose_engine()
    logger.info("MyGardenBook API shutting down")


app = FastAPI(
    title="MyGardenBook API",
    description="Plant and fish catalog with photo and QR scan code management",
    version=__version__,
    lifespan=lifespan,
)

# Rate limiter
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

register_error_handlers(app)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_origin_regex=r"^https://my-garden-book-frontend-.*\.vercel\.app$",
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
)


@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    """Set basic security headers for all API responses."""
    response = await call_next(request)
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    return response

# Include routers
app.include_router(auth_router)
app.include_router(plants_router)
app.include_router(fish_router)
app.include_router(categories_router)

Instrumentator().instrument(app).expose(app, include_in_schema=False)


@app.get("/health")
def health_check():
    """Liveness probe for the hosting platform."""
    return {"status": "healthy"}


@app.get("/")
def root():
    """Root endpoint with API information."""
    return {
        "name": "MyGardenBook API",
        "version": __version__,
        "docs": "/docs",
        "catalog": {
            "plants": "/api/plants",
            "fish": "/api/fish",
            "categories": "/api/categories",
        },
    }
