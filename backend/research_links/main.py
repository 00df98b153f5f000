import logging
from contextlib import asynccontextmanager

import redis
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from .api import auth, links, collections, tags, search, stats, export, directory, ingest, redirect
from .config import settings
from .store import check_redis_health, close_redis, get_store

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    close_redis()


# Initialize FastAPI app
app = FastAPI(
    title="Research Links",
    description="Personal link shortener and research project directory",
    version="1.0.0",
    lifespan=lifespan,
)

# Setup rate limiter
app.state.limiter = auth.limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(redis.exceptions.RedisError)
async def store_error_handler(request: Request, exc: redis.exceptions.RedisError):
    logger.exception("Store error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Request validation failures are reported as 400"""
    detail = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )
    return JSONResponse(status_code=400, content={"detail": detail})


# Include routers
app.include_router(auth.router, prefix="/api", tags=["auth"])
app.include_router(links.router, prefix="/api", tags=["links"])
app.include_router(collections.router, prefix="/api", tags=["collections"])
app.include_router(tags.router, prefix="/api", tags=["tags"])
app.include_router(search.router, prefix="/api", tags=["search"])
app.include_router(stats.router, prefix="/api", tags=["stats"])
app.include_router(export.router, prefix="/api", tags=["export"])
app.include_router(ingest.router, prefix="/api", tags=["ingest"])
app.include_router(directory.router, prefix="/api", tags=["directory"])


# Health check endpoint
@app.get("/health")
async def health_check(store: redis.Redis = Depends(get_store)):
    """Health check endpoint"""
    store_ok = check_redis_health(store)
    return {
        "status": "healthy" if store_ok else "degraded",
        "store": store_ok,
        "service": "Research Links",
    }


app.include_router(redirect.router, tags=["redirect"])

# Redirect endpoint (must be last to not conflict with other routes)
app.get("/{slug}")(redirect.redirect_to_target)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
