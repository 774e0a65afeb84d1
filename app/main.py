# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the BrandRider API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import asyncio
import json
import logging
from contextlib import asynccontextmanager

import redis.asyncio as aioredis
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app import __version__ as API_VERSION
from app.config import settings
from app.websocket import websocket_manager, WEBSOCKET_CHANNEL
from app.exceptions import BrandRiderException, brandrider_exception_handler
from app.routers import health, brands, tasks
from app.websocket import routes as websocket_routes
from lib.utils import ApplicationError

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


# Background Redis listener
_redis_listener_task: asyncio.Task | None = None


async def dispatch_event(raw: bytes | str) -> int:
    """
    Forward one pub/sub message to the user it is addressed to.

    Returns:
        Number of WebSocket clients reached
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning(f"Invalid JSON in Redis message: {e}")
        return 0

    user_id = data.pop("user_id", None)
    if not user_id:
        logger.warning(f"Redis message without user_id: {data.get('type')}")
        return 0

    sent = await websocket_manager.broadcast(user_id, data)
    logger.debug(f"Broadcast {data.get('type')} to user {user_id}")
    return sent


async def redis_pubsub_listener():
    """
    Background task that listens to Redis pub/sub and broadcasts to WebSockets.

    This bridges Celery workers with WebSocket clients by:
    1. Subscribing to the Redis channel where workers publish events
    2. Broadcasting received events to the addressed user's connections
    """
    logger.info("Starting Redis pub/sub listener for WebSocket broadcasts")

    redis_client = aioredis.from_url(settings.REDIS_URL)
    pubsub = redis_client.pubsub()

    try:
        await pubsub.subscribe(WEBSOCKET_CHANNEL)

        async for message in pubsub.listen():
            if message["type"] != "message":
                continue
            try:
                await dispatch_event(message["data"])
            except Exception as e:
                logger.error(f"Error processing Redis message: {e}")

    except asyncio.CancelledError:
        logger.info("Redis pub/sub listener cancelled")
        raise
    except Exception as e:
        logger.error(f"Redis pub/sub listener error: {e}")
    finally:
        await pubsub.aclose()
        await redis_client.aclose()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    - Startup: log config, start the Redis -> WebSocket bridge
    - Shutdown: stop the bridge, close WebSockets
    """
    global _redis_listener_task

    logger.info(f"Starting BrandRider API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")

    _redis_listener_task = asyncio.create_task(redis_pubsub_listener())

    yield

    logger.info("Shutting down BrandRider API")

    if _redis_listener_task:
        _redis_listener_task.cancel()
        try:
            await _redis_listener_task
        except asyncio.CancelledError:
            pass

    await websocket_manager.close_all()


# Create FastAPI application
app = FastAPI(
    title="BrandRider API",
    description="""
## AI-Powered Personal Brand Generation

BrandRider turns a sample of your writing into a one-page Brand Rider:
voice and tone, signature phrases, a palette, a font pairing and,
optionally, a logo.

### How It Works

1. **Submit** - POST your writing to `/api/v1/brands/generate`
2. **Follow** - Poll `/api/v1/tasks/{task_id}` or connect to `/ws/users/{user_id}`
3. **Fetch** - GET `/api/v1/brands/{brand_id}` when the task is done

### Generation Steps

| Step | What happens |
|------|--------------|
| **Style** | Analyzes tone, phrases, strengths and weaknesses |
| **Visual** | Proposes palette, fonts and a logo concept |
| **Document** | Assembles the Brand Rider in your chosen format |
| **Logo** | (optional) Generates a logo image |
| **Save** | Stores the brand |

Steps run in order. If one fails, the rest are skipped and nothing is saved.
""",
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Brands",
            "description": "Generate and fetch brands",
        },
        {
            "name": "Tasks",
            "description": "Track and cancel generations",
        },
        {
            "name": "WebSocket",
            "description": "Real-time generation updates",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(BrandRiderException)
async def handle_brandrider_exception(request: Request, exc: BrandRiderException):
    """Handle custom BrandRider exceptions."""
    return await brandrider_exception_handler(request, exc)


@app.exception_handler(ApplicationError)
async def handle_application_error(request: Request, exc: ApplicationError):
    """Service-layer errors (Supabase, etc.) that reached a route."""
    logger.error(f"Unhandled application error: {exc}")
    content = {"detail": exc.message, "code": exc.code}
    if exc.suggestion:
        content["suggestion"] = exc.suggestion
    return JSONResponse(status_code=502, content=content)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

app.include_router(
    health.router,
    prefix="/api/v1",
    tags=["Health"]
)

app.include_router(
    brands.router,
    prefix="/api/v1/brands",
    tags=["Brands"]
)

app.include_router(
    tasks.router,
    prefix="/api/v1/tasks",
    tags=["Tasks"]
)

app.include_router(
    websocket_routes.router,
    tags=["WebSocket"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "BrandRider API",
        "version": API_VERSION,
        "docs": "/docs",
        "health": "/api/v1/health",
    }
