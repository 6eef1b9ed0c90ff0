# main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi_limiter import FastAPILimiter
from redis.asyncio import Redis
from starlette.middleware.cors import CORSMiddleware
import routes
from config.cache import close_redis, create_redis
from config.context import build_context
from config.settings import Settings, settings
from util.enums import Color, Environment, ErrorMessage
from util.logger import init_logger

logger = logging.getLogger(__name__)


def _real_ip_for(app_settings: Settings):
    async def _real_ip(request: Request) -> str:
        if app_settings.TRUST_PROXY:
            fwd = request.headers.get("x-forwarded-for")
            if fwd:
                return fwd.split(",")[0].strip()
        return request.client.host if request.client else "unknown"

    return _real_ip


@asynccontextmanager
async def lifespan(fastApi: FastAPI):
    ctx = fastApi.state.context
    init_logger()
    print(f"{Color.GREEN}Initializing...{Color.RESET}")
    # Fail fast on startup if Redis is unreachable.
    try:
        await ctx.redis.ping()
    except Exception as e:
        print("Failed to connect to Redis:", e)
        raise
    try:
        await FastAPILimiter.init(ctx.redis, identifier=_real_ip_for(ctx.settings))
    except Exception as e:
        print("Failed to initialize rate limiter:", e)
        raise
    print(f"{Color.BLUE}Server Started{Color.RESET} storage={ctx.storage.root}")

    try:
        yield
    finally:
        try:
            await close_redis(ctx.redis)
        except Exception as e:
            print("Error closing Redis:", e)

        print(f"{Color.RED}Server Shutdown{Color.RESET}")


def create_app(
    app_settings: Settings = settings, redis: Optional[Redis] = None
) -> FastAPI:
    """Build the app and its server context; nothing request-scoped lives in globals."""
    app = FastAPI(title="Track Log Vault", lifespan=lifespan)
    app.state.context = build_context(
        app_settings, redis if redis is not None else create_redis(app_settings)
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[app_settings.ALLOWED_ORIGIN],
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["Authorization", "Content-Type", "Accept"],
        expose_headers=["Content-Disposition"],
    )

    @app.get("/healthz")
    async def healthz():
        return {"ok": True}

    @app.exception_handler(429)
    async def ratelimit_handler(request: Request, exc):
        return JSONResponse(
            status_code=429,
            content={
                "ok": False,
                "error": "rate_limited",
                "message": "Too many requests. Try again later.",
            },
            headers={"Retry-After": str(app_settings.RATE_LIMIT_SECONDS)},
        )

    @app.exception_handler(Exception)
    async def unhandled_handler(request: Request, exc: Exception):
        logger.error(
            "request.unhandled method=%s path=%s err=%s",
            request.method,
            request.url.path,
            type(exc).__name__,
            exc_info=exc,
        )
        return JSONResponse(
            status_code=ErrorMessage.INTERNAL_ERROR.value.http_status,
            content={"detail": ErrorMessage.INTERNAL_ERROR.value.message},
        )

    routes.register_routes(app)
    return app


app: FastAPI = create_app()

if __name__ == "__main__":
    import uvicorn

    reload = settings.APP_ENV == Environment.DEV
    uvicorn.run("main:app", host="127.0.0.1", port=8000, reload=reload)
