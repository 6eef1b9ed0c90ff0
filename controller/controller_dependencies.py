# controller/controller_dependencies.py
import logging
from typing import Optional
from fastapi import Depends, File, Request, UploadFile
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from fastapi_limiter.depends import RateLimiter
from config.context import ServerContext
from config.settings import settings
from model.user import User
from service.auth_service import AuthService
from service.track_service import TrackService
from util.enums import ErrorMessage
from util.errors import app_error

logger = logging.getLogger(__name__)

_bearer = HTTPBearer(auto_error=False)

# Module-level so tests can swap it out via app.dependency_overrides.
rate_limiter = RateLimiter(
    times=settings.RATE_LIMIT_TIMES, seconds=settings.RATE_LIMIT_SECONDS
)


def get_context(request: Request) -> ServerContext:
    return request.app.state.context


def get_auth_service(ctx: ServerContext = Depends(get_context)) -> AuthService:
    return AuthService(
        ctx.users,
        ctx.tokens,
        bcrypt_rounds=ctx.settings.BCRYPT_ROUNDS,
        namespace_bytes=ctx.settings.NAMESPACE_ID_BYTES,
    )


def get_track_service(ctx: ServerContext = Depends(get_context)) -> TrackService:
    return TrackService(ctx.storage)


async def authenticate(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
    ctx: ServerContext = Depends(get_context),
) -> User:
    """
    Gate for every track route:
    bearer token -> signature/expiry check -> identity lookup.
    All failures look the same to the client.
    """
    if credentials is None or not credentials.credentials:
        logger.info("auth.gate.missing path=%s", request.url.path)
        raise app_error(ErrorMessage.UNAUTHORIZED)

    user_id = ctx.tokens.verify(credentials.credentials)
    if user_id is None:
        raise app_error(ErrorMessage.UNAUTHORIZED)

    user = await ctx.users.find_by_id(user_id)
    if user is None:
        logger.warning("auth.gate.unknown_user user=%s", user_id)
        raise app_error(ErrorMessage.UNAUTHORIZED)

    request.state.user = user
    return user


async def enforce_max_upload_size(
    request: Request, file: Optional[UploadFile] = File(None)
) -> Optional[UploadFile]:
    ctx = get_context(request)
    max_bytes = ctx.settings.MAX_FILE_MB * 1024 * 1024
    too_large = app_error(ErrorMessage.FILE_TOO_LARGE)

    # Fast pre-check via Content-Length if present
    cl = request.headers.get("content-length")
    if cl and cl.isdigit() and int(cl) > max_bytes:
        raise too_large

    if file is None:
        return None

    # Hard cap while reading initial bytes (works even if no Content-Length)
    blob = await file.read(max_bytes + 1)
    if len(blob) > max_bytes:
        raise too_large

    # Reset so downstream can re-read file stream
    await file.seek(0)
    return file
