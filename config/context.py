# config/context.py
from dataclasses import dataclass
from redis.asyncio import Redis
from config.settings import Settings
from repository.track_storage import TrackStorage
from repository.user_repository import UserRepository
from service.token_service import TokenService


@dataclass(frozen=True)
class ServerContext:
    """Everything a request handler needs, built once at app creation."""

    settings: Settings
    redis: Redis
    users: UserRepository
    storage: TrackStorage
    tokens: TokenService


def build_context(settings: Settings, redis: Redis) -> ServerContext:
    return ServerContext(
        settings=settings,
        redis=redis,
        users=UserRepository(redis),
        storage=TrackStorage(settings.STORAGE_ROOT, settings.TRACK_EXTENSION),
        tokens=TokenService.from_settings(settings),
    )
