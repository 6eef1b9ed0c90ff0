# config/cache.py
from redis.asyncio import Redis, from_url
from config.settings import Settings


def create_redis(settings: Settings) -> Redis:
    # Connection is lazy; lifespan pings it so startup fails fast.
    return from_url(
        settings.REDIS_URL,
        encoding="utf-8",
        decode_responses=False,
        socket_keepalive=True,
        health_check_interval=30,
    )


async def close_redis(client: Redis) -> None:
    await client.aclose()
