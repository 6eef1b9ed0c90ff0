"""
Integration Tests: Application Lifespan

Startup must name the step that failed and stop the server.
"""

import pytest
from fastapi_limiter import FastAPILimiter
from redis.exceptions import ConnectionError as RedisConnectionError

import main


@pytest.fixture(autouse=True)
def quiet_logger(monkeypatch):
    monkeypatch.setattr(main, "init_logger", lambda: None)


class TestStartup:

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_unreachable_redis(self, app, fake_redis, monkeypatch, capsys):
        async def refuse():
            raise RedisConnectionError("connection refused")

        monkeypatch.setattr(fake_redis, "ping", refuse)

        with pytest.raises(RedisConnectionError):
            async with main.lifespan(app):
                pass

        out = capsys.readouterr().out
        assert "Failed to connect to Redis: connection refused" in out
        assert "Server Started" not in out

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_rate_limiter_failure_is_not_blamed_on_redis(
        self, app, monkeypatch, capsys
    ):
        async def broken_init(*args, **kwargs):
            raise RuntimeError("script load failed")

        monkeypatch.setattr(FastAPILimiter, "init", broken_init)

        with pytest.raises(RuntimeError):
            async with main.lifespan(app):
                pass

        out = capsys.readouterr().out
        assert "Failed to initialize rate limiter: script load failed" in out
        assert "Failed to connect to Redis" not in out
