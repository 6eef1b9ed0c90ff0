# service/token_service.py
import time
import logging
from typing import Optional
import jwt
from config.settings import Settings

logger = logging.getLogger(__name__)


class TokenService:
    """
    Issues and verifies signed access tokens.
    Tokens embed the user id as `sub` and always carry `exp`.
    """

    def __init__(
        self, secret: str, algorithm: str = "HS256", expires_seconds: int = 604800
    ) -> None:
        self._secret = secret
        self._algorithm = algorithm
        self._expires = int(expires_seconds)

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            settings.JWT_SECRET, settings.JWT_ALGORITHM, settings.JWT_EXPIRES_SECONDS
        )

    def issue(self, user_id: str, now: Optional[int] = None) -> str:
        iat = int(time.time()) if now is None else now
        payload = {"sub": user_id, "iat": iat, "exp": iat + self._expires}
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> Optional[str]:
        """Return the embedded user id, or None for any bad/expired token."""
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError:
            logger.info("token.expired")
            return None
        except jwt.PyJWTError as e:
            logger.warning("token.invalid err=%s", type(e).__name__)
            return None
        sub = claims.get("sub")
        return sub if isinstance(sub, str) and sub else None
