# service/auth_service.py
import logging
import secrets
from functools import lru_cache
from typing import Tuple
from starlette.concurrency import run_in_threadpool
from core.passwords import hash_password, verify_password
from model.user import User
from repository.user_repository import UserRepository
from service.token_service import TokenService
from util.enums import ErrorMessage
from util.errors import EmailTakenError, NamespaceTakenError, app_error

logger = logging.getLogger(__name__)

_NAMESPACE_ATTEMPTS = 5


@lru_cache(maxsize=4)
def _dummy_hash(rounds: int) -> str:
    # Unknown emails still pay for one bcrypt check.
    return hash_password(secrets.token_hex(16), rounds)


class AuthService:
    """
    Registration and login. The only place that creates users or issues tokens;
    verifying tokens is the authentication gate's job.
    """

    def __init__(
        self,
        users: UserRepository,
        tokens: TokenService,
        bcrypt_rounds: int = 12,
        namespace_bytes: int = 16,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._rounds = bcrypt_rounds
        self._namespace_bytes = namespace_bytes

    async def register(self, email: str, password: str) -> User:
        password_hash = await run_in_threadpool(hash_password, password, self._rounds)
        for _ in range(_NAMESPACE_ATTEMPTS):
            namespace_id = secrets.token_hex(self._namespace_bytes)
            try:
                user = await self._users.create(email, password_hash, namespace_id)
            except EmailTakenError:
                logger.info("auth.register.email_taken")
                raise app_error(ErrorMessage.EMAIL_TAKEN)
            except NamespaceTakenError:
                logger.warning("auth.register.namespace_collision")
                continue
            logger.info("auth.register.ok user=%s", user.id)
            return user

        logger.error("auth.register.namespace_exhausted")
        raise app_error(ErrorMessage.INTERNAL_ERROR)

    async def login(self, email: str, password: str) -> Tuple[User, str]:
        user = await self._users.find_by_email(email)
        if user is not None:
            hashed = user.password_hash
        else:
            hashed = await run_in_threadpool(_dummy_hash, self._rounds)
        valid = await run_in_threadpool(verify_password, password, hashed)
        if user is None or not valid:
            logger.info("auth.login.rejected")
            raise app_error(ErrorMessage.INVALID_LOGIN)

        token = self._tokens.issue(user.id)
        logger.info("auth.login.ok user=%s", user.id)
        return user, token
