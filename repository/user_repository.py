# repository/user_repository.py
import time
from typing import Optional
from uuid import uuid4
from redis.asyncio import Redis
from model.user import User
from repository.namespaces import USERS, USERS_BY_EMAIL, USERS_BY_NAMESPACE
from util.errors import EmailTakenError, NamespaceTakenError


class UserRepository:
    """
    Identity store backed by Redis.

    Flow:
    - One hash per user keyed by id.
    - Two unique indexes (email -> id, namespace id -> id) claimed with SET NX,
      so neither value can ever be shared between users.
    """

    def __init__(self, redis: Redis) -> None:
        self._redis = redis

    @staticmethod
    def _key(user_id: str) -> str:
        return f"{USERS}:{user_id}"

    @staticmethod
    def _email_key(email: str) -> str:
        return f"{USERS_BY_EMAIL}:{email}"

    @staticmethod
    def _namespace_key(namespace_id: str) -> str:
        return f"{USERS_BY_NAMESPACE}:{namespace_id}"

    @staticmethod
    def normalize_email(email: str) -> str:
        return email.strip().lower()

    # ---------------- Core CRUD ----------------

    async def create(
        self, email: str, password_hash: str, namespace_id: str
    ) -> User:
        user = User(
            id=str(uuid4()),
            email=self.normalize_email(email),
            password_hash=password_hash,
            namespace_id=namespace_id,
            created_at=int(time.time()),
        )
        r = self._redis
        if not await r.set(self._email_key(user.email), user.id, nx=True):
            raise EmailTakenError(user.email)
        if not await r.set(self._namespace_key(namespace_id), user.id, nx=True):
            await r.delete(self._email_key(user.email))
            raise NamespaceTakenError(namespace_id)

        await r.hset(
            self._key(user.id),
            mapping={
                "id": user.id,
                "email": user.email,
                "password_hash": user.password_hash,
                "namespace_id": user.namespace_id,
                "created_at": str(user.created_at),
            },
        )
        return user

    async def find_by_id(self, user_id: str) -> Optional[User]:
        if not user_id:
            return None
        h = await self._redis.hgetall(self._key(user_id))
        if not h:
            return None

        def _s(key: str, default: str = "") -> str:
            v = h.get(key, h.get(key.encode("utf-8")))
            if v is None:
                return default
            return v.decode("utf-8") if isinstance(v, (bytes, bytearray)) else str(v)

        return User(
            id=_s("id"),
            email=_s("email"),
            password_hash=_s("password_hash"),
            namespace_id=_s("namespace_id"),
            created_at=int(_s("created_at", "0") or 0),
        )

    async def find_by_email(self, email: str) -> Optional[User]:
        raw = await self._redis.get(self._email_key(self.normalize_email(email)))
        if raw is None:
            return None
        user_id = raw.decode("utf-8") if isinstance(raw, (bytes, bytearray)) else raw
        return await self.find_by_id(user_id)

    async def delete(self, user_id: str) -> bool:
        """
        Remove the identity and free its email.
        The namespace id stays reserved so a later account can never inherit
        the tracks left on disk.
        """
        user = await self.find_by_id(user_id)
        if user is None:
            return False
        await self._redis.delete(self._key(user.id), self._email_key(user.email))
        return True
