# model/user.py
from pydantic import BaseModel


class User(BaseModel):
    id: str
    email: str
    password_hash: str
    namespace_id: str
    created_at: int = 0


class PublicUser(BaseModel):
    id: str
    email: str
    createdAt: int

    @classmethod
    def of(cls, user: User) -> "PublicUser":
        return cls(id=user.id, email=user.email, createdAt=user.created_at)
