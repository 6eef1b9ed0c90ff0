# model/api.py
from pydantic import BaseModel, Field
from model.track import TrackData
from model.user import PublicUser


class CredentialsRequest(BaseModel):
    email: str = Field(min_length=3, max_length=254, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(min_length=8, max_length=128)


class LoginRequest(BaseModel):
    email: str = Field(min_length=1, max_length=254)
    password: str = Field(min_length=1, max_length=128)


class MessageResponse(BaseModel):
    message: str


class RegisterResponse(BaseModel):
    message: str
    user: PublicUser


class LoginResponse(BaseModel):
    message: str
    user: PublicUser
    token: str


class TrackSummary(BaseModel):
    id: int | None = None
    fileName: str


class TrackListResponse(BaseModel):
    tracks: list[TrackSummary]


class TrackCountResponse(BaseModel):
    count: int


class TrackResponse(BaseModel):
    id: int | None = None
    fileName: str
    data: list[TrackData]
