# model/track.py
from pydantic import BaseModel


class TrackPoint(BaseModel):
    lat: float
    lon: float
    ele: float | None = None
    time: str | None = None


class TrackDistance(BaseModel):
    total: float


class TrackElevation(BaseModel):
    max: float | None = None
    min: float | None = None
    pos: float | None = None
    neg: float | None = None
    avg: float | None = None


class TrackData(BaseModel):
    name: str | None = None
    comment: str | None = None
    description: str | None = None
    type: str | None = None
    number: int | None = None
    points: list[TrackPoint]
    distance: TrackDistance
    elevation: TrackElevation
