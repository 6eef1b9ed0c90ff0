# core/entities.py
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class TrackEntry:
    name: str
    track_id: Optional[int]  # ledger sequence number; None if never recorded


@dataclass(frozen=True)
class StoredTrack:
    name: str
    track_id: Optional[int]
    content: bytes
