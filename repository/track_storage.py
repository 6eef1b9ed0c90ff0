# repository/track_storage.py
import contextlib
import logging
import os
import re
from pathlib import Path
from typing import AsyncIterator, Optional, Tuple
import aiofiles
import aiofiles.os
from core.entities import StoredTrack, TrackEntry
from util.errors import (
    InvalidExtensionError,
    InvalidNameError,
    MissingTrackError,
    TrackExistsError,
    TrackNotFoundError,
)
from util.timing import timed

logger = logging.getLogger(__name__)

_NAMESPACE_RE = re.compile(r"^[A-Za-z0-9_-]+$")
_FORBIDDEN_NAME_CHARS = ("/", "\\", "\x00")
_MAX_NAME_BYTES = 255
_LEDGER_DIGITS = 10
_TOMBSTONE = ".deleted"


class TrackStorage:
    """
    Filesystem store for track files, one directory per namespace id.

    Layout:
      <root>/<namespace>/tracks/<name>   uploaded bytes, exact upload name
      <root>/<namespace>/ledger/<seq>    one entry per upload, content = name
      <root>/<namespace>/ledger/<seq>.deleted   tombstone after delete

    Flow:
    - Namespace directories appear on the first upload only.
    - Exclusive-create ("x") is the only collision check, for the track file
      and for claiming the next ledger number alike.
    - Enumeration order is ledger order; sequence numbers double as stable
      track ids and are never reused.
    """

    def __init__(self, root: Path | str, extension: str = ".gpx") -> None:
        self._root = Path(root)
        self._extension = extension.lower()

    @property
    def root(self) -> Path:
        return self._root

    # ---------------- Paths & validation ----------------

    def _namespace_dir(self, namespace: str) -> Path:
        if not namespace or not _NAMESPACE_RE.match(namespace):
            raise ValueError("malformed namespace id")
        return self._root / namespace

    def _tracks_dir(self, namespace: str) -> Path:
        return self._namespace_dir(namespace) / "tracks"

    def _ledger_dir(self, namespace: str) -> Path:
        return self._namespace_dir(namespace) / "ledger"

    @staticmethod
    def _is_safe_name(name: str) -> bool:
        return (
            bool(name)
            and name not in (".", "..")
            and not any(c in name for c in _FORBIDDEN_NAME_CHARS)
            and len(name.encode("utf-8", "surrogatepass")) <= _MAX_NAME_BYTES
        )

    def has_track_extension(self, name: str) -> bool:
        return os.path.splitext(name)[1].lower() == self._extension

    # ---------------- Ledger ----------------

    @staticmethod
    def _entry_name(seq: int) -> str:
        return f"{seq:0{_LEDGER_DIGITS}d}"

    async def _ledger_entries(
        self, ledger_dir: Path
    ) -> AsyncIterator[Tuple[str, int, str]]:
        """Yield (entry, seq, name) for every live ledger entry."""
        try:
            entries = await aiofiles.os.listdir(ledger_dir)
        except FileNotFoundError:
            return
        for entry in entries:
            if not entry.isdigit():
                continue
            try:
                async with aiofiles.open(ledger_dir / entry, encoding="utf-8") as f:
                    name = await f.read()
            except FileNotFoundError:
                continue
            # Empty means the number is claimed but its name is not written yet.
            if name:
                yield entry, int(entry), name

    async def _ledger(self, namespace: str) -> dict[str, int]:
        live: dict[str, int] = {}
        async for _, seq, name in self._ledger_entries(self._ledger_dir(namespace)):
            if seq > live.get(name, 0):
                live[name] = seq
        return live

    @staticmethod
    async def _last_sequence(ledger_dir: Path) -> int:
        # Tombstones count too, so a deleted id is never handed out again.
        entries = await aiofiles.os.listdir(ledger_dir)
        seqs = [int(e.split(".", 1)[0]) for e in entries if e.split(".", 1)[0].isdigit()]
        return max(seqs, default=0)

    async def _record(self, namespace: str, name: str) -> int:
        ledger_dir = self._ledger_dir(namespace)
        await aiofiles.os.makedirs(ledger_dir, exist_ok=True)
        seq = await self._last_sequence(ledger_dir) + 1
        while True:
            try:
                async with aiofiles.open(
                    ledger_dir / self._entry_name(seq), "x", encoding="utf-8"
                ) as f:
                    await f.write(name)
                return seq
            except FileExistsError:
                seq += 1

    async def _tombstone(self, namespace: str, name: str) -> None:
        ledger_dir = self._ledger_dir(namespace)
        async for entry, _, entry_name in self._ledger_entries(ledger_dir):
            if entry_name != name:
                continue
            with contextlib.suppress(FileNotFoundError):
                await aiofiles.os.rename(
                    ledger_dir / entry, ledger_dir / f"{entry}{_TOMBSTONE}"
                )

    # ---------------- Files ----------------

    async def _read(self, namespace: str, name: str) -> bytes:
        try:
            async with aiofiles.open(self._tracks_dir(namespace) / name, "rb") as f:
                return await f.read()
        except FileNotFoundError as e:
            raise TrackNotFoundError(name) from e

    @staticmethod
    async def _discard(path: Path) -> None:
        with contextlib.suppress(FileNotFoundError):
            await aiofiles.os.remove(path)

    # ---------------- Operations ----------------

    async def create(
        self, namespace: str, name: str, content: Optional[bytes]
    ) -> TrackEntry:
        if content is None:
            raise MissingTrackError()
        if not self.has_track_extension(name):
            raise InvalidExtensionError(name)
        if not self._is_safe_name(name):
            raise InvalidNameError(name)

        tracks_dir = self._tracks_dir(namespace)
        await aiofiles.os.makedirs(tracks_dir, exist_ok=True)
        path = tracks_dir / name

        created = False
        try:
            with timed(logger, "storage.write", bytes=len(content)):
                async with aiofiles.open(path, "xb") as f:
                    created = True
                    await f.write(content)
        except FileExistsError as e:
            raise TrackExistsError(name) from e
        except BaseException:
            if created:
                await self._discard(path)
            raise

        # The upload only counts once it has a ledger number.
        try:
            track_id = await self._record(namespace, name)
        except BaseException:
            await self._discard(path)
            raise
        return TrackEntry(name=name, track_id=track_id)

    async def list_tracks(self, namespace: str) -> list[TrackEntry]:
        """
        Ledger order first; files the ledger never saw follow in name order
        without an id. Missing namespace -> [].
        """
        try:
            present = set(await aiofiles.os.listdir(self._tracks_dir(namespace)))
        except FileNotFoundError:
            return []
        ledger = await self._ledger(namespace)
        sequenced = sorted((seq, name) for name, seq in ledger.items() if name in present)
        entries = [TrackEntry(name=name, track_id=seq) for seq, name in sequenced]
        entries.extend(
            TrackEntry(name=name, track_id=None)
            for name in sorted(present - ledger.keys())
        )
        return entries

    async def count(self, namespace: str) -> int:
        return len(await self.list_tracks(namespace))

    async def get_by_index(self, namespace: str, index: int) -> StoredTrack:
        # One snapshot per call; the same index may name another file next time.
        entries = await self.list_tracks(namespace)
        if index < 0 or index >= len(entries):
            raise TrackNotFoundError(str(index))
        entry = entries[index]
        content = await self._read(namespace, entry.name)
        return StoredTrack(name=entry.name, track_id=entry.track_id, content=content)

    async def get_by_id(self, namespace: str, track_id: int) -> StoredTrack:
        ledger = await self._ledger(namespace)
        name = next((n for n, seq in ledger.items() if seq == track_id), None)
        if name is None:
            raise TrackNotFoundError(str(track_id))
        content = await self._read(namespace, name)
        return StoredTrack(name=name, track_id=track_id, content=content)

    async def resolve(self, namespace: str, name: str) -> Path:
        """Path of an existing track; the name must match exactly, case included."""
        if not self._is_safe_name(name):
            raise TrackNotFoundError(name)
        tracks_dir = self._tracks_dir(namespace)
        try:
            present = await aiofiles.os.listdir(tracks_dir)
        except FileNotFoundError as e:
            raise TrackNotFoundError(name) from e
        if name not in present:
            raise TrackNotFoundError(name)
        return tracks_dir / name

    async def get_by_name(self, namespace: str, name: str) -> StoredTrack:
        await self.resolve(namespace, name)
        content = await self._read(namespace, name)
        ledger = await self._ledger(namespace)
        return StoredTrack(name=name, track_id=ledger.get(name), content=content)

    async def delete(self, namespace: str, name: str) -> None:
        path = await self.resolve(namespace, name)
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError as e:
            raise TrackNotFoundError(name) from e
        await self._tombstone(namespace, name)
