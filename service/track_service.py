# service/track_service.py
import logging
from typing import List, Optional
from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool
from core.entities import StoredTrack
from core.gpx_parser import parse_track
from model.api import TrackResponse, TrackSummary
from repository.track_storage import TrackStorage
from util.enums import ErrorMessage
from util.errors import (
    AppError,
    InvalidExtensionError,
    InvalidNameError,
    MissingTrackError,
    TrackExistsError,
    TrackNotFoundError,
    TrackParseError,
    TrackStorageError,
    app_error,
)
from util.logger import short_ns

logger = logging.getLogger(__name__)


def _translate(exc: TrackStorageError) -> AppError:
    if isinstance(exc, MissingTrackError):
        return app_error(ErrorMessage.NO_FILE)
    if isinstance(exc, InvalidExtensionError):
        return app_error(ErrorMessage.INVALID_EXTENSION)
    if isinstance(exc, InvalidNameError):
        return app_error(ErrorMessage.INVALID_FILE_NAME)
    if isinstance(exc, TrackExistsError):
        return app_error(ErrorMessage.TRACK_EXISTS)
    if isinstance(exc, TrackNotFoundError):
        return app_error(ErrorMessage.TRACK_NOT_FOUND)
    return app_error(ErrorMessage.INTERNAL_ERROR)


class TrackService:
    """
    Handler-facing facade over one user's namespace.
    Every storage / parser failure leaves here as an AppError; OS errors are
    logged with a traceback and surface as a generic 500.
    """

    def __init__(self, storage: TrackStorage) -> None:
        self._storage = storage

    async def upload(self, namespace: str, file: Optional[UploadFile]) -> str:
        """
        Persist an uploaded file under its original name.
        Logs: namespace prefix, name and byte size (no payloads).
        """
        if file is None:
            raise app_error(ErrorMessage.NO_FILE)
        name = file.filename or ""
        # Reject bad extensions before buffering the body.
        if not self._storage.has_track_extension(name):
            logger.info("track.upload.rejected ns=%s reason=extension", short_ns(namespace))
            raise app_error(ErrorMessage.INVALID_EXTENSION)

        try:
            data = await file.read()
        except OSError:
            logger.error("track.upload.read.error ns=%s", short_ns(namespace), exc_info=True)
            raise app_error(ErrorMessage.INTERNAL_ERROR)

        try:
            entry = await self._storage.create(namespace, name, data)
        except TrackStorageError as e:
            logger.info(
                "track.upload.rejected ns=%s reason=%s",
                short_ns(namespace),
                type(e).__name__,
            )
            raise _translate(e)
        except OSError:
            logger.error("track.upload.persist.error ns=%s", short_ns(namespace), exc_info=True)
            raise app_error(ErrorMessage.INTERNAL_ERROR)

        logger.info(
            "track.upload.ok ns=%s id=%s bytes=%d",
            short_ns(namespace),
            entry.track_id,
            len(data),
        )
        return entry.name

    async def list(self, namespace: str) -> List[TrackSummary]:
        try:
            entries = await self._storage.list_tracks(namespace)
        except OSError:
            logger.error("track.list.error ns=%s", short_ns(namespace), exc_info=True)
            raise app_error(ErrorMessage.INTERNAL_ERROR)
        return [TrackSummary(id=e.track_id, fileName=e.name) for e in entries]

    async def count(self, namespace: str) -> int:
        try:
            return await self._storage.count(namespace)
        except OSError:
            logger.error("track.count.error ns=%s", short_ns(namespace), exc_info=True)
            raise app_error(ErrorMessage.INTERNAL_ERROR)

    async def get_by_index(self, namespace: str, index: int) -> TrackResponse:
        try:
            stored = await self._storage.get_by_index(namespace, index)
        except TrackStorageError as e:
            raise _translate(e)
        except OSError:
            logger.error("track.get.error ns=%s index=%d", short_ns(namespace), index, exc_info=True)
            raise app_error(ErrorMessage.INTERNAL_ERROR)
        return await self._parsed(namespace, stored)

    async def get_by_id(self, namespace: str, track_id: int) -> TrackResponse:
        try:
            stored = await self._storage.get_by_id(namespace, track_id)
        except TrackStorageError as e:
            raise _translate(e)
        except OSError:
            logger.error("track.get.error ns=%s id=%d", short_ns(namespace), track_id, exc_info=True)
            raise app_error(ErrorMessage.INTERNAL_ERROR)
        return await self._parsed(namespace, stored)

    async def download(self, namespace: str, name: str) -> StoredTrack:
        # Bytes are read before the response starts; a delete in between is a 404.
        try:
            return await self._storage.get_by_name(namespace, name)
        except TrackStorageError as e:
            raise _translate(e)
        except OSError:
            logger.error("track.download.error ns=%s", short_ns(namespace), exc_info=True)
            raise app_error(ErrorMessage.INTERNAL_ERROR)

    async def delete(self, namespace: str, name: str) -> None:
        try:
            await self._storage.delete(namespace, name)
        except TrackStorageError as e:
            logger.info("track.delete.rejected ns=%s reason=%s", short_ns(namespace), type(e).__name__)
            raise _translate(e)
        except OSError:
            logger.error("track.delete.error ns=%s", short_ns(namespace), exc_info=True)
            raise app_error(ErrorMessage.INTERNAL_ERROR)
        logger.info("track.delete.ok ns=%s", short_ns(namespace))

    @staticmethod
    async def _parsed(namespace: str, stored: StoredTrack) -> TrackResponse:
        try:
            data = await run_in_threadpool(parse_track, stored.content)
        except TrackParseError:
            logger.error(
                "track.parse.error ns=%s id=%s", short_ns(namespace), stored.track_id, exc_info=True
            )
            raise app_error(ErrorMessage.INTERNAL_ERROR)
        return TrackResponse(id=stored.track_id, fileName=stored.name, data=data)
