# util/errors.py
from fastapi import HTTPException, status
from util.enums import ErrorMessage


class AppError(HTTPException):
    # Flow: raise AppError to short-circuit with a typed status & message.
    def __init__(
        self, message: str, http_status: int = status.HTTP_400_BAD_REQUEST
    ) -> None:
        super().__init__(status_code=http_status, detail=message)


class TrackStorageError(Exception):
    """Base for namespace storage failures the handlers know how to map."""


class MissingTrackError(TrackStorageError):
    pass


class InvalidTrackError(TrackStorageError):
    pass


class InvalidExtensionError(InvalidTrackError):
    pass


class InvalidNameError(InvalidTrackError):
    pass


class TrackExistsError(TrackStorageError):
    pass


class TrackNotFoundError(TrackStorageError):
    pass


class TrackParseError(Exception):
    pass


class EmailTakenError(Exception):
    pass


class NamespaceTakenError(Exception):
    pass


def app_error(error: ErrorMessage) -> AppError:
    return AppError(error.value.message, error.value.http_status)
