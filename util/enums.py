# util/enums.py
from enum import Enum
from typing import NamedTuple
from fastapi import status


class Color(str, Enum):
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    MAGENTA = "\033[35m"
    CYAN = "\033[36m"
    BOLD = "\033[1m"

    def __str__(self):
        return self.value


class Environment(str, Enum):
    DEV = "dev"
    PROD = "prod"


class ErrorInfo(NamedTuple):
    message: str
    http_status: int


class ErrorMessage(Enum):
    UNAUTHORIZED = ErrorInfo("Unauthorized", status.HTTP_401_UNAUTHORIZED)
    INVALID_LOGIN = ErrorInfo(
        "Invalid email or password", status.HTTP_401_UNAUTHORIZED
    )
    EMAIL_TAKEN = ErrorInfo("Email already registered", status.HTTP_409_CONFLICT)
    NO_FILE = ErrorInfo("No file was provided", status.HTTP_400_BAD_REQUEST)
    INVALID_EXTENSION = ErrorInfo(
        "Only GPX files are allowed", status.HTTP_400_BAD_REQUEST
    )
    INVALID_FILE_NAME = ErrorInfo("Invalid file name", status.HTTP_400_BAD_REQUEST)
    TRACK_EXISTS = ErrorInfo(
        "File with the same name already exists", status.HTTP_409_CONFLICT
    )
    TRACK_NOT_FOUND = ErrorInfo("Track not found", status.HTTP_404_NOT_FOUND)
    # 413 as a literal: its status constant was renamed across Starlette releases.
    FILE_TOO_LARGE = ErrorInfo("File too large", 413)
    INTERNAL_ERROR = ErrorInfo("Internal Error", status.HTTP_500_INTERNAL_SERVER_ERROR)
