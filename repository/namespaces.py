# repository/namespaces.py
from typing import Final

ROOT: Final[str] = "tracklog"

USERS: Final[str] = f"{ROOT}:users"
USERS_BY_EMAIL: Final[str] = f"{USERS}:email"
USERS_BY_NAMESPACE: Final[str] = f"{USERS}:namespace"
