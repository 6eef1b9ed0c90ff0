# core/passwords.py
import logging
import bcrypt

logger = logging.getLogger(__name__)

# bcrypt ignores everything past 72 bytes; longer inputs are rejected by newer releases.
_MAX_BYTES = 72


def hash_password(password: str, rounds: int = 12) -> str:
    password_bytes = password.encode("utf-8")[:_MAX_BYTES]
    return bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """Constant-time check; a malformed hash counts as a mismatch."""
    try:
        return bcrypt.checkpw(
            password.encode("utf-8")[:_MAX_BYTES], hashed.encode("utf-8")
        )
    except ValueError:
        logger.error("password.verify.malformed_hash")
        return False
