"""Password digests.

Passwords are stored as the lower-case hex SHA-256 of their UTF-8 bytes.
There is no fallback digest: if SHA-256 cannot be computed the hasher
refuses to start.
"""

import asyncio

from passlib.context import CryptContext
from passlib.registry import get_crypt_handler

from cryptoex.errors import HashingUnavailableError
from cryptoex.logging_config import get_logger

logger = get_logger(__name__)

HASH_SCHEME = "hex_sha256"

# SHA-256 of the empty string
EMPTY_DIGEST = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"


def _require_sha256() -> None:
    try:
        digest = get_crypt_handler(HASH_SCHEME).hash("")
    except KeyError as e:
        raise HashingUnavailableError("sha256", f"passlib has no {HASH_SCHEME} handler") from e
    except ValueError as e:
        raise HashingUnavailableError("sha256", str(e)) from e
    if digest != EMPTY_DIGEST:
        raise HashingUnavailableError("sha256", "handler returned an unexpected digest")


class PasswordHasher:
    """Deterministic one-way password digests.

    Raises:
        HashingUnavailableError: On construction, if SHA-256 is unavailable
    """

    def __init__(self):
        _require_sha256()
        self.context = CryptContext(schemes=[HASH_SCHEME])

    async def hash(self, password: str) -> str:
        """Hash a password.

        Args:
            password: Plain password

        Returns:
            Hex digest
        """
        return await asyncio.to_thread(self.context.hash, password)

    async def verify(self, password: str, hashed: str) -> bool:
        """Verify a password against a stored digest.

        Args:
            password: Plain password
            hashed: Stored digest

        Returns:
            True if matches; False for digests in any other format
        """
        if not hashed or not self.context.identify(hashed):
            logger.warning("unrecognized_password_hash")
            return False
        return await asyncio.to_thread(self.context.verify, password, hashed)
