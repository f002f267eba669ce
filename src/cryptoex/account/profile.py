"""Profile store keyed by (case-insensitive) email."""

from typing import Any, Mapping

from cryptoex.account.models import Profile, merge_profile, profile_adapter, profiles_adapter
from cryptoex.errors import NotAuthenticatedError
from cryptoex.logging_config import get_logger
from cryptoex.storage.adapter import StorageAdapter
from cryptoex.storage.tables import PROFILE_KEY, read_mapping, write_table

logger = get_logger(__name__)


def _find_key(profiles: dict[str, Profile], email: str) -> str | None:
    wanted = email.strip().lower()
    for key in profiles:
        if key.lower() == wanted:
            return key
    return None


class ProfileStore:
    """Reads and merges per-user profile fields."""

    def __init__(self, storage: StorageAdapter):
        self.storage = storage

    def _load(self) -> dict[str, Profile]:
        return read_mapping(self.storage, PROFILE_KEY, profile_adapter)

    def _save(self, profiles: dict[str, Profile]) -> None:
        write_table(self.storage, PROFILE_KEY, profiles_adapter, profiles)

    def get(self, email: str) -> Profile:
        """Get a profile; an empty one if none was stored."""
        profiles = self._load()
        key = _find_key(profiles, email)
        if key is None:
            return Profile(email=email.strip())
        return profiles[key]

    def initialize(self, email: str) -> Profile:
        """Create a blank profile unless one exists."""
        profiles = self._load()
        key = _find_key(profiles, email)
        if key is not None:
            return profiles[key]

        profile = Profile(email=email.strip())
        profiles[email.strip().lower()] = profile
        self._save(profiles)
        return profile

    def update(self, email: str | None, fields: Mapping[str, Any]) -> Profile:
        """Merge fields into the profile of the signed-in user.

        Args:
            email: Session email, or None when signed out
            fields: Partial profile fields

        Returns:
            Updated profile

        Raises:
            NotAuthenticatedError: If there is no session
        """
        if not email:
            raise NotAuthenticatedError()

        profiles = self._load()
        key = _find_key(profiles, email) or email.strip().lower()
        current = profiles.get(key) or Profile(email=email.strip())

        profiles[key] = merge_profile(current, fields)
        self._save(profiles)

        logger.info("profile_updated", fields=sorted(str(name) for name in fields))
        return profiles[key]
