"""Credential store (email/password users)."""

import re
from typing import Callable

from cryptoex.auth.hashing import PasswordHasher
from cryptoex.auth.models import UserRecord, user_adapter, users_adapter
from cryptoex.errors import (
    DuplicateEmailError,
    InvalidEmailError,
    NotAuthenticatedError,
    UserNotFoundError,
    WeakPasswordError,
    WrongPasswordError,
)
from cryptoex.logging_config import get_logger
from cryptoex.referral.codes import generate_ref_code, generate_unique_ref_code
from cryptoex.settings import Settings, settings as default_settings
from cryptoex.storage.adapter import StorageAdapter
from cryptoex.storage.tables import USERS_KEY, read_list, write_table

logger = get_logger(__name__)

# local@domain.tld, top-level part at least two characters
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]{2,}$")


def normalize_email(email: str | None) -> str:
    return str(email or "").strip()


def is_valid_email(email: str | None) -> bool:
    return EMAIL_PATTERN.match(normalize_email(email)) is not None


class CredentialStore:
    """Owns the user list: uniqueness, password digests and referral codes."""

    def __init__(
        self,
        storage: StorageAdapter,
        hasher: PasswordHasher,
        settings: Settings | None = None,
        code_generator: Callable[[int], str] = generate_ref_code,
    ):
        self.storage = storage
        self.hasher = hasher
        self.settings = settings or default_settings
        self.code_generator = code_generator
        self.logger = get_logger(__name__)

    # ==================== TABLE ====================

    def list_users(self) -> list[UserRecord]:
        return read_list(self.storage, USERS_KEY, user_adapter)

    def _save(self, users: list[UserRecord]) -> None:
        write_table(self.storage, USERS_KEY, users_adapter, users)

    def find(self, email: str) -> UserRecord | None:
        """Get user by email (case-insensitive)."""
        for user in self.list_users():
            if user.matches(email):
                return user
        return None

    def _new_ref_code(self, users: list[UserRecord]) -> str:
        return generate_unique_ref_code(
            {user.ref_code for user in users if user.ref_code},
            length=self.settings.ref_code_length,
            max_attempts=self.settings.ref_code_max_attempts,
            generator=self.code_generator,
        )

    # ==================== VALIDATION ====================

    def _check_password(self, password: str) -> None:
        if len(password) < self.settings.min_password_length:
            raise WeakPasswordError(self.settings.min_password_length)

    def validate(self, email: str | None, password: str | None) -> tuple[str, str]:
        """Validate credential shape.

        Returns:
            Normalized (email, password)

        Raises:
            InvalidEmailError: If the email is not local@domain.tld
            WeakPasswordError: If the password is too short
        """
        email = normalize_email(email)
        password = str(password or "")

        if not is_valid_email(email):
            raise InvalidEmailError()
        self._check_password(password)
        return email, password

    # ==================== OPERATIONS ====================

    async def register(
        self,
        email: str | None,
        password: str | None,
        referred_by: str | None = None,
    ) -> UserRecord:
        """Create a new user.

        Args:
            email: User email
            password: Plain password
            referred_by: Referral code staged when registering

        Returns:
            Created user

        Raises:
            InvalidEmailError, WeakPasswordError: On malformed input
            DuplicateEmailError: If the email exists in any casing
        """
        email, password = self.validate(email, password)

        if self.find(email) is not None:
            raise DuplicateEmailError()

        password_hash = await self.hasher.hash(password)

        # Re-read after hashing; the table may have changed meanwhile
        users = self.list_users()
        if any(user.matches(email) for user in users):
            raise DuplicateEmailError()

        user = UserRecord(
            email=email,
            password_hash=password_hash,
            ref_code=self._new_ref_code(users),
            referred_by=(referred_by or "").strip(),
        )
        users.append(user)
        self._save(users)

        self.logger.info("user_created", ref_code=user.ref_code, referred=bool(user.referred_by))
        return user

    async def login(self, email: str | None, password: str | None) -> UserRecord:
        """Authenticate a user.

        Args:
            email: User email
            password: Plain password

        Returns:
            Matched user, with a referral code assigned

        Raises:
            InvalidEmailError, WeakPasswordError: On malformed input
            UserNotFoundError: If no user has this email
            WrongPasswordError: If the digest does not match
        """
        email, password = self.validate(email, password)

        user = self.find(email)
        if user is None:
            raise UserNotFoundError()

        if not await self.hasher.verify(password, user.password_hash):
            raise WrongPasswordError()

        if not user.ref_code:
            user.ref_code = self.ensure_ref_code(user.email) or ""

        self.logger.info("user_authenticated", ref_code=user.ref_code)
        return user

    async def change_password(
        self,
        email: str | None,
        old_password: str | None,
        new_password: str | None,
    ) -> None:
        """Change the password of the signed-in user.

        Args:
            email: Session email, or None when signed out
            old_password: Current password
            new_password: New password

        Raises:
            NotAuthenticatedError: If there is no session
            WeakPasswordError: If the new password is too short
            UserNotFoundError: If the session user no longer exists
            WrongPasswordError: If the current password does not match
        """
        if not email:
            raise NotAuthenticatedError()

        old_password = str(old_password or "")
        new_password = str(new_password or "")
        self._check_password(new_password)

        user = self.find(email)
        if user is None:
            raise UserNotFoundError()

        if not await self.hasher.verify(old_password, user.password_hash):
            raise WrongPasswordError("Current password is incorrect")

        new_hash = await self.hasher.hash(new_password)

        users = self.list_users()
        for stored in users:
            if stored.matches(email):
                stored.password_hash = new_hash
                break
        else:
            raise UserNotFoundError()
        self._save(users)

        self.logger.info("password_changed")

    def ensure_ref_code(self, email: str) -> str | None:
        """Assign a referral code if the user has none.

        Args:
            email: User email

        Returns:
            The user's code, or None if no such user
        """
        users = self.list_users()
        for user in users:
            if user.matches(email):
                break
        else:
            return None

        if not user.ref_code:
            user.ref_code = self._new_ref_code(users)
            self._save(users)
            self.logger.info("ref_code_assigned", ref_code=user.ref_code)

        return user.ref_code
