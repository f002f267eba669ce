"""Error taxonomy for credential, session and profile operations.

Every ``AuthError`` is recoverable: stores raise it, ``AuthService`` turns it
into a failed ``Result`` for the caller. ``HashingUnavailableError`` is the
one startup-time failure and is left to propagate.
"""

from enum import Enum


class AuthErrorCode(str, Enum):
    """Machine-readable failure codes."""
    INVALID_EMAIL = "invalid_email"
    WEAK_PASSWORD = "weak_password"
    DUPLICATE_EMAIL = "duplicate_email"
    USER_NOT_FOUND = "user_not_found"
    WRONG_PASSWORD = "wrong_password"
    NOT_AUTHENTICATED = "not_authenticated"


class AuthError(Exception):
    """Base class for recoverable auth failures."""

    code: AuthErrorCode
    default_message = "Request failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidEmailError(AuthError):
    code = AuthErrorCode.INVALID_EMAIL
    default_message = "Enter a valid email, for example name@gmail.com"


class WeakPasswordError(AuthError):
    code = AuthErrorCode.WEAK_PASSWORD
    default_message = "Password must be at least 8 characters"

    def __init__(self, min_length: int = 8, message: str | None = None):
        self.min_length = min_length
        super().__init__(message or f"Password must be at least {min_length} characters")


class DuplicateEmailError(AuthError):
    code = AuthErrorCode.DUPLICATE_EMAIL
    default_message = "This email is already registered"


class UserNotFoundError(AuthError):
    code = AuthErrorCode.USER_NOT_FOUND
    default_message = "User not found"


class WrongPasswordError(AuthError):
    code = AuthErrorCode.WRONG_PASSWORD
    default_message = "Wrong password"


class NotAuthenticatedError(AuthError):
    code = AuthErrorCode.NOT_AUTHENTICATED
    default_message = "You are not signed in"


class HashingUnavailableError(Exception):
    """Raised at startup when no strong password digest is available."""

    def __init__(self, algorithm: str, reason: str | None = None):
        self.algorithm = algorithm
        detail = f": {reason}" if reason else ""
        super().__init__(f"Password digest {algorithm} is unavailable{detail}")
