"""Authentication for CryptoEx - local email/password accounts."""

from cryptoex.auth.credentials import CredentialStore, is_valid_email
from cryptoex.auth.hashing import PasswordHasher
from cryptoex.auth.models import CurrentUser, Result, UserRecord
from cryptoex.auth.service import AuthService
from cryptoex.auth.session import SessionManager

__all__ = [
    "AuthService",
    "CredentialStore",
    "CurrentUser",
    "PasswordHasher",
    "Result",
    "SessionManager",
    "UserRecord",
    "is_valid_email",
]
