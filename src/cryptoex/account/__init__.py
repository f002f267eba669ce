"""Per-user account data: profile fields and exchange history."""

from cryptoex.account.history import HistoryStore
from cryptoex.account.models import PROFILE_FIELDS, Profile, merge_profile
from cryptoex.account.profile import ProfileStore

__all__ = ["HistoryStore", "PROFILE_FIELDS", "Profile", "ProfileStore", "merge_profile"]
