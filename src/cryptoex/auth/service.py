"""Account service: the operation set the UI layer calls."""

from dataclasses import dataclass
from typing import Any, Callable, Mapping

from cryptoex.account.history import HistoryStore
from cryptoex.account.models import Profile
from cryptoex.account.profile import ProfileStore
from cryptoex.auth.credentials import CredentialStore, is_valid_email
from cryptoex.auth.hashing import PasswordHasher
from cryptoex.auth.models import CurrentUser, Result
from cryptoex.auth.session import SessionManager
from cryptoex.errors import AuthError, NotAuthenticatedError
from cryptoex.logging_config import get_logger
from cryptoex.referral.codes import generate_ref_code
from cryptoex.referral.ledger import ReferralLedger, now_ms
from cryptoex.referral.links import build_ref_link, extract_path, extract_ref_code
from cryptoex.referral.models import LedgerEntry, RefSummary
from cryptoex.settings import Settings, settings as default_settings
from cryptoex.storage.adapter import StorageAdapter
from cryptoex.storage.tables import transaction

logger = get_logger(__name__)


@dataclass
class Stores:
    """All stores bound to one storage adapter (or one transaction)."""
    credentials: CredentialStore
    session: SessionManager
    profiles: ProfileStore
    history: HistoryStore
    referrals: ReferralLedger


class AuthService:
    """Registration, sign-in, profile, history and referral operations.

    Failures come back as ``Result(ok=False, ...)``; nothing raised by a
    store escapes, except ``HashingUnavailableError`` from the constructor.
    """

    def __init__(
        self,
        storage: StorageAdapter,
        settings: Settings | None = None,
        hasher: PasswordHasher | None = None,
        clock: Callable[[], int] = now_ms,
        code_generator: Callable[[int], str] = generate_ref_code,
    ):
        self.storage = storage
        self.settings = settings or default_settings
        self.hasher = hasher or PasswordHasher()
        self.clock = clock
        self.code_generator = code_generator
        self.logger = get_logger(__name__)
        self.stores = self._bind(storage)

    def _bind(self, storage: StorageAdapter) -> Stores:
        return Stores(
            credentials=CredentialStore(
                storage, self.hasher, self.settings, code_generator=self.code_generator
            ),
            session=SessionManager(storage),
            profiles=ProfileStore(storage),
            history=HistoryStore(storage),
            referrals=ReferralLedger(storage, clock=self.clock, limit=self.settings.ref_log_limit),
        )

    # ==================== CREDENTIALS ====================

    @staticmethod
    def is_valid_email(email: str | None) -> bool:
        return is_valid_email(email)

    async def register(self, email: str | None, password: str | None) -> Result:
        """Create an account, attribute any staged referral and sign in.

        Nothing is written unless every step succeeds.
        """
        try:
            with transaction(self.storage) as tx:
                stores = self._bind(tx)
                incoming = stores.referrals.peek_incoming()
                user = await stores.credentials.register(email, password, referred_by=incoming)
                if incoming:
                    stores.referrals.record_registration(incoming, user.email)
                    stores.referrals.clear_incoming()
                stores.profiles.initialize(user.email)
                stores.session.set_active(user.email)
        except AuthError as e:
            self.logger.info("registration_rejected", error=e.code.value)
            return Result.failure(e)

        self.logger.info("user_registered", ref_code=user.ref_code, referred_by=user.referred_by or None)
        return Result.success(CurrentUser(email=user.email, ref_code=user.ref_code))

    async def login(self, email: str | None, password: str | None) -> Result:
        try:
            with transaction(self.storage) as tx:
                stores = self._bind(tx)
                user = await stores.credentials.login(email, password)
                stores.session.set_active(user.email)
        except AuthError as e:
            self.logger.info("login_rejected", error=e.code.value)
            return Result.failure(e)

        self.logger.info("user_logged_in", ref_code=user.ref_code)
        return Result.success(CurrentUser(email=user.email, ref_code=user.ref_code))

    def logout(self) -> Result:
        self.stores.session.clear()
        self.logger.info("user_logged_out")
        return Result.success()

    async def change_password(self, old_password: str | None, new_password: str | None) -> Result:
        try:
            await self.stores.credentials.change_password(
                self.stores.session.get_active(), old_password, new_password
            )
        except AuthError as e:
            self.logger.info("password_change_rejected", error=e.code.value)
            return Result.failure(e)
        return Result.success()

    # ==================== SESSION ====================

    def get_current_user(self) -> CurrentUser | None:
        """Get the signed-in user, backfilling a missing referral code."""
        email = self.stores.session.get_active()
        if not email:
            return None

        user = self.stores.credentials.find(email)
        if user is None:
            return None

        ref_code = user.ref_code or self.stores.credentials.ensure_ref_code(user.email) or ""
        return CurrentUser(email=user.email, ref_code=ref_code)

    def require_auth(self, redirect_to: str | None = None) -> bool:
        """Check for a session.

        Args:
            redirect_to: Page the caller should send a signed-out visitor to

        Returns:
            True if a user is signed in
        """
        if self.get_current_user() is None:
            self.logger.info("auth_required", redirect_to=redirect_to or self.settings.login_page)
            return False
        return True

    # ==================== PROFILE & HISTORY ====================

    def get_my_profile(self) -> Profile | None:
        email = self.stores.session.get_active()
        if not email:
            return None
        return self.stores.profiles.get(email)

    def update_profile(self, fields: Mapping[str, Any]) -> Result:
        try:
            profile = self.stores.profiles.update(self.stores.session.get_active(), fields)
        except AuthError as e:
            return Result.failure(e)
        return Result.success(profile)

    def add_exchange(self, record: Mapping[str, Any]) -> Result:
        email = self.stores.session.get_active()
        if not email:
            return Result.failure(NotAuthenticatedError())
        return Result.success(self.stores.history.append(email, record))

    def get_my_history(self) -> list[dict[str, Any]]:
        email = self.stores.session.get_active()
        if not email:
            return []
        return self.stores.history.list_for(email)

    # ==================== REFERRALS ====================

    def observe_referral(self, code: str | None, path: str = "") -> bool:
        """Stage a referral code seen on a visit and count the click.

        A signed-in user following their own link is not counted.

        Returns:
            True if a click was recorded
        """
        me = self.get_current_user()
        return self.stores.referrals.observe(
            code or "", path, own_code=me.ref_code if me else None
        )

    def track_visit(self, url: str) -> bool:
        """Page-load hook: pick up a ``ref`` parameter from the visited URL."""
        code = extract_ref_code(url, self.settings.ref_param)
        if not code:
            return False
        return self.observe_referral(code, extract_path(url))

    def get_my_ref_code(self) -> str | None:
        me = self.get_current_user()
        return me.ref_code if me else None

    def get_ref_stats(self, code: str) -> LedgerEntry:
        return self.stores.referrals.stats_for(code)

    def build_ref_link(self, code: str, page_url: str | None = None) -> str:
        return build_ref_link(
            code,
            page_url or self.settings.site_url,
            page=self.settings.landing_page,
            param=self.settings.ref_param,
        )

    def get_my_ref_summary(self, page_url: str | None = None) -> RefSummary | None:
        """Get the signed-in user's referral code, link and recent activity.

        Args:
            page_url: URL of the page asking; defaults to ``settings.site_url``

        Returns:
            Summary, or None when signed out
        """
        code = self.get_my_ref_code()
        if not code:
            return None

        stats = self.get_ref_stats(code)
        recent = self.settings.ref_recent_limit
        return RefSummary(
            ref_code=code,
            ref_link=self.build_ref_link(code, page_url),
            clicks_count=len(stats.clicks),
            regs_count=len(stats.regs),
            clicks_recent=stats.clicks[:recent],
            regs_recent=stats.regs[:recent],
        )
