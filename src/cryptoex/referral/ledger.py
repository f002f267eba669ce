"""Referral ledger: per-code click/registration logs and the incoming slot."""

import time
from typing import Callable

from cryptoex.logging_config import get_logger
from cryptoex.referral.models import (
    ClickEntry,
    LedgerEntry,
    RegistrationEntry,
    ledger_adapter,
    ledger_entry_adapter,
)
from cryptoex.storage.adapter import StorageAdapter
from cryptoex.storage.tables import INCOMING_REF_KEY, REF_LOG_KEY, read_mapping, read_text, write_table

logger = get_logger(__name__)

# Entries kept per click/registration log
REF_LOG_LIMIT = 500


def now_ms() -> int:
    """Current time in epoch milliseconds."""
    return int(time.time() * 1000)


class ReferralLedger:
    """Tracks referral clicks, attributed registrations and the pending code.

    The incoming slot holds the last referral code seen on a visit; a newer
    code replaces it, and a successful registration consumes it.
    """

    def __init__(
        self,
        storage: StorageAdapter,
        clock: Callable[[], int] = now_ms,
        limit: int = REF_LOG_LIMIT,
    ):
        self.storage = storage
        self.clock = clock
        self.limit = limit
        self.logger = get_logger(__name__)

    def _load(self) -> dict[str, LedgerEntry]:
        return read_mapping(self.storage, REF_LOG_KEY, ledger_entry_adapter)

    def _save(self, log: dict[str, LedgerEntry]) -> None:
        write_table(self.storage, REF_LOG_KEY, ledger_adapter, log)

    # ==================== LOGS ====================

    def record_click(self, code: str, path: str = "") -> bool:
        """Log a visit through a referral link.

        Args:
            code: Referral code
            path: Path of the visited page

        Returns:
            True if recorded, False for an empty code
        """
        code = (code or "").strip()
        if not code:
            return False

        log = self._load()
        entry = log.setdefault(code, LedgerEntry())
        entry.clicks.insert(0, ClickEntry(timestamp=self.clock(), path=path or ""))
        del entry.clicks[self.limit:]
        self._save(log)

        self.logger.info("referral_click_recorded", code=code, path=path)
        return True

    def record_registration(self, code: str, email: str) -> bool:
        """Attribute a registration to a referral code.

        Args:
            code: Referral code that was staged at registration
            email: Registered email

        Returns:
            True if recorded, False for an empty code
        """
        code = (code or "").strip()
        if not code:
            return False

        log = self._load()
        entry = log.setdefault(code, LedgerEntry())
        entry.regs.insert(0, RegistrationEntry(timestamp=self.clock(), email=(email or "").strip()))
        del entry.regs[self.limit:]
        self._save(log)

        self.logger.info("referral_registration_recorded", code=code)
        return True

    def stats_for(self, code: str) -> LedgerEntry:
        """Get the full click and registration logs of a code."""
        code = (code or "").strip()
        if not code:
            return LedgerEntry()
        return self._load().get(code) or LedgerEntry()

    # ==================== INCOMING SLOT ====================

    def stage_incoming(self, code: str) -> None:
        code = (code or "").strip()
        if not code:
            self.clear_incoming()
            return
        self.storage.set(INCOMING_REF_KEY, code)

    def peek_incoming(self) -> str | None:
        return read_text(self.storage, INCOMING_REF_KEY)

    def consume_incoming(self) -> str | None:
        """Take the staged code out of the slot."""
        code = self.peek_incoming()
        if code is not None:
            self.clear_incoming()
        return code

    def clear_incoming(self) -> None:
        self.storage.remove(INCOMING_REF_KEY)

    def observe(self, code: str, path: str = "", own_code: str | None = None) -> bool:
        """Handle a referral code seen on a page visit.

        The code is always staged. The click is not counted when it is the
        viewer's own code.

        Args:
            code: Code from the visited URL
            path: Path of the visited page
            own_code: Referral code of the signed-in viewer, if any

        Returns:
            True if a click was recorded
        """
        code = (code or "").strip()
        if not code:
            return False

        self.stage_incoming(code)
        if own_code and own_code == code:
            self.logger.debug("referral_self_click_ignored", code=code)
            return False
        return self.record_click(code, path)
