"""Referral module for CryptoEx.

Every user owns one referral code. Visits through a link carrying the code
are logged as clicks, and the code is staged until the visitor registers,
at which point the registration is attributed to it.
"""

from cryptoex.referral.codes import generate_ref_code, generate_unique_ref_code
from cryptoex.referral.ledger import ReferralLedger
from cryptoex.referral.links import build_ref_link, extract_ref_code
from cryptoex.referral.models import ClickEntry, LedgerEntry, RefSummary, RegistrationEntry

__all__ = [
    "ClickEntry",
    "LedgerEntry",
    "RefSummary",
    "ReferralLedger",
    "RegistrationEntry",
    "build_ref_link",
    "extract_ref_code",
    "generate_ref_code",
    "generate_unique_ref_code",
]
