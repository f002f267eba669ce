"""CryptoEx - client-side accounts and referral attribution for the demo exchange."""

__version__ = "0.1.0"
