"""Referral code generation."""

import secrets
from typing import Callable, Container

from cryptoex.logging_config import get_logger

logger = get_logger(__name__)

# No 0/O or 1/I: 24 letters + 8 digits
REF_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"


def generate_ref_code(length: int = 8) -> str:
    """Generate a readable referral code.

    Format: ABC2DEF9 (8 chars by default)
    """
    return "".join(secrets.choice(REF_CODE_ALPHABET) for _ in range(length))


def generate_unique_ref_code(
    taken: Container[str],
    length: int = 8,
    max_attempts: int = 10,
    generator: Callable[[int], str] = generate_ref_code,
) -> str:
    """Draw codes until one is not already taken.

    Args:
        taken: Codes already assigned
        length: Code length
        max_attempts: Draws before giving up on uniqueness
        generator: Code source

    Returns:
        A fresh code; after ``max_attempts`` collisions the last draw is
        returned as is
    """
    code = generator(length)
    attempts = 1
    while code in taken and attempts < max_attempts:
        code = generator(length)
        attempts += 1

    if code in taken:
        logger.warning("ref_code_collision_unresolved", attempts=attempts)

    return code
