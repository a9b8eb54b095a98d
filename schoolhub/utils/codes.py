# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Random codes, usernames and hashed invitation codes.

Class codes, module codes and invitation codes are short upper-case
alphanumeric strings. Invitation codes are never stored in plain text;
only their bcrypt hash is persisted.

Example:
    >>> code = generate_code()
    >>> len(code)
    8
    >>> hasher = CodeHasher()
    >>> hasher.verify(code, hasher.hash(code))
    True
"""

import logging
import re
import secrets
import string

import bcrypt

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits
USERNAME_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits
USERNAME_SUFFIX_LENGTH = 6
MAX_SLUG_LENGTH = 30
BASE64_IMAGE_PREFIX = "data:image"

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def generate_code(length: int = 8) -> str:
    """Generate a random upper-case alphanumeric code.

    Args:
        length: Number of characters.

    Returns:
        Code such as ``"K3Q9ZP2A"``.

    Raises:
        ValueError: If length is not positive.
    """
    if length <= 0:
        raise ValueError("Code length must be positive")
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


def generate_username(name: str) -> str:
    """Derive a unique-ish username from a display name.

    The name is lower-cased, stripped to alphanumerics, truncated and
    suffixed with six random characters, so ``"Green Hills"`` becomes
    something like ``"greenhills-4k2j9x"``.

    Args:
        name: Display name of a school or class.

    Returns:
        Generated username.
    """
    slug = _NON_ALNUM.sub("", (name or "").lower())[:MAX_SLUG_LENGTH] or "item"
    suffix = "".join(
        secrets.choice(USERNAME_SUFFIX_ALPHABET) for _ in range(USERNAME_SUFFIX_LENGTH)
    )
    return f"{slug}-{suffix}"


def is_base64_image(value: object) -> bool:
    """Check whether a value is an inline base64 image data URI."""
    return isinstance(value, str) and value.startswith(BASE64_IMAGE_PREFIX)


class CodeHasher:
    """Bcrypt hashing for invitation codes.

    Example:
        >>> hasher = CodeHasher(rounds=4)
        >>> hashed = hasher.hash("ABCD1234")
        >>> hasher.verify("ABCD1234", hashed)
        True
    """

    def __init__(self, rounds: int = 12) -> None:
        """Initialize the code hasher.

        Args:
            rounds: Number of bcrypt rounds.
        """
        self._rounds = rounds

    def hash(self, code: str) -> str:
        """Hash a code using bcrypt.

        Args:
            code: Plain text code.

        Returns:
            Bcrypt hash string with salt embedded.

        Raises:
            ValueError: If code is empty.
        """
        if not code:
            raise ValueError("Code cannot be empty")

        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(code.encode("utf-8"), salt).decode("utf-8")

    def verify(self, code: str, code_hash: str) -> bool:
        """Verify a code against a stored hash.

        Returns:
            True if the code matches, False otherwise or on malformed input.
        """
        if not code or not code_hash:
            return False

        try:
            return bcrypt.checkpw(code.encode("utf-8"), code_hash.encode("utf-8"))
        except ValueError as e:
            logger.warning("Code verification failed: %s", str(e))
            return False
