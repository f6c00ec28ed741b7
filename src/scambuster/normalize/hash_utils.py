# src/scambuster/normalize/hash_utils.py

import hashlib
import logging
from typing import Optional, Union

from scambuster.normalize.phone import normalize_phone

logger = logging.getLogger(__name__)

DEV_SALT = "scambuster-dev-only"


def compute_sha256(data: Union[bytes, str]) -> str:
    """
    Compute SHA-256 hash of input data.

    Args:
        data: Bytes or string to hash. Strings are encoded as UTF-8.

    Returns:
        Hexadecimal SHA-256 hash string (64 lowercase chars).

    Examples:
        >>> compute_sha256("hello")
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    elif not isinstance(data, bytes):
        raise TypeError("Input must be bytes or str")

    return hashlib.sha256(data).hexdigest()


def resolve_salt(salt: Optional[str], environment: str = "development") -> str:
    """
    Pick the salt used for reporter hashes.

    Args:
        salt: Configured salt (HASH_SALT), may be empty
        environment: Deployment environment name

    Returns:
        The configured salt, or the development fallback outside production.

    Raises:
        ValueError: If no salt is configured in production
    """
    if salt:
        return salt
    if environment.lower() == "production":
        raise ValueError(
            "HASH_SALT is required in production. Set it to a long random string."
        )
    logger.warning(
        "HASH_SALT is not set, using insecure development salt. Set HASH_SALT in production."
    )
    return DEV_SALT


def hash_phone(phone: str, salt: str) -> str:
    """One-way hash of a reporter phone, normalized first so formats collide."""
    return compute_sha256(normalize_phone(phone) + salt)


def hash_ip(ip: str, salt: str) -> str:
    """One-way hash of a reporter network origin."""
    return compute_sha256(ip + salt)
