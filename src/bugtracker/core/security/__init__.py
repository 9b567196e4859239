"""Security utilities.

Re-exports all security-related functions for convenience.
"""

from src.bugtracker.core.security.crypto import (
    DUMMY_PASSWORD_HASH,
    INVITE_TOKEN_BYTES,
    create_access_token,
    decode_token,
    generate_invite_token,
    hash_password,
    hash_token,
    verify_password,
)

__all__ = [
    "DUMMY_PASSWORD_HASH",
    "INVITE_TOKEN_BYTES",
    "create_access_token",
    "decode_token",
    "generate_invite_token",
    "hash_password",
    "hash_token",
    "verify_password",
]
