"""
Token encryption for OAuth access tokens kept in the local store (Fernet).
"""

import base64
import logging
from typing import Optional

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from config import settings

logger = logging.getLogger(__name__)


def _get_fernet() -> Fernet:
    """Get Fernet instance from the configured encryption key."""
    key = settings.ENCRYPTION_KEY

    # Anything that is not exactly 32 bytes is stretched with PBKDF2
    if len(key) != 32:
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=32,
            salt=b"scriptos_token_salt",
            iterations=100000,
        )
        key = base64.urlsafe_b64encode(kdf.derive(key.encode()))
    else:
        key = base64.urlsafe_b64encode(key.encode())

    return Fernet(key)


def encrypt_token(token: str) -> str:
    """Encrypt a plain-text token for storage."""
    return _get_fernet().encrypt(token.encode()).decode()


def decrypt_token(encrypted_token: str) -> Optional[str]:
    """
    Decrypt a stored token.

    Returns None when the value cannot be decrypted (rotated key, tampered
    value); the caller treats that as "not connected".
    """
    try:
        return _get_fernet().decrypt(encrypted_token.encode()).decode()
    except InvalidToken:
        logger.warning("Stored OAuth token could not be decrypted; ignoring it.")
        return None
