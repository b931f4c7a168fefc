"""
Encryption utilities

Symmetric encryption for sensitive payment data such as the card expiry
and the cardholder name. Uses Fernet (AES-128-CBC + HMAC-SHA256).
"""

import base64
import hashlib

from cryptography.fernet import Fernet
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured


def get_encryption_key() -> bytes:
    """
    Get the Fernet key from settings.ENCRYPTION_KEY

    Any string is accepted; it is hashed down to the 32 bytes Fernet needs.
    """
    key = getattr(settings, 'ENCRYPTION_KEY', None)

    if not key:
        raise ImproperlyConfigured(
            "ENCRYPTION_KEY not configured in settings. "
            "Generate one with: python -c 'from cryptography.fernet import Fernet; print(Fernet.generate_key().decode())'"
        )

    if isinstance(key, str):
        key = base64.urlsafe_b64encode(hashlib.sha256(key.encode()).digest())

    return key


def encrypt_string(plaintext: str) -> str:
    """Encrypt a string, returning a URL-safe token."""
    if not plaintext:
        return ''
    return Fernet(get_encryption_key()).encrypt(plaintext.encode()).decode()


def decrypt_string(token: str) -> str:
    """Decrypt a token produced by encrypt_string."""
    if not token:
        return ''
    return Fernet(get_encryption_key()).decrypt(token.encode()).decode()
