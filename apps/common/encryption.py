"""
Encryption utilities for the LumiCloud platform
Fernet encryption for panel and database credentials at rest.
"""

import base64
import logging
import os
import secrets
import string

from cryptography.fernet import Fernet, InvalidToken
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

logger = logging.getLogger(__name__)

GENERATED_PASSWORD_SPECIALS = '!@#$%^&*'


def get_encryption_key() -> bytes:
    """
    Get encryption key for sensitive data.
    Uses the ENCRYPTION_KEY setting or DJANGO_ENCRYPTION_KEY environment variable.
    """
    encryption_key = getattr(settings, 'ENCRYPTION_KEY', None)

    if not encryption_key:
        encryption_key = os.environ.get('DJANGO_ENCRYPTION_KEY')

    if not encryption_key:
        raise ImproperlyConfigured(
            "DJANGO_ENCRYPTION_KEY environment variable must be set. "
            "Generate one with: from cryptography.fernet import Fernet; print(Fernet.generate_key().decode())"
        )

    if isinstance(encryption_key, str):
        encryption_key = encryption_key.encode()

    return encryption_key


def encrypt_sensitive_data(data: str) -> str:
    """
    Encrypt a credential for database storage.

    Args:
        data: Plain text string to encrypt

    Returns:
        Base64-encoded encrypted string safe for database storage
    """
    if not data:
        return ''

    fernet = Fernet(get_encryption_key())
    encrypted_bytes = fernet.encrypt(data.encode('utf-8'))
    return base64.b64encode(encrypted_bytes).decode('utf-8')


def decrypt_sensitive_data(encrypted_data: str) -> str:
    """
    Decrypt a credential from database storage.

    Returns an empty string when the value cannot be decrypted (rotated key,
    corrupted row); callers treat that as "no credential stored".
    """
    if not encrypted_data:
        return ''

    try:
        fernet = Fernet(get_encryption_key())
        encrypted_bytes = base64.b64decode(encrypted_data.encode('utf-8'))
        return fernet.decrypt(encrypted_bytes).decode('utf-8')
    except (InvalidToken, ValueError) as e:
        # Don't expose decryption details
        logger.error(f"🔥 [Encryption] Failed to decrypt sensitive data: {type(e).__name__}")
        return ''


def generate_password(length: int = 16) -> str:
    """
    Generate a random password containing lower, upper, digit and special characters.
    """
    pools = [string.ascii_lowercase, string.ascii_uppercase, string.digits, GENERATED_PASSWORD_SPECIALS]
    alphabet = ''.join(pools)

    chars = [secrets.choice(pool) for pool in pools]
    chars += [secrets.choice(alphabet) for _ in range(length - len(chars))]
    secrets.SystemRandom().shuffle(chars)
    return ''.join(chars)
