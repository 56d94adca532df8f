"""
Certificate payload encryption
==============================

Certificate payloads are stored encrypted at rest. Two formats exist:

    gcm1:<base64(iv[12] | tag[16] | ciphertext)>   AES-256-GCM (primary)
    cbc1:<base64(iv[16] | ciphertext)>             AES-256-CBC + PKCS7 (fallback)

Records written before the format tags were introduced are still readable:

    <ivhex>:<ciphertexthex>                        legacy AES-256-CBC
    <base64(iv | tag | ciphertext)>                legacy AES-256-GCM

Key material comes from CERT_ENC_KEY (raw 32 bytes, hex or base64) or,
failing that, SHA-256 of CERT_SECRET.
"""

import base64
import binascii
import hashlib
import json
import os
import re
from typing import Any, Dict, Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from app.core.config import settings
from app.core.exceptions import CertificateDecryptionError, CertificateEncryptionError
from app.core.logging_config import logger


GCM_PREFIX = "gcm1:"
CBC_PREFIX = "cbc1:"

GCM_IV_LENGTH = 12
GCM_TAG_LENGTH = 16
CBC_IV_LENGTH = 16
KEY_LENGTH = 32

# Only used outside production when no secret is configured
DEV_FALLBACK_SECRET = "default-secret-key"

_LEGACY_CBC_PATTERN = re.compile(r"^[0-9a-fA-F]{32}:[0-9a-fA-F]+$")
_HEX_KEY_PATTERN = re.compile(r"^[0-9a-fA-F]{64}$")

_fallback_warned = False


def _parse_raw_key(value: str) -> Optional[bytes]:
    """Decode a raw 32-byte key given as 64 hex chars or base64"""
    value = value.strip()
    if _HEX_KEY_PATTERN.match(value):
        return bytes.fromhex(value)
    try:
        key = base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError):
        return None
    return key if len(key) == KEY_LENGTH else None


def _derive_secret_key(secret: str) -> bytes:
    return hashlib.sha256(secret.encode("utf-8")).digest()


def get_encryption_key() -> bytes:
    """
    Resolve the AES key.

    Order: CERT_ENC_KEY, then sha256(CERT_SECRET), then the development
    fallback. Production refuses to run on the fallback.
    """
    global _fallback_warned

    if settings.CERT_ENC_KEY:
        key = _parse_raw_key(settings.CERT_ENC_KEY)
        if key is not None:
            return key
        logger.warning("CERT_ENC_KEY is not a 32-byte hex/base64 key, falling back to CERT_SECRET")

    if settings.CERT_SECRET:
        return _derive_secret_key(settings.CERT_SECRET)

    if settings.is_production():
        raise CertificateEncryptionError("CERT_SECRET or CERT_ENC_KEY must be set in production")

    if not _fallback_warned:
        logger.warning("No certificate secret configured, using development fallback key")
        _fallback_warned = True
    return _derive_secret_key(DEV_FALLBACK_SECRET)


def _legacy_cbc_key() -> bytes:
    """Legacy CBC records were always keyed from CERT_SECRET"""
    return _derive_secret_key(settings.CERT_SECRET or DEV_FALLBACK_SECRET)


def _serialize(payload: Dict[str, Any]) -> bytes:
    return json.dumps(payload, default=str, separators=(",", ":")).encode("utf-8")


def _encrypt_gcm(plaintext: bytes, key: bytes) -> str:
    iv = os.urandom(GCM_IV_LENGTH)
    # AESGCM appends the tag to the ciphertext; stored layout puts it first
    sealed = AESGCM(key).encrypt(iv, plaintext, None)
    ciphertext, tag = sealed[:-GCM_TAG_LENGTH], sealed[-GCM_TAG_LENGTH:]
    return GCM_PREFIX + base64.b64encode(iv + tag + ciphertext).decode("ascii")


def _decrypt_gcm(raw: bytes, key: bytes) -> bytes:
    if len(raw) <= GCM_IV_LENGTH + GCM_TAG_LENGTH:
        raise ValueError("ciphertext too short")
    iv = raw[:GCM_IV_LENGTH]
    tag = raw[GCM_IV_LENGTH:GCM_IV_LENGTH + GCM_TAG_LENGTH]
    ciphertext = raw[GCM_IV_LENGTH + GCM_TAG_LENGTH:]
    return AESGCM(key).decrypt(iv, ciphertext + tag, None)


def _encrypt_cbc(plaintext: bytes, key: bytes) -> str:
    iv = os.urandom(CBC_IV_LENGTH)
    padder = padding.PKCS7(algorithms.AES.block_size).padder()
    padded = padder.update(plaintext) + padder.finalize()
    encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
    ciphertext = encryptor.update(padded) + encryptor.finalize()
    return CBC_PREFIX + base64.b64encode(iv + ciphertext).decode("ascii")


def _decrypt_cbc(iv: bytes, ciphertext: bytes, key: bytes) -> bytes:
    decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
    padded = decryptor.update(ciphertext) + decryptor.finalize()
    unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
    return unpadder.update(padded) + unpadder.finalize()


def encrypt_certificate_data(payload: Dict[str, Any]) -> str:
    """
    Encrypt a certificate payload.

    Tries AES-GCM first and falls back to AES-CBC if GCM fails. The
    returned string always carries a format tag.
    """
    plaintext = _serialize(payload)
    key = get_encryption_key()

    try:
        return _encrypt_gcm(plaintext, key)
    except Exception as e:
        logger.warning(f"AES-GCM encryption failed, falling back to CBC: {e}")

    try:
        return _encrypt_cbc(plaintext, key)
    except Exception as e:
        logger.error(f"AES-CBC encryption failed: {e}")
        raise CertificateEncryptionError(str(e))


def decrypt_certificate_data(blob: str) -> Dict[str, Any]:
    """
    Decrypt a stored certificate payload in any supported format.

    Raises:
        CertificateDecryptionError: if the blob matches no format or
            authentication/padding fails.
    """
    if not blob or not isinstance(blob, str):
        raise CertificateDecryptionError()

    try:
        if blob.startswith(GCM_PREFIX):
            raw = base64.b64decode(blob[len(GCM_PREFIX):], validate=True)
            plaintext = _decrypt_gcm(raw, get_encryption_key())
        elif blob.startswith(CBC_PREFIX):
            raw = base64.b64decode(blob[len(CBC_PREFIX):], validate=True)
            plaintext = _decrypt_cbc(raw[:CBC_IV_LENGTH], raw[CBC_IV_LENGTH:], get_encryption_key())
        elif _LEGACY_CBC_PATTERN.match(blob):
            iv_hex, ct_hex = blob.split(":", 1)
            plaintext = _decrypt_cbc(bytes.fromhex(iv_hex), bytes.fromhex(ct_hex), _legacy_cbc_key())
        else:
            raw = base64.b64decode(blob, validate=True)
            plaintext = _decrypt_gcm(raw, get_encryption_key())

        return json.loads(plaintext.decode("utf-8"))

    except CertificateEncryptionError:
        raise
    except (InvalidTag, ValueError, binascii.Error, UnicodeDecodeError) as e:
        logger.warning(f"Certificate payload could not be decrypted: {type(e).__name__}")
        raise CertificateDecryptionError() from e
