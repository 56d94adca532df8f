"""
Unit Tests for certificate payload encryption
"""
import base64
import hashlib
import json
import os

import pytest
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from app.core import certificate_crypto
from app.core.certificate_crypto import (
    encrypt_certificate_data,
    decrypt_certificate_data,
    get_encryption_key,
    GCM_PREFIX,
    CBC_PREFIX,
)
from app.core.config import settings
from app.core.exceptions import CertificateDecryptionError, CertificateEncryptionError


PAYLOAD = {
    "internName": "Asha Verma",
    "internshipTitle": "Web Development",
    "startDate": "2024-01-01T00:00:00",
    "endDate": "2024-03-31T00:00:00",
    "issuedDate": "2024-04-01T10:15:00",
    "certificateId": "NEX-lq2k3j4a-9F0A1B",
    "company": "NexByte Core",
}


def _secret_key() -> bytes:
    return hashlib.sha256(settings.CERT_SECRET.encode("utf-8")).digest()


class TestRoundTrip:

    def test_gcm_round_trip(self):
        blob = encrypt_certificate_data(PAYLOAD)

        assert blob.startswith(GCM_PREFIX)
        assert decrypt_certificate_data(blob) == PAYLOAD

    def test_ciphertext_differs_each_time(self):
        """Random IV per encryption"""
        assert encrypt_certificate_data(PAYLOAD) != encrypt_certificate_data(PAYLOAD)

    def test_gcm_layout_iv_tag_ciphertext(self):
        blob = encrypt_certificate_data(PAYLOAD)
        raw = base64.b64decode(blob[len(GCM_PREFIX):])

        iv, tag, ciphertext = raw[:12], raw[12:28], raw[28:]
        plaintext = AESGCM(_secret_key()).decrypt(iv, ciphertext + tag, None)

        assert json.loads(plaintext) == PAYLOAD

    def test_cbc_fallback_when_gcm_fails(self, monkeypatch):
        def broken_gcm(plaintext, key):
            raise RuntimeError("gcm unavailable")

        monkeypatch.setattr(certificate_crypto, "_encrypt_gcm", broken_gcm)

        blob = encrypt_certificate_data(PAYLOAD)

        assert blob.startswith(CBC_PREFIX)
        assert decrypt_certificate_data(blob) == PAYLOAD

    def test_both_ciphers_failing_raises(self, monkeypatch):
        def broken(plaintext, key):
            raise RuntimeError("cipher unavailable")

        monkeypatch.setattr(certificate_crypto, "_encrypt_gcm", broken)
        monkeypatch.setattr(certificate_crypto, "_encrypt_cbc", broken)

        with pytest.raises(CertificateEncryptionError):
            encrypt_certificate_data(PAYLOAD)


class TestLegacyFormats:

    def test_untagged_gcm(self):
        iv = os.urandom(12)
        sealed = AESGCM(_secret_key()).encrypt(iv, json.dumps(PAYLOAD).encode(), None)
        blob = base64.b64encode(iv + sealed[-16:] + sealed[:-16]).decode()

        assert decrypt_certificate_data(blob) == PAYLOAD

    def test_hex_cbc(self):
        iv = os.urandom(16)
        padder = padding.PKCS7(128).padder()
        padded = padder.update(json.dumps(PAYLOAD).encode()) + padder.finalize()
        encryptor = Cipher(algorithms.AES(_secret_key()), modes.CBC(iv)).encryptor()
        ciphertext = encryptor.update(padded) + encryptor.finalize()

        blob = f"{iv.hex()}:{ciphertext.hex()}"

        assert decrypt_certificate_data(blob) == PAYLOAD


class TestDecryptionFailures:

    def test_tampered_ciphertext(self):
        blob = encrypt_certificate_data(PAYLOAD)
        raw = bytearray(base64.b64decode(blob[len(GCM_PREFIX):]))
        raw[-1] ^= 0x01
        tampered = GCM_PREFIX + base64.b64encode(bytes(raw)).decode()

        with pytest.raises(CertificateDecryptionError) as exc_info:
            decrypt_certificate_data(tampered)

        assert exc_info.value.code == "CERTIFICATE_DECRYPTION_FAILED"

    def test_wrong_key(self, monkeypatch):
        blob = encrypt_certificate_data(PAYLOAD)
        monkeypatch.setattr(settings, "CERT_SECRET", "another-secret")

        with pytest.raises(CertificateDecryptionError):
            decrypt_certificate_data(blob)

    @pytest.mark.parametrize("blob", ["", "not-base64-%%%", "gcm1:AAAA", "abc:def"])
    def test_garbage(self, blob):
        with pytest.raises(CertificateDecryptionError):
            decrypt_certificate_data(blob)


class TestKeyResolution:

    def test_secret_is_hashed(self):
        assert get_encryption_key() == _secret_key()

    def test_raw_hex_key_wins(self, monkeypatch):
        raw = os.urandom(32)
        monkeypatch.setattr(settings, "CERT_ENC_KEY", raw.hex())

        assert get_encryption_key() == raw

    def test_raw_base64_key(self, monkeypatch):
        raw = os.urandom(32)
        monkeypatch.setattr(settings, "CERT_ENC_KEY", base64.b64encode(raw).decode())

        assert get_encryption_key() == raw

    def test_development_fallback(self, monkeypatch):
        monkeypatch.setattr(settings, "CERT_SECRET", "")

        assert get_encryption_key() == hashlib.sha256(b"default-secret-key").digest()

    def test_production_requires_secret(self, monkeypatch):
        monkeypatch.setattr(settings, "CERT_SECRET", "")
        monkeypatch.setattr(settings, "ENVIRONMENT", "production")

        with pytest.raises(CertificateEncryptionError):
            get_encryption_key()
