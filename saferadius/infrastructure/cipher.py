"""
AES-GCM field encryption for POI names and coordinates.

Keys are derived from configured passphrases with PBKDF2-HMAC-SHA256. Every
token records the version of the key that produced it:

    <version>:base64(nonce + tag + ciphertext)

so the active key can be rotated while older rows stay readable.
"""

import base64
import binascii
from functools import lru_cache
from typing import Mapping

from Crypto.Cipher import AES
from Crypto.Hash import SHA256
from Crypto.Protocol.KDF import PBKDF2
from Crypto.Random import get_random_bytes

from saferadius.config import Settings

PBKDF2_ITERS = 200_000
DEFAULT_SALT = b"saferadius-salt"
DEFAULT_VERSION = "v1"
NONCE_SIZE = 12
TAG_SIZE = 16
_SEPARATOR = ":"


class DecryptionError(Exception):
    """Ciphertext could not be decrypted: corrupt, unknown version or wrong key."""


@lru_cache(maxsize=32)
def derive_key(passphrase: str, salt: bytes = DEFAULT_SALT, iterations: int = PBKDF2_ITERS) -> bytes:
    """Derive a 256-bit AES key from a passphrase."""
    return PBKDF2(passphrase.encode("utf-8"), salt, dkLen=32, count=iterations, hmac_hash_module=SHA256)


def encrypt_with_key(key: bytes, plaintext: bytes) -> str:
    """AES-GCM encrypt; return base64(nonce + tag + ciphertext)."""
    nonce = get_random_bytes(NONCE_SIZE)
    cipher = AES.new(key, AES.MODE_GCM, nonce=nonce)
    ct, tag = cipher.encrypt_and_digest(plaintext)
    return base64.b64encode(nonce + tag + ct).decode("ascii")


def decrypt_with_key(key: bytes, token_b64: str) -> bytes:
    """Inverse of encrypt_with_key. Raises DecryptionError on any failure."""
    try:
        data = base64.b64decode(token_b64, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DecryptionError("Ciphertext is not valid base64") from exc
    if len(data) < NONCE_SIZE + TAG_SIZE:
        raise DecryptionError("Ciphertext is truncated")

    nonce, tag, ct = data[:NONCE_SIZE], data[NONCE_SIZE:NONCE_SIZE + TAG_SIZE], data[NONCE_SIZE + TAG_SIZE:]
    cipher = AES.new(key, AES.MODE_GCM, nonce=nonce)
    try:
        return cipher.decrypt_and_verify(ct, tag)
    except ValueError as exc:
        raise DecryptionError("Authentication tag mismatch") from exc


class FieldCipher:
    """Versioned key ring: encrypts with the active key, decrypts with any known key."""

    def __init__(
        self,
        keys: Mapping[str, str],
        active_version: str,
        salt: bytes = DEFAULT_SALT,
        iterations: int = PBKDF2_ITERS,
    ):
        if active_version not in keys:
            raise ValueError(f"No key configured for active version {active_version!r}")
        for version in keys:
            if not version or _SEPARATOR in version:
                raise ValueError(f"Invalid key version {version!r}")

        self.active_version = active_version
        self._keys = {
            version: derive_key(passphrase, salt, iterations)
            for version, passphrase in keys.items()
        }

    @classmethod
    def from_settings(cls, settings: Settings) -> "FieldCipher":
        keys = dict(settings.ENCRYPTION_RETIRED_KEYS)
        keys[settings.ENCRYPTION_KEY_VERSION] = settings.ENCRYPTION_KEY
        return cls(
            keys,
            active_version=settings.ENCRYPTION_KEY_VERSION,
            salt=settings.ENCRYPTION_SALT.encode("utf-8"),
            iterations=settings.ENCRYPTION_KDF_ITERATIONS,
        )

    @property
    def versions(self) -> list[str]:
        return sorted(self._keys)

    def encrypt(self, plaintext: str) -> str:
        token = encrypt_with_key(self._keys[self.active_version], plaintext.encode("utf-8"))
        return f"{self.active_version}{_SEPARATOR}{token}"

    def decrypt(self, token: str) -> str:
        if not isinstance(token, str):
            raise DecryptionError("Ciphertext must be a string")
        version, sep, body = token.partition(_SEPARATOR)
        if not sep:
            raise DecryptionError("Ciphertext has no key version")
        key = self._keys.get(version)
        if key is None:
            raise DecryptionError(f"Unknown key version {version!r}")

        raw = decrypt_with_key(key, body)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecryptionError("Plaintext is not valid UTF-8") from exc


def encrypt(plaintext: str, key: str, version: str = DEFAULT_VERSION) -> str:
    """Encrypt ``plaintext`` with the passphrase ``key``."""
    return FieldCipher({version: key}, version).encrypt(plaintext)


def decrypt(ciphertext: str, key: str) -> str:
    """Decrypt a token produced by :func:`encrypt` with the same passphrase.

    Raises DecryptionError when the key is wrong or the token is damaged.
    """
    version = ciphertext.partition(_SEPARATOR)[0] if isinstance(ciphertext, str) else ""
    version = version or DEFAULT_VERSION
    return FieldCipher({version: key}, version).decrypt(ciphertext)
