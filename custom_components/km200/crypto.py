"""AES codec for Buderus KM200 gateway communication.

Bodies sent to the gateway are zero-padded and encrypted with AES-256-ECB.
Bodies received from the gateway are decrypted with AES-256-CBC and an
all-zero IV.  The two modes differ on purpose: the device accepts ECB input
and produces CBC output, and both must be reproduced exactly.

The key is two MD5 digests: the gateway password salted with the magic
constant, and the magic constant salted with the private password.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
from collections.abc import Sequence

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from .config import load_config
from .const import BLOCK_SIZE, DEFAULT_CONFIG_PATHS, KEY_LENGTH, MAGIC
from .exceptions import KM200DecodingError
from .models import Credentials

_ZERO_IV = bytes(BLOCK_SIZE)


def _to_bytes(data: str | bytes) -> bytes:
    return data.encode() if isinstance(data, str) else bytes(data)


def _check_key(key: bytes) -> None:
    if len(key) != KEY_LENGTH:
        raise ValueError(f"key must be {KEY_LENGTH} bytes, got {len(key)}")


def key_part1(gateway_password: str | bytes) -> bytes:
    """First key half: MD5 of the gateway password followed by MAGIC."""
    return hashlib.md5(_to_bytes(gateway_password) + MAGIC).digest()


def key_part2(private_password: str | bytes) -> bytes:
    """Second key half: MD5 of MAGIC followed by the private password."""
    return hashlib.md5(MAGIC + _to_bytes(private_password)).digest()


def derive_key(
    gateway_password: str | bytes, private_password: str | bytes
) -> bytes:
    """Derive the 32-byte AES key from the two passwords."""
    return key_part1(gateway_password) + key_part2(private_password)


def encrypt(cleartext: str | bytes, key: bytes) -> str:
    """Zero-pad, encrypt with AES-256-ECB and return base64 text."""
    _check_key(key)
    data = _to_bytes(cleartext)
    data += bytes(-len(data) % BLOCK_SIZE)
    encryptor = Cipher(algorithms.AES(key), modes.ECB()).encryptor()
    cipher_bytes: bytes = encryptor.update(data) + encryptor.finalize()
    return base64.b64encode(cipher_bytes).decode("ascii")


def decrypt(ciphertext: str | bytes, key: bytes) -> bytes:
    """Decode base64, decrypt with AES-256-CBC (zero IV), drop NUL bytes.

    Line breaks in the base64 text are tolerated.  Every NUL byte is removed
    from the result, not just trailing padding, so NUL bytes in the original
    cleartext do not survive a round trip.
    """
    _check_key(key)
    compact = b"".join(_to_bytes(ciphertext).split())
    try:
        cipher_bytes = base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise KM200DecodingError(f"Invalid base64 payload: {exc}") from exc

    if len(cipher_bytes) % BLOCK_SIZE:
        raise KM200DecodingError(
            f"Ciphertext length {len(cipher_bytes)} is not a multiple "
            f"of {BLOCK_SIZE}"
        )

    try:
        decryptor = Cipher(algorithms.AES(key), modes.CBC(_ZERO_IV)).decryptor()
        plain: bytes = decryptor.update(cipher_bytes) + decryptor.finalize()
    except ValueError as exc:
        raise KM200DecodingError(f"Cipher failure: {exc}") from exc

    return plain.replace(b"\0", b"")


class KM200Crypto:
    """Encrypt/decrypt payloads for the KM200 gateway with a fixed key."""

    def __init__(
        self, gateway_password: str | bytes, private_password: str | bytes
    ) -> None:
        self._key = derive_key(gateway_password, private_password)

    @classmethod
    def from_key(cls, key: bytes) -> KM200Crypto:
        """Wrap an already derived key."""
        _check_key(key)
        crypto = cls.__new__(cls)
        crypto._key = bytes(key)
        return crypto

    @classmethod
    def from_credentials(cls, credentials: Credentials) -> KM200Crypto:
        return cls(credentials.gateway_password, credentials.private_password)

    @classmethod
    def from_config_file(
        cls,
        filename: str | None = None,
        search_paths: Sequence[str] = DEFAULT_CONFIG_PATHS,
    ) -> KM200Crypto:
        """Derive the key from the passwords in a KM200 config file."""
        return cls.from_credentials(load_config(filename, search_paths))

    @property
    def key(self) -> bytes:
        return self._key

    def encrypt(self, plain: str | bytes) -> str:
        """Encrypt a cleartext payload into base64 text."""
        return encrypt(plain, self._key)

    def decrypt(self, cipher_text: str | bytes) -> bytes:
        """Decrypt base64 text into cleartext bytes."""
        return decrypt(cipher_text, self._key)
