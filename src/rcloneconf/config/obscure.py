"""Obscure stored passwords.

Obscuring keeps passwords from being readable at a glance in the
configuration file. It is reversible by anyone with this code and is no
replacement for encrypting the configuration.

"""

import base64
import binascii
import os

from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from rcloneconf import ObscureError

# Fixed and public: obscured values must be revealable everywhere.
CRYPT_KEY = bytes(
    [
        0x9C, 0x93, 0x5B, 0x48, 0x73, 0x0A, 0x55, 0x4D,
        0x6B, 0xFD, 0x7C, 0x63, 0xC8, 0x86, 0xA9, 0x2B,
        0xD3, 0x90, 0x19, 0x8E, 0xB8, 0x12, 0x8A, 0xFB,
        0xF4, 0xDE, 0x16, 0x2B, 0x8B, 0x95, 0xF6, 0x38,
    ]
)
BLOCK_SIZE = 16


class Obscurer(object):
    """AES-CTR with a fixed key and a random IV, URL-safe base64 encoded."""

    def _cipher(self, iv):
        return Cipher(
            algorithms.AES(CRYPT_KEY), modes.CTR(iv), backend=default_backend()
        )

    def obscure(self, plaintext: str) -> str:
        iv = os.urandom(BLOCK_SIZE)
        encryptor = self._cipher(iv).encryptor()
        ciphertext = (
            encryptor.update(plaintext.encode("utf-8")) + encryptor.finalize()
        )
        return (
            base64.urlsafe_b64encode(iv + ciphertext)
            .rstrip(b"=")
            .decode("ascii")
        )

    def reveal(self, obscured: str) -> str:
        padded = obscured + "=" * (-len(obscured) % 4)
        try:
            data = base64.urlsafe_b64decode(padded)
        except (binascii.Error, ValueError):
            raise ObscureError.from_context(
                "base64 decode failed when revealing password - "
                "is it obscured?"
            )
        if len(data) < BLOCK_SIZE:
            raise ObscureError.from_context(
                "input too short when revealing password - is it obscured?"
            )
        iv, ciphertext = data[:BLOCK_SIZE], data[BLOCK_SIZE:]
        decryptor = self._cipher(iv).decryptor()
        cleartext = decryptor.update(ciphertext) + decryptor.finalize()
        try:
            return cleartext.decode("utf-8")
        except UnicodeDecodeError:
            raise ObscureError.from_context(
                "revealed password is not valid utf-8 - is it obscured?"
            )
