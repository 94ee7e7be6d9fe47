"""Key derivation and the on-disk format of the configuration file.

A configuration file is either plain INI text or, when a password is set,
a short header followed by a sentinel line and the base64 encoded NaCl
secretbox of the INI text::

    # Encrypted rclone configuration File

    RCLONE_ENCRYPT_V0:
    <base64(nonce + sealed box)>

"""

import base64
import binascii
import configparser
import hashlib
import os
import re
import sys
import unicodedata
from typing import Optional, Tuple, Union

import nacl.secret
import nacl.utils
from configupdater import ConfigUpdater
from nacl.exceptions import CryptoError

from rcloneconf import (
    MalformedConfig,
    PasswordError,
    PasswordRequired,
    UnsupportedEncryption,
)
from rcloneconf._output import output
from rcloneconf.config import new_updater

debug = False

ENCRYPT_V0 = "RCLONE_ENCRYPT_V0:"
ENCRYPT_PREFIX = "RCLONE_ENCRYPT_V"
HEADER = "# Encrypted rclone configuration File\n\n"
PASSWORD_ENVIRONMENT = "RCLONE_CONFIG_PASS"

NONCE_SIZE = nacl.secret.SecretBox.NONCE_SIZE
KEY_SIZE = nacl.secret.SecretBox.KEY_SIZE
MAC_SIZE = nacl.secret.SecretBox.MACBYTES

SECTION_LINE = re.compile(r"^\[(?P<name>[^\]]+)\]")
OPTION_LINE = re.compile(r"^(?P<key>[^\s;#\[=:][^=:]*?)\s*[=:]")


def check_password(password: Union[str, bytes]) -> str:
    """Validate and normalise a configuration password.

    Surrounding whitespace is dropped (with a warning), the remainder is
    NFKC normalised so that visually identical input derives the same key.

    """
    if isinstance(password, bytes):
        try:
            password = password.decode("utf-8")
        except UnicodeDecodeError:
            raise PasswordError.from_context(
                "password contains invalid utf8 characters"
            )
    try:
        password.encode("utf-8")
    except UnicodeEncodeError:
        raise PasswordError.from_context(
            "password contains invalid utf8 characters"
        )
    trimmed = password.strip()
    if trimmed != password:
        print(
            "Your password contains leading/trailing whitespace - "
            "it is ignored when deriving the configuration key",
            file=sys.stderr,
        )
    password = unicodedata.normalize("NFKC", trimmed)
    if not password:
        raise PasswordError.from_context("no characters in password")
    return password


def derive_key(password: Union[str, bytes]) -> bytes:
    """Return the secretbox key for a configuration password."""
    password = check_password(password)
    sha = hashlib.sha256()
    sha.update("[{}][rclone-config]".format(password).encode("utf-8"))
    return sha.digest()


def encrypt(cleartext: bytes, key: bytes) -> bytes:
    """Seal `cleartext`. The result starts with a fresh random nonce."""
    box = nacl.secret.SecretBox(key[:KEY_SIZE])
    nonce = nacl.utils.random(NONCE_SIZE)
    # EncryptedMessage is nonce + ciphertext + tag
    return bytes(box.encrypt(cleartext, nonce))


def decrypt(sealed: bytes, key: bytes) -> bytes:
    """Open a sealed payload. Raises CryptoError for a wrong key."""
    box = nacl.secret.SecretBox(key[:KEY_SIZE])
    return box.decrypt(sealed[NONCE_SIZE:], sealed[:NONCE_SIZE])


def split_marker(data: bytes) -> Tuple[Optional[str], bytes]:
    """Find the encryption marker of a configuration file.

    Returns the marker line (or None for plain text) and the bytes
    following it.

    """
    offset = 0
    for line in data.splitlines(keepends=True):
        offset += len(line)
        stripped = line.strip()
        if not stripped or stripped.startswith((b";", b"#")):
            continue
        if stripped.startswith(ENCRYPT_PREFIX.encode("ascii")):
            return stripped.decode("ascii", errors="replace"), data[offset:]
        break
    return None, data


def drop_repeated_keys(text: str) -> str:
    """Keep only the last assignment of a key within a section.

    Continuation lines belong to the assignment above them and are
    dropped along with it.

    """
    lines = text.splitlines(keepends=True)
    owners = []
    last = {}
    section = current = None
    for index, line in enumerate(lines):
        owner = None
        header = SECTION_LINE.match(line)
        option = OPTION_LINE.match(line)
        if header:
            section = header.group("name")
            current = None
        elif line[:1].isspace() and line.strip() and current is not None:
            owner = current
        elif section is not None and option:
            current = owner = index
            last[section, option.group("key")] = index
        elif line.strip():
            current = None
        owners.append(owner)
    keep = set(last.values())
    return "".join(
        line
        for line, owner in zip(lines, owners)
        if owner is None or owner in keep
    )


def parse(text: str, path="<config>") -> ConfigUpdater:
    if text and not text.endswith("\n"):
        text += "\n"
    try:
        return new_updater().read_string(drop_repeated_keys(text))
    except configparser.Error as e:
        raise MalformedConfig.from_context(path, str(e))


def decode(data: bytes, session) -> ConfigUpdater:
    """Turn the content of a configuration file into a config document.

    Encrypted content is opened with the session key. If there is none yet
    the password is taken from RCLONE_CONFIG_PASS (once) or asked for,
    if the session allows asking.

    """
    path = session.path
    marker, rest = split_marker(data)
    if marker is None:
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedConfig.from_context(path, str(e))
        return parse(text, path)
    if marker != ENCRYPT_V0:
        raise UnsupportedEncryption.from_context(marker)

    try:
        sealed = base64.b64decode(b"".join(rest.split()), validate=True)
    except (binascii.Error, ValueError) as e:
        raise MalformedConfig.from_context(
            path, "failed to load base64 encoded data: {}".format(e)
        )
    if len(sealed) < NONCE_SIZE + MAC_SIZE:
        raise MalformedConfig.from_context(
            path, "configuration data too short"
        )

    env_password = os.environ.get(PASSWORD_ENVIRONMENT, "")
    while True:
        if session.key is None and env_password:
            try:
                session.set_password(env_password)
            except PasswordError as e:
                print(
                    "Using {} returned: {}".format(PASSWORD_ENVIRONMENT, e),
                    file=sys.stderr,
                )
            else:
                output.annotate(
                    "Using {} password.".format(PASSWORD_ENVIRONMENT),
                    debug=True,
                )
        if session.key is None:
            if not session.ask_password:
                raise PasswordRequired.from_context(PASSWORD_ENVIRONMENT)
            session.ask_for_password("Enter configuration password:")

        try:
            cleartext = decrypt(sealed, session.key)
        except CryptoError:
            print(
                "Couldn't decrypt configuration, most likely wrong password.",
                file=sys.stderr,
            )
            session.clear_password()
            env_password = ""
            continue
        break

    try:
        text = cleartext.decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedConfig.from_context(path, str(e))
    return parse(text, path)


def encode(config: ConfigUpdater, key: Optional[bytes] = None) -> bytes:
    """Serialise a config document, encrypted if `key` is given."""
    cleartext = str(config).encode("utf-8")
    if key is None:
        return cleartext
    if debug:
        print("Encrypting configuration", file=sys.stderr)
    body = base64.b64encode(encrypt(cleartext, key)).decode("ascii")
    return "{}{}\n{}\n".format(HEADER, ENCRYPT_V0, body).encode("utf-8")
