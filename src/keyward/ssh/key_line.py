"""
authorized_keys line parsing.

Each line of an authorized_keys file is either a recognized key entry
(``<key-type> <base64-key-data> [comment]``) or an opaque line that is
carried through untouched. Opaque lines include blank lines, ``#``
comments and entries with an OpenSSH options prefix.
"""

import base64
import binascii
import hashlib
from dataclasses import dataclass
from typing import Union

# Any token with one of these prefixes is treated as a key type. Covers
# ssh-rsa, ssh-dss, ssh-ed25519, ecdsa-sha2-nistp*, sk-*@openssh.com and
# the *-cert-v01@openssh.com certificate variants.
KEY_TYPE_PREFIXES = ("ssh-", "ecdsa-sha2-", "sk-")


@dataclass(frozen=True)
class AuthorisedKey:
    """A recognized key entry."""
    key_type: str
    key_data: str
    comment: str = ""
    raw: str = ""

    @property
    def has_comment(self) -> bool:
        return bool(self.comment)

    @property
    def fingerprint(self) -> str:
        return fingerprint(self.key_data)


@dataclass(frozen=True)
class OpaqueLine:
    """Any line that is not a recognized key entry."""
    raw: str


KeyLine = Union[AuthorisedKey, OpaqueLine]


def is_key_type(token: str) -> bool:
    return token.startswith(KEY_TYPE_PREFIXES) and len(token) > len("ssh-")


def parse_line(line: str) -> KeyLine:
    """Classify a single authorized_keys line.

    The comment is everything after the key data with surrounding
    whitespace removed, so multi-word comments survive intact. The
    original text is kept in ``raw`` so rendering an unmodified line
    gives back exactly what was read.
    """
    fields = line.split(None, 2)
    if len(fields) < 2 or not is_key_type(fields[0]):
        return OpaqueLine(raw=line)

    comment = fields[2].strip() if len(fields) == 3 else ""
    return AuthorisedKey(
        key_type=fields[0],
        key_data=fields[1],
        comment=comment,
        raw=line,
    )


def render_line(line: KeyLine) -> str:
    if isinstance(line, OpaqueLine) or line.raw:
        return line.raw
    # Keys built in code have no raw text yet
    parts = [line.key_type, line.key_data]
    if line.comment:
        parts.append(line.comment)
    return " ".join(parts)


def fingerprint(key_data: str) -> str:
    """Compute the OpenSSH-style SHA256 fingerprint of a key blob.

    Returns:
        ``SHA256:<unpadded base64 digest>``, matching ``ssh-keygen -lf``.
        Key data that is not valid base64 falls back to a hex digest of
        the token itself so every entry still gets a stable identifier.
    """
    try:
        raw = base64.b64decode(key_data, validate=True)
    except (binascii.Error, ValueError):
        return "SHA256:" + hashlib.sha256(key_data.encode("utf-8", "surrogateescape")).hexdigest()[:43]
    digest = hashlib.sha256(raw).digest()
    return "SHA256:" + base64.b64encode(digest).decode().rstrip("=")
