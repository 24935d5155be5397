# SSH Module
# authorized_keys parsing and comment-addressed key management

from .authorized_keys import AuthorizedKeysStore, ListMode
from .exceptions import (
    AuthorizedKeysError,
    DuplicateKeyError,
    KeyNotFoundError,
    MissingCommentError,
    MultiLineKeyError,
    WouldDeleteAllKeysError,
)
from .key_line import AuthorisedKey, KeyLine, OpaqueLine, fingerprint, parse_line, render_line

__all__ = [
    "AuthorizedKeysStore",
    "ListMode",
    "AuthorisedKey",
    "KeyLine",
    "OpaqueLine",
    "fingerprint",
    "parse_line",
    "render_line",
    "AuthorizedKeysError",
    "DuplicateKeyError",
    "KeyNotFoundError",
    "MissingCommentError",
    "MultiLineKeyError",
    "WouldDeleteAllKeysError",
]
