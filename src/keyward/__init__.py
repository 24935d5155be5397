# Keyward: keep a machine's authorized_keys in sync with its administrators.
#
# Keys are addressed by their trailing comment (user@host). Lines that are
# not plain key entries are preserved untouched.

__version__ = "0.1.0"
__description__ = "Comment-addressed management of OpenSSH authorized_keys files"

from .ssh import (
    AuthorizedKeysError,
    AuthorizedKeysStore,
    DuplicateKeyError,
    KeyNotFoundError,
    ListMode,
    MissingCommentError,
    MultiLineKeyError,
    WouldDeleteAllKeysError,
)

__all__ = [
    "__version__",
    "AuthorizedKeysStore",
    "ListMode",
    "AuthorizedKeysError",
    "DuplicateKeyError",
    "KeyNotFoundError",
    "MissingCommentError",
    "MultiLineKeyError",
    "WouldDeleteAllKeysError",
]
