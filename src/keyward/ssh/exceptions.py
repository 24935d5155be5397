"""
authorized_keys Exception Classes
"""


class AuthorizedKeysError(Exception):
    """Base exception for authorized_keys operations"""
    pass


class MissingCommentError(AuthorizedKeysError):
    """Raised when a key being added carries no comment"""

    def __init__(self):
        super().__init__("cannot add ssh key without comment")


class DuplicateKeyError(AuthorizedKeysError):
    """Raised when a key being added reuses an existing comment"""

    def __init__(self, comment: str):
        self.comment = comment
        super().__init__(f"cannot add duplicate ssh key: {comment}")


class KeyNotFoundError(AuthorizedKeysError):
    """Raised when a delete target matches no key"""

    def __init__(self, comment: str):
        self.comment = comment
        super().__init__(f"cannot delete non existent key: {comment}")


class WouldDeleteAllKeysError(AuthorizedKeysError):
    """Raised when a delete would leave no recognized key behind"""

    def __init__(self):
        super().__init__("cannot delete all keys")


class MultiLineKeyError(AuthorizedKeysError):
    """Raised when a key being added contains a line break"""

    def __init__(self):
        super().__init__("cannot add ssh key spanning multiple lines")
