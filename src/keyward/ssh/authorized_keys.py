"""
Authorized Keys Store: comment-addressed management of authorized_keys.

Every public operation is a single read-parse-mutate-write pass over the
file: nothing is cached between calls, since the file may be edited by
hand in the meantime. Validation always completes before the file is
touched, and the file is rewritten at most once per call.

Lines that are not recognized key entries (options-prefixed keys,
comments, junk) and keys without a comment are never addressed, but are
always written back in their original position.
"""

import logging
import os
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set, Union

from ..core.audit_log import AuditLogger, EventSeverity, EventType
from .exceptions import (
    AuthorizedKeysError,
    DuplicateKeyError,
    KeyNotFoundError,
    MissingCommentError,
    MultiLineKeyError,
    WouldDeleteAllKeysError,
)
from .key_line import AuthorisedKey, KeyLine, parse_line, render_line

logger = logging.getLogger(__name__)

SSH_DIR_MODE = 0o755
AUTHORIZED_KEYS_MODE = 0o644


class ListMode(str, Enum):
    """What list_keys emits for each commented key."""
    COMMENTS = "comments"
    FULL = "full"
    FINGERPRINTS = "fingerprints"


def _commented(lines: Iterable[KeyLine]) -> List[AuthorisedKey]:
    return [
        line for line in lines
        if isinstance(line, AuthorisedKey) and line.has_comment
    ]


class AuthorizedKeysStore:
    """List, add and delete keys in one authorized_keys file."""

    def __init__(
        self,
        path: Union[str, Path],
        audit_logger: Optional[AuditLogger] = None,
    ):
        self.path = Path(path)
        self._audit = audit_logger

    # ── Public API ──────────────────────────────────────────────────

    def read_authorised_keys(self) -> List[str]:
        """Return the raw lines of the file, in order.

        A missing file reads as empty. A single trailing empty line (the
        final newline) is dropped; everything else is returned as-is.
        """
        try:
            # Undecodable bytes from hand edits must survive a rewrite
            content = self.path.read_text(encoding="utf-8", errors="surrogateescape")
        except FileNotFoundError:
            logger.debug(f"{self.path} does not exist, treating as empty")
            return []

        lines = content.split("\n")
        if lines and lines[-1] == "":
            lines.pop()
        return lines

    def write_authorised_keys(self, lines: List[str]):
        """Replace the file with ``lines``.

        Writes to a temp file beside the target, then renames it into
        place so a crash never leaves a truncated file behind.
        """
        self.path.parent.mkdir(mode=SSH_DIR_MODE, parents=True, exist_ok=True)

        data = "\n".join(lines) + "\n" if lines else ""
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, AUTHORIZED_KEYS_MODE)
            with os.fdopen(fd, "w", encoding="utf-8", errors="surrogateescape", newline="\n") as f:
                f.write(data)
            # os.open honours the umask; pin the mode explicitly
            os.chmod(tmp_path, AUTHORIZED_KEYS_MODE)
            os.replace(tmp_path, self.path)
        except Exception:
            if tmp_path.exists():
                tmp_path.unlink()
            raise

        logger.debug(f"Wrote {len(lines)} lines to {self.path}")

    def list_keys(self, mode: ListMode = ListMode.COMMENTS) -> List[str]:
        """List commented keys in file order.

        Args:
            mode: COMMENTS for the comment only, FULL for the whole line,
                FINGERPRINTS for the SHA256 fingerprint.
        """
        mode = ListMode(mode)
        keys = _commented(self._parse_file())

        if mode is ListMode.COMMENTS:
            return [key.comment for key in keys]
        if mode is ListMode.FINGERPRINTS:
            return [key.fingerprint for key in keys]
        return [render_line(key) for key in keys]

    def add_keys(self, *keys: str):
        """Append keys to the file.

        All keys are validated first: each must carry a comment, and no
        comment may already exist in the file or appear twice in this
        call. If any key fails, nothing is written.

        Raises:
            MissingCommentError: a key has no comment.
            MultiLineKeyError: a key contains a line break.
            DuplicateKeyError: a comment is already in use.
        """
        if not keys:
            return

        lines = self._parse_file()
        seen: Set[str] = {key.comment for key in _commented(lines)}

        new_keys: List[AuthorisedKey] = []
        try:
            for candidate in keys:
                candidate = candidate.strip()
                if "\n" in candidate or "\r" in candidate:
                    raise MultiLineKeyError()
                parsed = parse_line(candidate)
                if not isinstance(parsed, AuthorisedKey) or not parsed.has_comment:
                    raise MissingCommentError()
                if parsed.comment in seen:
                    raise DuplicateKeyError(parsed.comment)
                seen.add(parsed.comment)
                new_keys.append(parsed)
        except AuthorizedKeysError as e:
            self._reject("add", e)
            raise

        self._write_lines(lines + new_keys)

        comments = [key.comment for key in new_keys]
        logger.info(f"Added {len(new_keys)} SSH key(s) to {self.path}: {', '.join(comments)}")
        self._audit_event(
            EventType.KEYS_ADDED,
            EventSeverity.INFO,
            f"Added {len(new_keys)} SSH key(s)",
            {"comments": comments},
        )

    def delete_keys(self, *key_ids: str):
        """Delete keys by comment (or ``SHA256:`` fingerprint).

        Every id must match at least one commented key, and at least one
        key must survive. Keys without a comment still grant access, so
        they count as survivors; opaque lines do not. If either check
        fails, nothing is written.

        Raises:
            KeyNotFoundError: an id matches no key.
            WouldDeleteAllKeysError: no key would remain.
        """
        if not key_ids:
            return

        lines = self._parse_file()
        key_count = sum(1 for line in lines if isinstance(line, AuthorisedKey))

        by_comment: Dict[str, List[int]] = {}
        by_fingerprint: Dict[str, List[int]] = {}
        for index, line in enumerate(lines):
            if isinstance(line, AuthorisedKey) and line.has_comment:
                by_comment.setdefault(line.comment, []).append(index)
                by_fingerprint.setdefault(line.fingerprint, []).append(index)

        doomed: Set[int] = set()
        try:
            for key_id in key_ids:
                matches = by_comment.get(key_id)
                if matches is None and key_id.startswith("SHA256:"):
                    matches = by_fingerprint.get(key_id)
                if not matches:
                    raise KeyNotFoundError(key_id)
                doomed.update(matches)

            if key_count - len(doomed) <= 0:
                raise WouldDeleteAllKeysError()
        except AuthorizedKeysError as e:
            self._reject("delete", e)
            raise

        deleted = [lines[index].comment for index in sorted(doomed)]
        self._write_lines(
            [line for index, line in enumerate(lines) if index not in doomed]
        )

        logger.info(f"Deleted {len(deleted)} SSH key(s) from {self.path}: {', '.join(deleted)}")
        self._audit_event(
            EventType.KEYS_DELETED,
            EventSeverity.INFO,
            f"Deleted {len(deleted)} SSH key(s)",
            {"comments": deleted},
        )

    # ── Private helpers ─────────────────────────────────────────────

    def _parse_file(self) -> List[KeyLine]:
        return [parse_line(line) for line in self.read_authorised_keys()]

    def _write_lines(self, lines: List[KeyLine]):
        self.write_authorised_keys([render_line(line) for line in lines])

    def _reject(self, operation: str, error: AuthorizedKeysError):
        logger.warning(f"Refused to {operation} SSH keys in {self.path}: {error}")
        self._audit_event(
            EventType.KEYS_REJECTED,
            EventSeverity.ALERT,
            f"Refused to {operation} SSH keys: {error}",
            {"operation": operation, "error": type(error).__name__},
        )

    def _audit_event(
        self,
        event_type: EventType,
        severity: EventSeverity,
        message: str,
        details: Dict,
    ):
        if self._audit is None:
            return
        details = dict(details, path=str(self.path))
        self._audit.log_event(
            event_type=event_type,
            severity=severity,
            message=message,
            details=details,
        )
