# Main Entry Point - keyward command line
#
#   keyward list [--full | --fingerprints]
#   keyward read
#   keyward add KEY [KEY ...]        (KEY "-" reads keys from stdin)
#   keyward delete COMMENT [COMMENT ...]

import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .core import EventSeverity, EventType, get_audit_logger, load_config
from .ssh import AuthorizedKeysError, AuthorizedKeysStore, ListMode


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="keyward",
        description="Manage an OpenSSH authorized_keys file by key comment",
    )
    parser.add_argument(
        "--path",
        help="authorized_keys file (default: $KEYWARD_AUTHORIZED_KEYS or ~/.ssh/authorized_keys)"
    )
    parser.add_argument(
        "--audit-dir",
        help="Write audit events to this directory (default: $KEYWARD_AUDIT_DIR, disabled if unset)"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"keyward v{__version__}"
    )

    commands = parser.add_subparsers(dest="command", required=True)

    list_cmd = commands.add_parser("list", help="List commented keys")
    shown = list_cmd.add_mutually_exclusive_group()
    shown.add_argument("--full", action="store_true", help="Show full key lines")
    shown.add_argument("--fingerprints", action="store_true", help="Show SHA256 fingerprints")

    commands.add_parser("read", help="Print every line of the file, parsed or not")

    add_cmd = commands.add_parser("add", help="Append keys (each must carry a comment)")
    add_cmd.add_argument("keys", nargs="+", metavar="KEY")

    delete_cmd = commands.add_parser("delete", help="Delete keys by comment or SHA256 fingerprint")
    delete_cmd.add_argument("comments", nargs="+", metavar="COMMENT")

    return parser


def _expand_stdin(keys: List[str]) -> List[str]:
    expanded = []
    for key in keys:
        if key == "-":
            expanded.extend(line for line in sys.stdin.read().splitlines() if line.strip())
        else:
            expanded.append(key)
    return expanded


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for keyward. Returns the process exit status."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = load_config(path=args.path, audit_dir=args.audit_dir)
    audit = get_audit_logger(config.audit_log_dir) if config.audit_enabled else None
    if audit is not None:
        audit.log_event(
            event_type=EventType.SYSTEM_START,
            severity=EventSeverity.INFO,
            message=f"keyward {args.command}",
            details={"version": __version__, "path": str(config.authorized_keys_path)},
        )

    store = AuthorizedKeysStore(config.authorized_keys_path, audit_logger=audit)

    try:
        if args.command == "list":
            mode = ListMode.COMMENTS
            if args.full:
                mode = ListMode.FULL
            elif args.fingerprints:
                mode = ListMode.FINGERPRINTS
            for entry in store.list_keys(mode):
                print(entry)
        elif args.command == "read":
            for line in store.read_authorised_keys():
                print(line)
        elif args.command == "add":
            store.add_keys(*_expand_stdin(args.keys))
        elif args.command == "delete":
            store.delete_keys(*args.comments)
    except AuthorizedKeysError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
