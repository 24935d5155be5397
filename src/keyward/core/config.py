"""
Runtime configuration.

Resolves where the authorized_keys file lives and where audit events go.
Precedence: explicit arguments, then environment variables (the nearest
``.env`` file is loaded first, without overriding the
real environment), then defaults.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from dotenv import find_dotenv, load_dotenv

ENV_AUTHORIZED_KEYS = "KEYWARD_AUTHORIZED_KEYS"
ENV_AUDIT_DIR = "KEYWARD_AUDIT_DIR"


def default_authorized_keys_path() -> Path:
    return Path(os.path.expanduser("~")) / ".ssh" / "authorized_keys"


@dataclass
class KeywardConfig:
    authorized_keys_path: Path
    audit_log_dir: Optional[Path] = None

    @property
    def audit_enabled(self) -> bool:
        return self.audit_log_dir is not None


def load_config(
    path: Optional[Union[str, Path]] = None,
    audit_dir: Optional[Union[str, Path]] = None,
    env_file: Optional[Union[str, Path]] = None,
) -> KeywardConfig:
    """Build a KeywardConfig from arguments, environment and defaults.

    Args:
        path: Explicit authorized_keys path (e.g. from ``--path``).
        audit_dir: Explicit audit log directory (e.g. from ``--audit-dir``).
        env_file: .env file to load; defaults to the nearest ``.env`` found
            from the working directory upwards.
    """
    load_dotenv(dotenv_path=env_file or find_dotenv(usecwd=True), override=False)

    path = path or os.environ.get(ENV_AUTHORIZED_KEYS) or default_authorized_keys_path()
    audit_dir = audit_dir or os.environ.get(ENV_AUDIT_DIR) or None

    return KeywardConfig(
        authorized_keys_path=Path(path).expanduser(),
        audit_log_dir=Path(audit_dir).expanduser() if audit_dir else None,
    )
