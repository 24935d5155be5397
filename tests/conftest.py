"""
Shared pytest fixtures for the keyward test suite.

Autouse fixtures below isolate tests from the real machine:
  - Environment     -> KEYWARD_* variables cleared, cwd moved to a temp dir
  - Audit logger    -> singleton reset and closed after every test
"""

import pytest

from keyward.core.config import ENV_AUDIT_DIR, ENV_AUTHORIZED_KEYS

_VALID_KEY = (
    "ssh-rsa AAAAB3NzaC1yc2EAAAADAQABAAABAQDEX/dPu4PmtvgK3La9zioCEDrJ"
    "yUr6xEIK7Pr+rLgydcqWTU/kt7w7gKjOw4vvzgHfjKl09CWyvgb+y5dCiTk"
    "9MxI+erGNhs3pwaoS+EavAbawB7iEqYyTep3YaJK+4RJ4OX7ZlXMAIMrTL+"
    "UVrK89t56hCkFYaAgo3VY+z6rb/b3bDBYtE1Y2tS7C3au73aDgeb9psIrSV"
    "86ucKBTl5X62FnYiyGd++xCnLB6uLximM5OKXfLzJQNS/QyZyk12g3D8y69"
    "Xw1GzCSKX1u1+MQboyf0HJcG2ryUCLHdcDVppApyHx2OLq53hlkQ/yxdflD"
    "qCqAE4j+doagSsIfC1T2T"
)


@pytest.fixture(autouse=True)
def _isolate_environment(tmp_path, monkeypatch):
    """Clear KEYWARD_* variables and run each test from an empty directory.

    Without this, a developer's own ``KEYWARD_AUTHORIZED_KEYS`` or a stray
    ``.env`` file would point tests at a real authorized_keys file.
    Setting before deleting makes monkeypatch restore the original state,
    including variables that load_dotenv() adds during the test.
    """
    for name in (ENV_AUTHORIZED_KEYS, ENV_AUDIT_DIR):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)

    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)


@pytest.fixture(autouse=True)
def _isolate_audit_logger():
    """Reset the global AuditLogger so each test starts without one."""
    import keyward.core.audit_log as audit_mod

    old_logger = audit_mod._audit_logger
    audit_mod._audit_logger = None

    yield

    if audit_mod._audit_logger is not None:
        audit_mod._audit_logger.close()
    audit_mod._audit_logger = old_logger


@pytest.fixture
def fake_home(tmp_path):
    """A home directory with no .ssh directory yet."""
    home = tmp_path / "home"
    home.mkdir()
    return home


@pytest.fixture
def auth_keys_path(fake_home):
    return fake_home / ".ssh" / "authorized_keys"


@pytest.fixture
def write_auth_keys(auth_keys_path):
    """Write lines joined by newlines, without a trailing newline."""
    def _write(lines):
        auth_keys_path.parent.mkdir(mode=0o755, parents=True, exist_ok=True)
        auth_keys_path.write_text("\n".join(lines))
    return _write


@pytest.fixture
def valid_key():
    """An RSA public key without a comment."""
    return _VALID_KEY
