"""
Tests for authorized_keys line parsing: classification, rendering and
fingerprints.
"""

import base64
import hashlib

import pytest

from keyward.ssh.key_line import (
    AuthorisedKey,
    OpaqueLine,
    fingerprint,
    is_key_type,
    parse_line,
    render_line,
)


class TestKeyTypes:
    @pytest.mark.parametrize("token", [
        "ssh-rsa",
        "ssh-dss",
        "ssh-ed25519",
        "ecdsa-sha2-nistp256",
        "ecdsa-sha2-nistp521",
        "sk-ssh-ed25519@openssh.com",
        "ssh-ed25519-cert-v01@openssh.com",
    ])
    def test_recognized(self, token):
        assert is_key_type(token) is True

    @pytest.mark.parametrize("token", [
        "ssh-",
        "rsa",
        "AAAAB3NzaC1yc2E",
        'command="/bin/true"',
        "#",
    ])
    def test_not_recognized(self, token):
        assert is_key_type(token) is False


class TestParseLine:
    def test_key_with_comment(self, valid_key):
        line = valid_key + " user@host"
        parsed = parse_line(line)
        assert isinstance(parsed, AuthorisedKey)
        assert parsed.key_type == "ssh-rsa"
        assert parsed.key_data == valid_key.split()[1]
        assert parsed.comment == "user@host"
        assert parsed.has_comment is True

    def test_key_without_comment(self, valid_key):
        parsed = parse_line(valid_key)
        assert isinstance(parsed, AuthorisedKey)
        assert parsed.comment == ""
        assert parsed.has_comment is False

    def test_multi_word_comment_kept_whole(self):
        parsed = parse_line("ssh-ed25519 AAAAC3NzaC1lZDI1NTE5 deploy key for ci  ")
        assert parsed.comment == "deploy key for ci"

    def test_tabs_separate_fields(self):
        parsed = parse_line("ssh-ed25519\tAAAAC3NzaC1lZDI1NTE5\tuser@host")
        assert isinstance(parsed, AuthorisedKey)
        assert parsed.comment == "user@host"

    @pytest.mark.parametrize("line", [
        "",
        "   ",
        "invalid-key",
        "ssh-rsa",
        "# ssh-rsa AAAAB3NzaC1yc2E user@host",
        'command="/usr/bin/backup" ssh-rsa AAAAB3NzaC1yc2E backup@host',
        "keyA user@host",
    ])
    def test_opaque(self, line):
        parsed = parse_line(line)
        assert isinstance(parsed, OpaqueLine)
        assert parsed.raw == line


class TestRenderLine:
    @pytest.mark.parametrize("line", [
        "ssh-ed25519 AAAAC3NzaC1lZDI1NTE5 user@host",
        "ssh-ed25519  AAAAC3NzaC1lZDI1NTE5   spaced  comment ",
        "ssh-ed25519 AAAAC3NzaC1lZDI1NTE5",
        "not a key",
        "",
    ])
    def test_parsed_lines_render_verbatim(self, line):
        assert render_line(parse_line(line)) == line

    def test_built_key(self):
        key = AuthorisedKey(key_type="ssh-ed25519", key_data="AAAA", comment="a@b")
        assert render_line(key) == "ssh-ed25519 AAAA a@b"

    def test_built_key_without_comment(self):
        key = AuthorisedKey(key_type="ssh-ed25519", key_data="AAAA")
        assert render_line(key) == "ssh-ed25519 AAAA"


class TestFingerprint:
    def test_matches_openssh_format(self):
        blob = b"\x00\x00\x00\x0bssh-ed25519" + bytes(range(32))
        key_data = base64.b64encode(blob).decode()
        expected = base64.b64encode(hashlib.sha256(blob).digest()).decode().rstrip("=")
        assert fingerprint(key_data) == "SHA256:" + expected

    def test_invalid_base64_still_stable(self):
        first = fingerprint("not*base64")
        assert first.startswith("SHA256:")
        assert fingerprint("not*base64") == first

    def test_property_on_key(self):
        parsed = parse_line("ssh-ed25519 AAAAC3NzaC1lZDI1NTE5 user@host")
        assert parsed.fingerprint == fingerprint("AAAAC3NzaC1lZDI1NTE5")

    def test_undecodable_bytes_in_key_data(self):
        key_data = b"AAAA\xf6".decode("utf-8", "surrogateescape")
        assert fingerprint(key_data).startswith("SHA256:")
