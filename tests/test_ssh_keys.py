"""
Tests for SSH authorized-keys rendering, hostname and authentication.
"""

from pathlib import Path

from cfgd.core.models.action import ErrorKind
from cfgd.core.models.config import AuthConfig, SshKey, UserAuth
from cfgd.core.services.authentication import apply_authentication
from cfgd.core.services.renderers import (
    RenderContext,
    apply_hostname,
    apply_ssh_keys,
    apply_value,
    resolve_key_file,
)

ED25519 = SshKey(algo="ssh-ed25519", data="AAAAC3NzaC1lZDI1NTE5AAAAIA", comment="alice@laptop")
RSA = SshKey(algo="ssh-rsa", data="AAAAB3NzaC1yc2EAAAADAQAB", comment="ci")

# ── Key file resolution ──────────────────────────────────────────────


class TestResolveKeyFile:
    def test_root_is_fixed(self, ctx: RenderContext, paths):
        path, reason = resolve_key_file(UserAuth(name="root"), ctx)
        assert path == paths.root_authorized_keys
        assert reason == "fixed identity"

    def test_netconfd_is_fixed(self, ctx: RenderContext, paths):
        path, _ = resolve_key_file(UserAuth(name="netconfd"), ctx)
        assert path == paths.netconf_authorized_keys

    def test_account_home(self, ctx: RenderContext, sys_root: Path):
        path, _ = resolve_key_file(UserAuth(name="alice", ssh_keys=[ED25519]), ctx)
        assert path == str(sys_root / "home" / "alice" / ".ssh" / "authorized_keys")

    def test_unknown_account(self, ctx: RenderContext):
        path, reason = resolve_key_file(UserAuth(name="bob", ssh_keys=[ED25519]), ctx)
        assert path is None
        assert "no such account" in reason

    def test_no_home(self, ctx: RenderContext):
        path, reason = resolve_key_file(UserAuth(name="nohome", ssh_keys=[ED25519]), ctx)
        assert path is None
        assert "no home directory" in reason

    def test_zero_keys(self, ctx: RenderContext):
        path, reason = resolve_key_file(UserAuth(name="alice"), ctx)
        assert path is None
        assert "no SSH keys" in reason


# ── Applying keys ────────────────────────────────────────────────────


class TestApplySshKeys:
    def test_writes_keys_in_order(self, ctx: RenderContext, sys_root: Path):
        result = apply_ssh_keys(UserAuth(name="alice", ssh_keys=[ED25519, RSA]), ctx)
        assert result.status == "ok"
        key_file = sys_root / "home" / "alice" / ".ssh" / "authorized_keys"
        assert key_file.read_text() == (
            "ssh-ed25519 AAAAC3NzaC1lZDI1NTE5AAAAIA alice@laptop\n"
            "ssh-rsa AAAAB3NzaC1yc2EAAAADAQAB ci\n"
        )

    def test_full_replace(self, ctx: RenderContext, sys_root: Path):
        apply_ssh_keys(UserAuth(name="alice", ssh_keys=[ED25519, RSA]), ctx)
        apply_ssh_keys(UserAuth(name="alice", ssh_keys=[RSA]), ctx)
        key_file = sys_root / "home" / "alice" / ".ssh" / "authorized_keys"
        assert key_file.read_text() == "ssh-rsa AAAAB3NzaC1yc2EAAAADAQAB ci\n"

    def test_unknown_account_is_noop(self, ctx: RenderContext, sys_root: Path):
        result = apply_ssh_keys(UserAuth(name="bob", ssh_keys=[ED25519]), ctx)
        assert result.status == "ok"
        assert result.skipped == 1
        assert not (sys_root / "home" / "bob").exists()

    def test_zero_keys_is_noop(self, ctx: RenderContext, sys_root: Path):
        result = apply_ssh_keys(UserAuth(name="alice"), ctx)
        assert result.failed == 0
        assert not (sys_root / "home" / "alice").exists()

    def test_root_creates_ssh_dir(self, ctx: RenderContext, paths):
        result = apply_ssh_keys(UserAuth(name="root", ssh_keys=[RSA]), ctx)
        assert result.status == "ok"
        assert Path(paths.root_authorized_keys).read_text() == "ssh-rsa AAAAB3NzaC1yc2EAAAADAQAB ci\n"

    def test_netconfd_with_zero_keys_empties_file(self, ctx: RenderContext, paths):
        apply_ssh_keys(UserAuth(name="netconfd", ssh_keys=[RSA]), ctx)
        apply_ssh_keys(UserAuth(name="netconfd"), ctx)
        assert Path(paths.netconf_authorized_keys).read_text() == ""

    def test_injected_key_rejected(self, ctx: RenderContext, sys_root: Path):
        evil = SshKey(algo="ssh-rsa", data="AAAA\nssh-rsa ATTACKER", comment="")
        result = apply_ssh_keys(UserAuth(name="alice", ssh_keys=[evil]), ctx)
        assert result.status == "failed"
        assert result.receipts[0].error_kind == ErrorKind.UNSAFE_INPUT
        assert not (sys_root / "home" / "alice" / ".ssh" / "authorized_keys").exists()

    def test_trailing_newline_in_key_data_rejected(self, ctx: RenderContext, sys_root: Path):
        evil = SshKey(algo="ssh-ed25519", data="AAAA\n", comment="ssh-rsa EVILKEY")
        result = apply_ssh_keys(UserAuth(name="alice", ssh_keys=[evil]), ctx)
        assert result.status == "failed"
        assert result.receipts[0].error_kind == ErrorKind.UNSAFE_INPUT
        assert not (sys_root / "home" / "alice" / ".ssh" / "authorized_keys").exists()

    def test_runs_no_commands(self, ctx: RenderContext, runner):
        apply_ssh_keys(UserAuth(name="alice", ssh_keys=[ED25519]), ctx)
        assert runner.call_count == 0


class TestAuthentication:
    def test_users_in_order(self, ctx: RenderContext, paths, sys_root: Path):
        auth = AuthConfig(
            users=[
                UserAuth(name="root", ssh_keys=[RSA]),
                UserAuth(name="bob", ssh_keys=[RSA]),
                UserAuth(name="alice", password="secret", ssh_keys=[ED25519]),
            ]
        )
        result = apply_authentication(auth, ctx)
        assert result.domain == "authentication"
        assert result.status == "ok"
        assert result.skipped == 1
        assert Path(paths.root_authorized_keys).is_file()
        assert (sys_root / "home" / "alice" / ".ssh" / "authorized_keys").is_file()

    def test_password_has_no_effect(self, ctx: RenderContext, runner, sys_root: Path):
        apply_authentication(AuthConfig(users=[UserAuth(name="alice", password="pw")]), ctx)
        assert runner.call_count == 0
        assert not (sys_root / "home" / "alice").exists()

    def test_empty(self, ctx: RenderContext):
        result = apply_authentication(AuthConfig(), ctx)
        assert result.total == 0
        assert result.status == "ok"


# ── Hostname / single values ─────────────────────────────────────────


class TestHostname:
    def test_sets_hostname_as_single_argument(self, ctx: RenderContext, runner):
        result = apply_hostname("edge-01", ctx)
        assert result.status == "ok"
        assert runner.calls == [["hostnamectl", "set-hostname", "edge-01"]]

    def test_invalid_hostname_rejected(self, ctx: RenderContext, runner):
        result = apply_hostname("box; reboot", ctx)
        assert result.status == "failed"
        assert result.receipts[0].error_kind == ErrorKind.UNSAFE_INPUT
        assert runner.call_count == 0

    def test_disabled(self, ctx: RenderContext, runner):
        ctx.hostname_enabled = False
        result = apply_hostname("edge-01", ctx)
        assert result.skipped == 1
        assert runner.call_count == 0

    def test_dispatch_by_path(self, ctx: RenderContext, runner):
        apply_value("system.hostname", "edge-02", ctx)
        assert runner.commands == ["hostnamectl set-hostname edge-02"]

    def test_unknown_path_skipped(self, ctx: RenderContext, runner):
        result = apply_value("system.location", "rack 4", ctx)
        assert result.status == "ok"
        assert result.skipped == 1
        assert runner.call_count == 0
