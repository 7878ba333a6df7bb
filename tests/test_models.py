"""
Tests for configuration, receipt and settings models.
"""

import pytest
from pydantic import ValidationError

from cfgd.core.models.action import ApplyResult, ErrorKind, Receipt, aggregate_status
from cfgd.core.models.config import (
    AddressEntry,
    AddressFamilyConfig,
    ConfigSnapshot,
    Interface,
    InterfaceList,
    SshKey,
    UserAuth,
)
from cfgd.core.models.settings import DaemonSettings, ServiceNames, ServiceTarget

# ── Snapshot models ──────────────────────────────────────────────────


class TestAddressEntry:
    def test_prefix_length(self):
        assert AddressEntry(ip="10.0.0.1", prefix=24).cidr == "10.0.0.1/24"

    def test_dotted_netmask(self):
        assert AddressEntry(ip="192.168.1.10", prefix="255.255.255.0").cidr == "192.168.1.10/24"

    def test_ipv6(self):
        assert AddressEntry(ip="2001:db8::1", prefix=64).cidr == "2001:db8::1/64"

    def test_malformed_raises(self):
        with pytest.raises(ValueError):
            _ = AddressEntry(ip="10.0.0.300", prefix=24).cidr

    def test_cidr_in_matching_family(self):
        assert AddressEntry(ip="10.0.0.1", prefix=24).cidr_in(4) == "10.0.0.1/24"
        assert AddressEntry(ip="fd00::1", prefix=64).cidr_in(6) == "fd00::1/64"

    def test_cidr_in_wrong_family(self):
        with pytest.raises(ValueError, match="not an IPv4 address"):
            AddressEntry(ip="fd00::1", prefix=64).cidr_in(4)
        with pytest.raises(ValueError, match="not an IPv6 address"):
            AddressEntry(ip="10.0.0.1", prefix=24).cidr_in(6)


class TestInterface:
    def test_mtu_is_max_of_families(self):
        iface = Interface(
            name="eth0",
            ipv4=AddressFamilyConfig(mtu=1500),
            ipv6=AddressFamilyConfig(mtu=1492),
        )
        assert iface.effective_mtu == 1500

    def test_mtu_commutative_under_family_swap(self):
        a = Interface(name="eth0", ipv4=AddressFamilyConfig(mtu=1492), ipv6=AddressFamilyConfig(mtu=1500))
        b = Interface(name="eth0", ipv4=AddressFamilyConfig(mtu=1500), ipv6=AddressFamilyConfig(mtu=1492))
        assert a.effective_mtu == b.effective_mtu == 1500

    def test_link_mtu_counts(self):
        iface = Interface(name="eth0", mtu=9000, ipv4=AddressFamilyConfig(mtu=1500))
        assert iface.effective_mtu == 9000

    def test_no_mtu(self):
        assert Interface(name="eth0").effective_mtu is None

    def test_zero_mtu_rejected(self):
        with pytest.raises(ValidationError):
            Interface(name="eth0", mtu=0)

    @pytest.mark.parametrize(
        ("v4", "v6", "expected"),
        [
            (True, True, "yes"),
            (True, False, "ipv4"),
            (False, True, "ipv6"),
            (False, False, None),
        ],
    )
    def test_ip_forward(self, v4, v6, expected):
        iface = Interface(
            name="eth0",
            ipv4=AddressFamilyConfig(forwarding_enabled=v4),
            ipv6=AddressFamilyConfig(forwarding_enabled=v6),
        )
        assert iface.ip_forward == expected


class TestInterfaceList:
    def test_order_preserved(self):
        lst = InterfaceList([Interface(name="eth1"), Interface(name="eth0")])
        assert lst.names == ["eth1", "eth0"]
        assert len(lst) == 2

    def test_duplicate_names_rejected(self):
        with pytest.raises(ValidationError, match="Duplicate interface name"):
            InterfaceList([Interface(name="eth0"), Interface(name="eth0")])

    def test_iterates_interfaces(self):
        lst = InterfaceList([Interface(name="eth0")])
        assert [i.name for i in lst] == ["eth0"]


class TestUserAuth:
    def test_password_not_in_repr(self):
        user = UserAuth(name="alice", password="hunter2")
        assert "hunter2" not in repr(user)
        assert user.password.get_secret_value() == "hunter2"

    def test_key_line(self):
        key = SshKey(algo="ssh-ed25519", data="AAAAC3Nz", comment="alice@laptop")
        assert key.line == "ssh-ed25519 AAAAC3Nz alice@laptop"


class TestConfigSnapshot:
    def test_all_subtrees_optional(self):
        snap = ConfigSnapshot()
        assert snap.domains == []

    def test_domains_in_order(self):
        snap = ConfigSnapshot.model_validate(
            {
                "authentication": {"users": []},
                "ntp": {"servers": ["pool.ntp.org"]},
                "values": {"system.hostname": "box"},
            }
        )
        assert snap.domains == ["ntp", "authentication", "values"]

    def test_unknown_key_rejected(self):
        with pytest.raises(ValidationError):
            ConfigSnapshot.model_validate({"ntpd": {}})

    def test_frozen(self):
        snap = ConfigSnapshot()
        with pytest.raises(ValidationError):
            snap.ntp = None


# ── Receipts ─────────────────────────────────────────────────────────


class TestReceipt:
    def test_success(self):
        r = Receipt.success(step="write", target="/etc/x")
        assert r.ok and not r.failed

    def test_failure(self):
        r = Receipt.failure(
            step="command", target="ip neigh", error="boom", error_kind=ErrorKind.COMMAND_FAILED
        )
        assert r.failed
        assert r.model_dump(mode="json")["error_kind"] == "command-failed"

    def test_skip_is_neither(self):
        r = Receipt.skip(step="lookup", target="bob", reason="no such account")
        assert not r.ok and not r.failed
        assert r.output == "no such account"


class TestApplyResult:
    def test_status(self):
        result = ApplyResult(domain="dns")
        assert result.status == "ok"
        result.add(Receipt.success(step="write"))
        result.add(
            Receipt.failure(step="command", target="x", error="e", error_kind=ErrorKind.COMMAND_FAILED)
        )
        assert result.status == "partial"
        assert result.errors == ["x: e"]

    def test_skips_do_not_fail(self):
        result = ApplyResult(domain="ssh-keys:bob")
        result.add(Receipt.skip(step="lookup"))
        assert result.status == "ok"
        assert result.skipped == 1

    def test_aggregate(self):
        assert aggregate_status(3, 0) == "ok"
        assert aggregate_status(1, 1) == "partial"
        assert aggregate_status(0, 2) == "failed"


# ── Settings ─────────────────────────────────────────────────────────


class TestSettings:
    def test_defaults(self):
        s = DaemonSettings()
        assert s.paths.timesyncd_conf == "/etc/systemd/timesyncd.conf"
        assert s.paths.network_dir == "/etc/systemd/network"
        assert s.hostname_enabled is True
        assert s.source is None

    def test_unit_names(self):
        names = ServiceNames()
        assert names.unit(ServiceTarget.TIME_SYNC) == "systemd-timesyncd"
        assert names.unit(ServiceTarget.NAME_RESOLUTION) == "systemd-resolved"
        assert names.unit(ServiceTarget.NETWORK_INTERFACES) == "systemd-networkd"

    def test_poll_interval_positive(self):
        with pytest.raises(ValidationError):
            DaemonSettings(poll_interval=0)
