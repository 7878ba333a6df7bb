"""
Tests for input validation allow-lists.
"""

import pytest

from cfgd.core.security.input_validation import (
    check_hostname,
    check_interface_name,
    check_ip_address,
    check_mac_address,
    check_ssh_key,
    check_token,
    first_error,
)


class TestCheckToken:
    def test_valid(self):
        assert check_token("pool.ntp.org") is None

    @pytest.mark.parametrize("value", ["", "a b", "a\nDNS=6.6.6.6", "tab\there"])
    def test_invalid(self, value):
        assert check_token(value, "server") is not None


class TestCheckHostname:
    @pytest.mark.parametrize("value", ["box", "edge-01", "a.example.com"])
    def test_valid(self, value):
        assert check_hostname(value) is None

    @pytest.mark.parametrize(
        "value", ["", "-box", "box-", "box;reboot", "a..b", "x" * 64, "host\n", "a.b\n"]
    )
    def test_invalid(self, value):
        assert check_hostname(value) is not None


class TestAddresses:
    def test_ip(self):
        assert check_ip_address("10.0.0.1") is None
        assert check_ip_address("fe80::1") is None
        assert check_ip_address("10.0.0.1; rm -rf /") is not None

    def test_mac(self):
        assert check_mac_address("aa:bb:cc:dd:ee:ff") is None
        assert check_mac_address("aa:bb:cc:dd:ee") is not None
        assert check_mac_address("aa-bb-cc-dd-ee-ff") is not None
        assert check_mac_address("aa:bb:cc:dd:ee:ff\n") is not None


class TestInterfaceName:
    @pytest.mark.parametrize("value", ["eth0", "br-lan", "eth0.100", "wg0"])
    def test_valid(self, value):
        assert check_interface_name(value) is None

    @pytest.mark.parametrize("value", ["", "..", "../etc", "-x", "a" * 16, "eth 0", "eth0\n"])
    def test_invalid(self, value):
        assert check_interface_name(value) is not None


class TestSshKey:
    def test_valid(self):
        assert check_ssh_key("ssh-ed25519", "AAAAC3NzaC1lZDI1NTE5", "alice@laptop") is None

    def test_data_with_newline(self):
        assert check_ssh_key("ssh-rsa", "AAAA\nssh-rsa EVIL", "") is not None

    def test_data_with_trailing_newline(self):
        assert check_ssh_key("ssh-ed25519", "AAAA\n", "ssh-rsa EVILKEY") is not None

    def test_algo_with_trailing_newline(self):
        assert check_ssh_key("ssh-ed25519\n", "AAAA", "") is not None

    def test_bad_algo(self):
        assert check_ssh_key("ssh rsa", "AAAA", "") is not None

    def test_comment_control_chars(self):
        assert check_ssh_key("ssh-rsa", "AAAA", "x\ny") is not None


def test_first_error():
    assert first_error(None, None) is None
    assert first_error(None, "a", "b") == "a"
