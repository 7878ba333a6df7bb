"""
Daemon settings — where artifacts live and which units consume them.

Loaded from cfgd.yml. Every field has a default matching a stock
systemd host, so an empty or missing file is a valid configuration.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class ServiceTarget(str, Enum):
    """Logical services that get reloaded after artifacts change."""

    TIME_SYNC = "time-sync"
    NAME_RESOLUTION = "name-resolution"
    NETWORK_INTERFACES = "network-interfaces"


class ServiceNames(BaseModel):
    """Mapping from ServiceTarget to systemd unit name."""

    time_sync: str = "systemd-timesyncd"
    name_resolution: str = "systemd-resolved"
    network_interfaces: str = "systemd-networkd"

    def unit(self, target: ServiceTarget) -> str:
        return getattr(self, target.value.replace("-", "_"))


class SystemPaths(BaseModel):
    """Artifact locations. Overridden in tests to point into a temp dir."""

    timesyncd_conf: str = "/etc/systemd/timesyncd.conf"
    resolved_conf: str = "/etc/systemd/resolved.conf"
    network_dir: str = "/etc/systemd/network"
    network_suffix: str = ".network"
    root_authorized_keys: str = "/home/root/.ssh/authorized_keys"
    netconf_authorized_keys: str = "/etc/netconf/authorized_keys"

    def fixed_identities(self) -> dict[str, str]:
        """System identities whose key file is not looked up in passwd."""
        return {
            "root": self.root_authorized_keys,
            "netconfd": self.netconf_authorized_keys,
        }


class DaemonSettings(BaseModel):
    """Top-level daemon configuration."""

    source: str | None = None            # snapshot file watched by the daemon
    poll_interval: float = Field(default=2.0, gt=0)
    audit_log: str | None = None         # NDJSON ledger, disabled when unset
    command_timeout: float | None = None
    hostname_enabled: bool = True

    paths: SystemPaths = Field(default_factory=SystemPaths)
    services: ServiceNames = Field(default_factory=ServiceNames)
