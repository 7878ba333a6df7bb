"""
Configuration snapshot models — the desired system state.

A snapshot is delivered by the transport, applied once, and discarded.
Every sub-tree is optional: a delivery may carry only the parts that
changed, and a missing sub-tree is left untouched on the system.
"""

from __future__ import annotations

import ipaddress
from collections.abc import Iterator

from pydantic import BaseModel, ConfigDict, Field, RootModel, SecretStr, model_validator


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class NtpConfig(_Frozen):
    """Time synchronisation. Server order is preserved (first = preferred)."""

    enabled: bool = True
    servers: list[str] = Field(default_factory=list)


class DnsConfig(_Frozen):
    """Resolver nameservers and search domains."""

    search_domains: list[str] = Field(default_factory=list)
    nameservers: list[str] = Field(default_factory=list)


class AddressEntry(_Frozen):
    """An interface address with prefix length or dotted netmask."""

    ip: str
    prefix: int | str

    @property
    def cidr(self) -> str:
        """``ip/prefixlen`` form. Raises ValueError for malformed values."""
        return ipaddress.ip_interface(f"{self.ip}/{self.prefix}").with_prefixlen

    def cidr_in(self, version: int) -> str:
        """Like ``cidr``, but the address must belong to IP ``version``."""
        if ipaddress.ip_address(self.ip).version != version:
            raise ValueError(f"{self.ip} is not an IPv{version} address")
        return self.cidr


class NeighborEntry(_Frozen):
    """A static (permanent) neighbor binding IP → link-layer address."""

    ip: str
    mac: str


class AddressFamilyConfig(_Frozen):
    mtu: int | None = Field(default=None, gt=0)
    addresses: list[AddressEntry] = Field(default_factory=list)
    static_neighbors: list[NeighborEntry] = Field(default_factory=list)
    forwarding_enabled: bool = False


class Interface(_Frozen):
    """One network interface, keyed by name."""

    name: str
    mtu: int | None = Field(default=None, gt=0)
    dhcp_enabled: bool = False
    ipv4: AddressFamilyConfig = Field(default_factory=AddressFamilyConfig)
    ipv6: AddressFamilyConfig = Field(default_factory=AddressFamilyConfig)

    @property
    def effective_mtu(self) -> int | None:
        """Largest MTU configured on the link or either address family."""
        candidates = [m for m in (self.mtu, self.ipv4.mtu, self.ipv6.mtu) if m]
        return max(candidates) if candidates else None

    @property
    def ip_forward(self) -> str | None:
        """Value for ``IPForward=``, or None when neither family forwards."""
        if self.ipv4.forwarding_enabled and self.ipv6.forwarding_enabled:
            return "yes"
        if self.ipv4.forwarding_enabled:
            return "ipv4"
        if self.ipv6.forwarding_enabled:
            return "ipv6"
        return None


class InterfaceList(RootModel[list[Interface]]):
    """Ordered interfaces. Names are unique within one list."""

    model_config = ConfigDict(frozen=True)

    root: list[Interface] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_names(self) -> InterfaceList:
        seen: set[str] = set()
        for iface in self.root:
            if iface.name in seen:
                raise ValueError(f"Duplicate interface name: {iface.name!r}")
            seen.add(iface.name)
        return self

    def __iter__(self) -> Iterator[Interface]:  # type: ignore[override]
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)

    @property
    def names(self) -> list[str]:
        return [iface.name for iface in self.root]


class SshKey(_Frozen):
    algo: str
    data: str
    comment: str = ""

    @property
    def line(self) -> str:
        """The ``algo data comment`` authorized_keys line."""
        return f"{self.algo} {self.data} {self.comment}"


class UserAuth(_Frozen):
    """A system identity and its SSH keys.

    The password is kept as a SecretStr so it never appears in logs or
    reprs. It has no system effect.
    """

    name: str
    password: SecretStr | None = None
    ssh_keys: list[SshKey] = Field(default_factory=list)


class AuthConfig(_Frozen):
    users: list[UserAuth] = Field(default_factory=list)


class ConfigSnapshot(_Frozen):
    """Root aggregate for one reconciliation pass.

    ``values`` carries field-level changes keyed by dotted path
    (e.g. ``system.hostname``).
    """

    ntp: NtpConfig | None = None
    dns: DnsConfig | None = None
    interfaces: InterfaceList | None = None
    authentication: AuthConfig | None = None
    values: dict[str, str] = Field(default_factory=dict)

    @property
    def domains(self) -> list[str]:
        """Names of the sub-trees present in this delivery."""
        present = [
            name
            for name in ("ntp", "dns", "interfaces", "authentication")
            if getattr(self, name) is not None
        ]
        if self.values:
            present.append("values")
        return present
