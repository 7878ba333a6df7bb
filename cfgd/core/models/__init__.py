"""
Domain models — Pydantic types for the configuration daemon.

All models are re-exported here for convenient access:

    from cfgd.core.models import ConfigSnapshot, Receipt, DaemonSettings
"""

from cfgd.core.models.action import ApplyResult, ErrorKind, Receipt
from cfgd.core.models.config import (
    AddressEntry,
    AddressFamilyConfig,
    AuthConfig,
    ConfigSnapshot,
    DnsConfig,
    Interface,
    InterfaceList,
    NeighborEntry,
    NtpConfig,
    SshKey,
    UserAuth,
)
from cfgd.core.models.settings import (
    DaemonSettings,
    ServiceNames,
    ServiceTarget,
    SystemPaths,
)
from cfgd.core.models.template import GeneratedFile

__all__ = [
    # config.py
    "AddressEntry",
    "AddressFamilyConfig",
    # action.py
    "ApplyResult",
    "AuthConfig",
    "ConfigSnapshot",
    # settings.py
    "DaemonSettings",
    "DnsConfig",
    "ErrorKind",
    # template.py
    "GeneratedFile",
    "Interface",
    "InterfaceList",
    "NeighborEntry",
    "NtpConfig",
    "Receipt",
    "ServiceNames",
    "ServiceTarget",
    "SshKey",
    "SystemPaths",
    "UserAuth",
]
