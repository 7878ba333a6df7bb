"""
Artifact renderers — one per configuration domain.

Each renderer has a pure ``render_*`` returning GeneratedFile(s) and an
``apply_*`` that writes artifacts, issues reload commands and returns an
ApplyResult.
"""

from cfgd.core.services.renderers.base import RenderContext, lookup_account
from cfgd.core.services.renderers.hostname import apply_hostname, apply_value
from cfgd.core.services.renderers.neighbor import apply_neighbors
from cfgd.core.services.renderers.network import apply_network, render_interface
from cfgd.core.services.renderers.ntp import apply_ntp, render_ntp
from cfgd.core.services.renderers.resolver import apply_resolver, render_resolver
from cfgd.core.services.renderers.ssh_keys import (
    apply_ssh_keys,
    render_authorized_keys,
    resolve_key_file,
)

__all__ = [
    "RenderContext",
    "apply_hostname",
    "apply_neighbors",
    "apply_network",
    "apply_ntp",
    "apply_resolver",
    "apply_ssh_keys",
    "apply_value",
    "lookup_account",
    "render_authorized_keys",
    "render_interface",
    "render_ntp",
    "render_resolver",
    "resolve_key_file",
]
