"""
Static neighbor renderer — permanent ARP/NDP entries via ``ip neigh``.

There is no per-interface diff: all permanent entries are flushed
system-wide first, then every configured entry is re-added. The flush
always precedes every replace, so a stale entry cannot reappear after
being re-added on another interface.
"""

from __future__ import annotations

import logging

from cfgd.core.models.action import ApplyResult
from cfgd.core.models.config import InterfaceList
from cfgd.core.security.input_validation import (
    check_interface_name,
    check_ip_address,
    check_mac_address,
    first_error,
)
from cfgd.core.services.renderers.base import RenderContext, rejected

logger = logging.getLogger(__name__)

FLUSH_COMMAND = "ip neigh flush nud permanent"
REPLACE_TEMPLATE = "ip neigh replace {ip} lladdr {mac} nud permanent dev {dev}"


def apply_neighbors(interfaces: InterfaceList, ctx: RenderContext) -> ApplyResult:
    """Flush permanent neighbors, then replace each configured entry."""
    result = ApplyResult(domain="neighbors")

    result.add(ctx.runner.run_template(FLUSH_COMMAND))

    for iface in interfaces:
        for entry in (*iface.ipv4.static_neighbors, *iface.ipv6.static_neighbors):
            error = first_error(
                check_interface_name(iface.name),
                check_ip_address(entry.ip),
                check_mac_address(entry.mac),
            )
            if error:
                rejected(result, f"neighbor {entry.ip} on {iface.name}", error)
                continue

            logger.debug("Neighbor %s → %s on %s", entry.ip, entry.mac, iface.name)
            result.add(
                ctx.runner.run_template(
                    REPLACE_TEMPLATE,
                    ip=entry.ip,
                    mac=entry.mac,
                    dev=iface.name,
                )
            )

    return result
