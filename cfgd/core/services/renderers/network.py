"""
Interface renderer — one systemd-networkd ``.network`` file per interface.

networkd cannot describe several interfaces in one file and has no merge
primitive, so every pass deletes all previously generated files and
writes the current set from scratch. An interface missing from the new
list therefore loses its file.

One reload-or-restart of networkd follows the writes and covers every
interface at once.
"""

from __future__ import annotations

import logging
from pathlib import Path

from cfgd.core.models.action import ApplyResult
from cfgd.core.models.config import Interface, InterfaceList
from cfgd.core.models.settings import ServiceTarget
from cfgd.core.models.template import GeneratedFile
from cfgd.core.security.input_validation import check_interface_name
from cfgd.core.services.renderers.base import RenderContext, rejected

logger = logging.getLogger(__name__)


def network_file_path(name: str, ctx: RenderContext) -> str:
    return str(Path(ctx.paths.network_dir) / f"{name}{ctx.paths.network_suffix}")


def render_interface(iface: Interface, ctx: RenderContext) -> GeneratedFile:
    """Render one ``.network`` file. Pure: no I/O.

    Raises:
        ValueError: An address/prefix pair is malformed or listed under
            the wrong address family.
    """
    lines = [
        "[Match]",
        f"Name={iface.name}",
    ]

    mtu = iface.effective_mtu
    if mtu is not None:
        lines += ["[Link]", f"MTUBytes={mtu}"]

    lines += [
        "[Network]",
        f"DHCP={'yes' if iface.dhcp_enabled else 'no'}",
    ]
    for version, family in ((4, iface.ipv4), (6, iface.ipv6)):
        for entry in family.addresses:
            lines.append(f"Address={entry.cidr_in(version)}")

    forward = iface.ip_forward
    if forward is not None:
        lines.append(f"IPForward={forward}")

    return GeneratedFile(
        path=network_file_path(iface.name, ctx),
        content=ctx.header + "\n".join(lines) + "\n",
        reason=f"interface {iface.name}",
    )


def apply_network(interfaces: InterfaceList, ctx: RenderContext) -> ApplyResult:
    """Replace all generated ``.network`` files and reload networkd.

    A failure on one interface is recorded and the remaining interfaces
    are still written; files already written are not rolled back.
    """
    result = ApplyResult(domain="interfaces")

    result.add(ctx.writer.remove_matching(ctx.paths.network_dir, f"*{ctx.paths.network_suffix}"))

    for iface in interfaces:
        error = check_interface_name(iface.name)
        if error:
            rejected(result, f"{ctx.paths.network_dir}/{iface.name!r}", error)
            continue

        try:
            generated = render_interface(iface, ctx)
        except ValueError as e:
            rejected(result, network_file_path(iface.name, ctx), f"Invalid address: {e}")
            continue

        logger.info(
            "Interface %s: dhcp=%s, %d address(es)",
            iface.name,
            "yes" if iface.dhcp_enabled else "no",
            len(iface.ipv4.addresses) + len(iface.ipv6.addresses),
        )
        result.add(ctx.writer.write_file(generated))

    result.add(ctx.systemctl("reload-or-restart", ServiceTarget.NETWORK_INTERFACES))
    return result
